# workflow_mermaid/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .constants import DIRECTION_DEFAULT, DIRECTIONS, LINK_BRANCH_DEFAULT
from .errors import CycleDetectedError, LookupFailure
from .io import load_registry
from .render import RenderConfig, render_registry
from .validate import validate_registry
from .writer import write_md


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-mermaid",
        description=(
            "Generate Mermaid flowcharts of GitHub Actions workflows: which events "
            "trigger which workflows, and how their jobs depend on each other."
        ),
    )
    parser.add_argument(
        "projects",
        nargs="+",
        type=Path,
        help="Project checkout(s) containing package.json and .github/workflows/",
    )
    parser.add_argument(
        "--on",
        type=str,
        default=None,
        help="Only include workflows activated by this condition (e.g. schedule, push).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the identifier table after each diagram.",
    )
    parser.add_argument(
        "--direction",
        type=str,
        choices=DIRECTIONS,
        default=DIRECTION_DEFAULT,
        help="Flowchart direction",
    )
    parser.add_argument(
        "--branch",
        type=str,
        default=LINK_BRANCH_DEFAULT,
        help="Branch used when building links to workflow files",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write a Markdown document instead of printing to stdout",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on validation warnings (e.g., reused workflow names). Errors always fail.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        registry = load_registry(args.projects, branch=args.branch)
    except (OSError, ValueError, TypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2) from e

    errors, warnings = validate_registry(registry, on=args.on)
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    cfg = RenderConfig(direction=args.direction, markdown=True, debug=args.debug)
    try:
        diagrams = render_registry(registry, on=args.on, cfg=cfg)
    except (LookupFailure, CycleDetectedError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2) from e

    if args.out is not None:
        title = ", ".join(project.name for project in registry.projects.values())
        write_md(args.out, f"Workflows: {title}", diagrams)
        return

    for diagram in diagrams:
        print(diagram)


if __name__ == "__main__":
    main()

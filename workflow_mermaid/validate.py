# workflow_mermaid/validate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .builder import build_pipeline_graph
from .model import NodeKind, Pipeline, Registry

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""


def _rendered_pipelines(registry: Registry, on: Optional[str]) -> list[Pipeline]:
    """Workflows that survive `cull`, i.e. the ones whose jobs get drawn."""
    graph = build_pipeline_graph(registry, on=on, skip_unknown_parents=True)
    return [node for node in graph.nodes.values() if node.kind is NodeKind.PIPELINE]


def validate_registry_issues(
    registry: Registry, on: Optional[str] = None
) -> list[ValidationIssue]:
    """Collect every lookup problem before any diagram is rendered.

    The graph builder and renderer raise on the first unknown reference;
    this reports all of them at once. `on` mirrors the CLI filter, and jobs
    are only checked for workflows that will actually be drawn.
    """

    issues: list[ValidationIssue] = []

    for shadowed in registry.shadowed:
        issues.append(
            ValidationIssue(
                "warning",
                "W_WORKFLOW_NAME_SHADOWED",
                f"workflow name {shadowed.name!r} from {shadowed.path} is reused; "
                "only the last definition is rendered",
                path=shadowed.path,
            )
        )

    # Same selection as the builder, which raises on these.
    for pipeline in registry.pipelines.values():
        if on is not None and not pipeline.activated_by(on):
            continue
        for parent_name in pipeline.parent_names():
            if parent_name not in registry.pipelines:
                issues.append(
                    ValidationIssue(
                        "error",
                        "E_WORKFLOW_RUN_UNKNOWN_WORKFLOW",
                        f"workflow {pipeline.name!r} is triggered by unknown workflow "
                        f"{parent_name!r}",
                        path=f"{pipeline.path}:on/workflow_run/workflows",
                    )
                )

    for pipeline in _rendered_pipelines(registry, on):
        job_ids = {step.id for step in pipeline.steps}
        for step in pipeline.steps:
            for needed in step.needs:
                if needed not in job_ids:
                    issues.append(
                        ValidationIssue(
                            "error",
                            "E_JOB_NEEDS_UNKNOWN_JOB",
                            f"job {step.id!r} of workflow {pipeline.name!r} needs unknown "
                            f"job {needed!r}",
                            path=f"{pipeline.path}:jobs/{step.id}/needs",
                        )
                    )

    return issues


def validate_registry(
    registry: Registry, on: Optional[str] = None
) -> Tuple[list[str], list[str]]:
    """Return (errors, warnings) as plain messages."""
    issues = validate_registry_issues(registry, on=on)
    errors = [iss.message for iss in issues if iss.severity == "error"]
    warnings = [iss.message for iss in issues if iss.severity == "warning"]
    return errors, warnings

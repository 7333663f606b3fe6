from __future__ import annotations

from pathlib import Path


def write_md(path: Path, title: str, diagrams: list[str]) -> None:
    """Write a titled Markdown file holding already-fenced diagram blocks."""
    path.parent.mkdir(parents=True, exist_ok=True)
    body = "\n".join(d.rstrip() + "\n" for d in diagrams)
    content = f"# {title}\n\n{body}"
    path.write_text(content, encoding="utf-8")

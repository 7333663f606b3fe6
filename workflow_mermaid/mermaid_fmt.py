from __future__ import annotations

from typing import Optional

from .constants import CLICK_TOOLTIP
from .model import Shape

# Opening/closing bracket pairs wrapped around the quoted label.
GLYPHS: dict[Shape, tuple[str, str]] = {
    Shape.ROUND_EDGES: ("(", ")"),
    Shape.STADIUM: ("([", "])"),
    Shape.SUBROUTINE: ("[[", "]]"),
    Shape.CYLINDER: ("[(", ")]"),
    Shape.CIRCLE: ("((", "))"),
    Shape.FLAG: (">", "]"),
    Shape.RHOMBUS: ("{", "}"),
    Shape.HEXAGON: ("{{", "}}"),
    Shape.PARALLELOGRAM: ("[/", "/]"),
    Shape.PARALLELOGRAM_ALT: ("[\\", "\\]"),
    Shape.TRAPEZOID: ("[/", "\\]"),
    Shape.TRAPEZOID_ALT: ("[\\", "/]"),
    Shape.DOUBLE_CIRCLE: ("(((", ")))"),
}


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def text_block(text: str) -> str:
    """Wrap plain text in an unlabelled code fence."""
    return "```\n" + text.rstrip() + "\n```\n"


def mm_label(text: str) -> str:
    """Make a display name safe inside a double-quoted Mermaid label.

    Only double quotes are rewritten; `<br>` and other inline HTML stay
    intact so multi-line trigger labels keep working.
    """
    return str(text).replace('"', "'")


def mm_node(node_id: str, label: str, shape: Shape | str) -> Optional[str]:
    """Format a flowchart node declaration, or None for an unknown shape."""
    try:
        opening, closing = GLYPHS[Shape(shape)]
    except ValueError:
        return None
    return f'{node_id}{opening}"{mm_label(label)}"{closing}'


def mm_subgraph_open(subgraph_id: str, title: str) -> str:
    return f'subgraph {subgraph_id}["{mm_label(title)}"]'


def mm_subgraph_close() -> str:
    return "end"


def mm_flow_edge(src: str, dst: str, label: str | None = None) -> str:
    if label:
        return f"{src}-- {label} -->{dst}"
    return f"{src} --> {dst}"


def mm_click(node_id: str, url: str, tooltip: str = CLICK_TOOLTIP) -> str:
    return f'click {node_id} href "{url}" "{mm_label(tooltip)}"'


def mm_header(direction: str) -> str:
    return f"flowchart {direction}"

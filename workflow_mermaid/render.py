# workflow_mermaid/render.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from .builder import build_pipeline_graph
from .constants import DIRECTION_DEFAULT, DIRECTIONS, INDENT
from .graph import Graph
from .ids import IdAllocator
from .matrix import build_step_graph, expand_step
from .mermaid_fmt import (
    mermaid_block,
    mm_click,
    mm_flow_edge,
    mm_header,
    mm_node,
    mm_subgraph_close,
    mm_subgraph_open,
)
from .model import Node, NodeKind, Pipeline, Registry


@dataclass(frozen=True)
class RenderConfig:
    direction: str = DIRECTION_DEFAULT
    markdown: bool = True
    debug: bool = False


class FlowchartPrinter:
    """Accumulates one Mermaid flowchart.

    Each printer owns its IdAllocator, so identifiers are stable within one
    diagram but not across diagrams.
    """

    def __init__(self, direction: str = DIRECTION_DEFAULT, markdown: bool = True) -> None:
        if direction not in DIRECTIONS:
            raise ValueError(f"unknown flowchart direction: {direction!r}")
        self.markdown = markdown
        self.ids = IdAllocator()
        self._lines: list[str] = []
        self._depth = 0

        self._print(mm_header(direction))
        self._depth += 1

    def _print(self, line: str) -> None:
        self._lines.append(" " * (self._depth * INDENT) + line)

    @contextmanager
    def subgraph(self, key: str, title: str) -> Iterator[str]:
        subgraph_id = self.ids.get(key)
        self._print(mm_subgraph_open(subgraph_id, title))
        self._depth += 1
        try:
            yield subgraph_id
        finally:
            self._depth -= 1
            self._print(mm_subgraph_close())

    def node(self, node: Node) -> None:
        line = mm_node(self.ids.get(node.key), node.name, node.shape)
        if line is None:
            return
        self._print(line)
        if node.link:
            self._print(mm_click(self.ids.get(node.key), node.link))

    def edge(self, source: Node, destination: Node, label: Optional[str] = None) -> None:
        self._print(mm_flow_edge(self.ids.get(source.key), self.ids.get(destination.key), label))

    def text(self) -> str:
        code = "\n".join(self._lines)
        if self.markdown:
            return mermaid_block(code)
        return code + "\n"


def render_pipeline(printer: FlowchartPrinter, pipeline: Pipeline) -> None:
    """Render a workflow as a subgraph of its jobs.

    Root jobs with a matrix become a nested subgraph holding one node per
    variation. A workflow without jobs renders as a single node.
    """
    steps = build_step_graph(pipeline)
    if not steps.nodes:
        printer.node(pipeline)
        return

    root_keys = {step.key for step in steps.roots()}
    with printer.subgraph(pipeline.key, pipeline.name):
        for step in steps.nodes.values():
            variations = expand_step(step) if step.key in root_keys else []
            if not variations:
                printer.node(step)
                continue

            with printer.subgraph(step.key, step.name):
                for variation in variations:
                    printer.node(variation)

        for edge in steps.edges:
            printer.edge(*edge)


def render_component(graph: Graph[Node], cfg: RenderConfig = RenderConfig()) -> str:
    printer = FlowchartPrinter(cfg.direction, markdown=cfg.markdown)

    for node in graph.nodes.values():
        if node.kind is NodeKind.PIPELINE:
            render_pipeline(printer, node)
        else:
            printer.node(node)

    for edge in graph.edges:
        printer.edge(*edge)

    out = printer.text()
    if cfg.debug:
        out += printer.ids.debug_block()
    return out


def render_components(graph: Graph[Node], cfg: RenderConfig = RenderConfig()) -> list[str]:
    """Render every connected component of a culled top-level graph."""
    return [render_component(sub, cfg) for sub in graph.connected_subgraphs()]


def render_registry(
    registry: Registry, on: Optional[str] = None, cfg: RenderConfig = RenderConfig()
) -> list[str]:
    return render_components(build_pipeline_graph(registry, on=on), cfg)

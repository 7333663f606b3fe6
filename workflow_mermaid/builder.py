# workflow_mermaid/builder.py
from __future__ import annotations

from typing import Optional

from .graph import Graph
from .model import Node, Registry
from .triggers import TriggerResolver


def build_pipeline_graph(
    registry: Registry, on: Optional[str] = None, *, skip_unknown_parents: bool = False
) -> Graph[Node]:
    """Build the top-level trigger -> workflow -> workflow graph.

    With `on` set, only workflows activated by that condition contribute
    (their `workflow_run` parents are still pulled in as sources). Jobs are
    not part of this graph; the renderer expands them per workflow.

    Raises:
        UnknownPipelineError: a `workflow_run` parent is not registered
            (unless `skip_unknown_parents`, which drops such edges instead).
    """
    resolver = TriggerResolver(registry.triggers)
    graph: Graph[Node] = Graph()

    for pipeline in registry.pipelines.values():
        if on is not None and not pipeline.activated_by(on):
            continue

        graph.add_node(pipeline)
        for trigger in resolver.resolve_all(pipeline):
            graph.add_node(trigger)
            graph.add_edge(trigger, pipeline)

        for parent_name in pipeline.parent_names():
            if skip_unknown_parents and parent_name not in registry.pipelines:
                continue
            parent = registry.pipeline(parent_name)
            graph.add_node(parent)
            graph.add_edge(parent, pipeline)

    graph.cull()
    return graph

# workflow_mermaid/triggers.py
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from .model import Pipeline, Trigger


class TriggerKind(str, Enum):
    """Activation conditions (`on:` keys) that map to trigger nodes."""

    WORKFLOW_DISPATCH = "workflow_dispatch"
    SCHEDULE = "schedule"
    PUSH = "push"
    PULL_REQUEST = "pull_request"
    MERGE_GROUP = "merge_group"
    ISSUES = "issues"
    LABEL = "label"
    RELEASE = "release"


TriggerHandler = Callable[[Any, Pipeline], list[Trigger]]


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _workflow_dispatch(_: Any, __: Pipeline) -> list[Trigger]:
    return [Trigger(id="on:workflow_dispatch", name="Manual")]


def _schedule(data: Any, _: Pipeline) -> list[Trigger]:
    nodes: list[Trigger] = []
    for entry in _as_list(data):
        cron = entry.get("cron") if isinstance(entry, dict) else None
        if not isinstance(cron, str):
            continue
        nodes.append(Trigger(id=f"on:schedule/{cron}", name=f"Schedule<br>{cron}"))
    return nodes


def _push(data: Any, pipeline: Pipeline) -> list[Trigger]:
    project = pipeline.project.name
    data = data if isinstance(data, dict) else {}
    tags = _as_list(data.get("tags"))
    branches = _as_list(data.get("branches"))

    nodes: list[Trigger] = []
    for tag in tags:
        nodes.append(
            Trigger(id=f"on:push/{project}/tag/{tag}", name=f"Push {project}<br>tag {tag}")
        )
    for branch in branches:
        nodes.append(
            Trigger(id=f"on:push/{project}/branch/{branch}", name=f"Push {project}<br>{branch}")
        )

    # Unfiltered push: any ref of the project.
    if not tags and not branches:
        nodes.append(Trigger(id=f"on:push/{project}", name=f"Push {project}"))
    return nodes


def _pull_request(_: Any, pipeline: Pipeline) -> list[Trigger]:
    project = pipeline.project.name
    return [Trigger(id=f"on:pull_request/{project}", name=f"Pull Request<br>{project}")]


def _merge_group(_: Any, pipeline: Pipeline) -> list[Trigger]:
    project = pipeline.project.name
    return [Trigger(id=f"on:merge_group/{project}", name=f"Merge Queue<br>{project}")]


def _issues(_: Any, pipeline: Pipeline) -> list[Trigger]:
    project = pipeline.project.name
    return [Trigger(id=f"on:issues/{project}", name=f"{project} Issues")]


def _label(_: Any, __: Pipeline) -> list[Trigger]:
    return [Trigger(id="on:label", name="on: Label")]


def _release(_: Any, pipeline: Pipeline) -> list[Trigger]:
    project = pipeline.project.name
    return [Trigger(id=f"on:release/{project}", name=f"{project} Release")]


TRIGGER_HANDLERS: dict[TriggerKind, TriggerHandler] = {
    TriggerKind.WORKFLOW_DISPATCH: _workflow_dispatch,
    TriggerKind.SCHEDULE: _schedule,
    TriggerKind.PUSH: _push,
    TriggerKind.PULL_REQUEST: _pull_request,
    TriggerKind.MERGE_GROUP: _merge_group,
    TriggerKind.ISSUES: _issues,
    TriggerKind.LABEL: _label,
    TriggerKind.RELEASE: _release,
}


def trigger_kind(condition: str) -> Optional[TriggerKind]:
    try:
        return TriggerKind(condition)
    except ValueError:
        return None


class TriggerResolver:
    """Resolve a workflow's `on:` conditions to shared trigger nodes.

    Nodes are deduplicated through `triggers` (normally `Registry.triggers`):
    the first node created for an id is returned for every later request.
    """

    def __init__(self, triggers: dict[str, Trigger]) -> None:
        self.triggers = triggers

    def resolve(self, condition: str, pipeline: Pipeline) -> list[Trigger]:
        kind = trigger_kind(condition)
        if kind is None:
            return []

        data = pipeline.activation.get(condition)
        resolved: list[Trigger] = []
        for node in TRIGGER_HANDLERS[kind](data, pipeline):
            resolved.append(self.triggers.setdefault(node.id, node))
        return resolved

    def resolve_all(self, pipeline: Pipeline) -> list[Trigger]:
        nodes: list[Trigger] = []
        for condition in pipeline.activation:
            nodes.extend(self.resolve(condition, pipeline))
        return nodes

# workflow_mermaid/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .errors import UnknownPipelineError, UnknownStepError


class Shape(str, Enum):
    """Flowchart node shapes understood by the renderer."""

    ROUND_EDGES = "round edges"
    STADIUM = "stadium"
    SUBROUTINE = "subroutine"
    CYLINDER = "cylinder"
    CIRCLE = "circle"
    FLAG = "flag"
    RHOMBUS = "rhombus"
    HEXAGON = "hexagon"
    PARALLELOGRAM = "parallelogram"
    PARALLELOGRAM_ALT = "parallelogram_alt"
    TRAPEZOID = "trapezoid"
    TRAPEZOID_ALT = "trapezoid_alt"
    DOUBLE_CIRCLE = "double_circle"


class NodeKind(str, Enum):
    TRIGGER = "trigger"
    PIPELINE = "pipeline"
    STEP = "step"


@dataclass(frozen=True)
class Trigger:
    """An event that activates workflows.

    `id` is the composite identity (e.g. `on:schedule/0 0 * * *`); two
    declarations with the same id are the same node.
    """

    id: str
    name: str
    shape: Shape = Shape.CIRCLE
    link: Optional[str] = None
    kind: NodeKind = field(default=NodeKind.TRIGGER, init=False)

    @property
    def key(self) -> str:
        return self.id


@dataclass(eq=False)
class Step:
    """One job of a workflow."""

    id: str
    name: str
    pipeline: str
    needs: list[str] = field(default_factory=list)
    matrix: Any = None
    link: Optional[str] = None
    shape: Shape = Shape.SUBROUTINE
    kind: NodeKind = field(default=NodeKind.STEP, init=False)

    @property
    def key(self) -> str:
        # Job ids are only unique inside their workflow.
        return f"job:{self.pipeline}/{self.id}"


@dataclass(eq=False)
class Pipeline:
    """One workflow definition file."""

    id: str
    name: str
    path: str
    project: "Project" = field(repr=False)
    activation: dict[str, Any] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)
    link: Optional[str] = None
    shape: Shape = Shape.HEXAGON
    kind: NodeKind = field(default=NodeKind.PIPELINE, init=False)

    @property
    def key(self) -> str:
        return f"workflow:{self.id}"

    def activated_by(self, condition: str) -> bool:
        return condition in self.activation

    def step(self, step_id: str) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise UnknownStepError(
            f"job {step_id!r} needed by workflow {self.name!r} does not exist"
        )

    def parent_names(self) -> list[str]:
        """Workflow names listed under `on.workflow_run.workflows`."""
        data = self.activation.get("workflow_run")
        if not isinstance(data, dict):
            return []
        parents = data.get("workflows") or []
        if isinstance(parents, str):
            return [parents]
        return [p for p in parents if isinstance(p, str)]


Node = Union[Trigger, Pipeline, Step]


@dataclass(eq=False)
class Project:
    name: str
    url: str
    path: str
    pipelines: dict[str, Pipeline] = field(default_factory=dict, repr=False)
    shadowed: list[Pipeline] = field(default_factory=list, repr=False)

    def add_pipeline(self, pipeline: Pipeline) -> None:
        previous = self.pipelines.get(pipeline.name)
        if previous is not None:
            self.shadowed.append(previous)
        self.pipelines[pipeline.name] = pipeline


@dataclass
class Registry:
    """Everything ingested for one run.

    Built once by ingest, then handed to the graph builder; the trigger map
    is filled while triggers are resolved.
    """

    projects: dict[str, Project] = field(default_factory=dict)
    pipelines: dict[str, Pipeline] = field(default_factory=dict)
    triggers: dict[str, Trigger] = field(default_factory=dict)
    shadowed: list[Pipeline] = field(default_factory=list, repr=False)

    def add_project(self, project: Project) -> None:
        self.projects[project.name] = project
        self.shadowed.extend(project.shadowed)
        for name, pipeline in project.pipelines.items():
            previous = self.pipelines.get(name)
            if previous is not None and previous is not pipeline:
                self.shadowed.append(previous)
            self.pipelines[name] = pipeline

    def pipeline(self, name: str) -> Pipeline:
        try:
            return self.pipelines[name]
        except KeyError:
            raise UnknownPipelineError(f"workflow {name!r} does not exist") from None

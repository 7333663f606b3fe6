# workflow_mermaid/matrix.py
from __future__ import annotations

from itertools import product
from typing import Any

from .constants import MATRIX_RESERVED_KEYS
from .graph import Graph
from .model import Pipeline, Step

Combination = dict[str, Any]

NEEDS_LABEL = "needs"
_TOKEN_PREFIX = "${{ matrix."


def build_step_graph(pipeline: Pipeline) -> Graph[Step]:
    """Job graph of one workflow with `needs` edges (needed -> dependent).

    Raises:
        UnknownStepError: a `needs` entry is not a job of this workflow.
    """
    graph: Graph[Step] = Graph()
    for step in pipeline.steps:
        graph.add_node(step)
        for needed in step.needs:
            graph.add_edge(pipeline.step(needed), step, NEEDS_LABEL)
    return graph


def _values(value: Any) -> list[Any]:
    # Expressions such as `${{ fromJSON(...) }}` stand for a single value.
    return value if isinstance(value, list) else [value]


def _mappings(value: Any) -> list[Combination]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def matches(exclusion: Combination, combination: Combination) -> bool:
    """True when every key of `exclusion` has the same value in `combination`."""
    return all(
        key in combination and combination[key] == value for key, value in exclusion.items()
    )


def expand_matrix(matrix: Any) -> list[Combination]:
    """Concrete parameter combinations of a `strategy.matrix`.

    Cartesian product over the parameter keys in declared order, then
    `include` entries appended in order, then every combination matching
    an `exclude` entry removed. A matrix that is not a mapping (an
    expression string) yields no combinations.
    """
    if not isinstance(matrix, dict):
        return []

    keys = [k for k in matrix if k not in MATRIX_RESERVED_KEYS]
    combinations: list[Combination] = []
    # With no parameter keys the product is a single empty combination.
    for values in product(*(_values(matrix[k]) for k in keys)):
        combination = dict(zip(keys, values))
        if combination:
            combinations.append(combination)

    combinations.extend(dict(item) for item in _mappings(matrix.get("include")))

    for exclusion in _mappings(matrix.get("exclude")):
        combinations = [c for c in combinations if not matches(exclusion, c)]

    return combinations


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def variation_name(name: str, combination: Combination) -> str:
    """Display name of one matrix variation.

    `${{ matrix.<key> }}` tokens are substituted; a name without tokens gets
    the values appended, e.g. `Build (linux, x64)`.
    """
    if _TOKEN_PREFIX in name:
        for key, value in combination.items():
            name = name.replace(f"${{{{ matrix.{key} }}}}", format_value(value))
        return name

    values = ", ".join(format_value(v) for v in combination.values())
    return f"{name} ({values})"


def expand_step(step: Step) -> list[Step]:
    """Variation nodes for a job, or [] when it renders as a single node."""
    if not step.matrix:
        return []

    variations: list[Step] = []
    for i, combination in enumerate(expand_matrix(step.matrix)):
        variations.append(
            Step(
                id=f"{step.id}#{i}",
                name=variation_name(step.name, combination),
                pipeline=step.pipeline,
                link=step.link,
                shape=step.shape,
            )
        )
    return variations

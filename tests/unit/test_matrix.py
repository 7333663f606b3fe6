import pytest

from workflow_mermaid.errors import UnknownStepError
from workflow_mermaid.matrix import (
    build_step_graph,
    expand_matrix,
    expand_step,
    variation_name,
)
from workflow_mermaid.model import Step

from tests._helpers import make_pipeline


def test_cartesian_product_in_declared_order():
    combos = expand_matrix({"os": ["a", "b"], "arch": ["x", "y"]})
    assert combos == [
        {"os": "a", "arch": "x"},
        {"os": "a", "arch": "y"},
        {"os": "b", "arch": "x"},
        {"os": "b", "arch": "y"},
    ]


def test_exclude_removes_exact_combination():
    combos = expand_matrix(
        {"os": ["a", "b"], "arch": ["x", "y"], "exclude": [{"os": "a", "arch": "x"}]}
    )
    assert len(combos) == 3
    assert {"os": "a", "arch": "x"} not in combos


def test_exclude_matches_on_its_own_keys():
    combos = expand_matrix({"os": ["a", "b"], "arch": ["x", "y"], "exclude": [{"os": "a"}]})
    assert combos == [{"os": "b", "arch": "x"}, {"os": "b", "arch": "y"}]


def test_include_is_appended_after_product():
    combos = expand_matrix(
        {"os": ["a", "b"], "arch": ["x", "y"], "include": [{"os": "c", "arch": "z"}]}
    )
    assert len(combos) == 5
    assert combos[-1] == {"os": "c", "arch": "z"}


def test_include_only_matrix():
    combos = expand_matrix({"include": [{"node": 18}, {"node": 20}]})
    assert combos == [{"node": 18}, {"node": 20}]


def test_empty_include_entry_is_kept():
    assert expand_matrix({"os": ["a"], "include": [{}]}) == [{"os": "a"}, {}]


def test_everything_excluded_leaves_nothing():
    assert expand_matrix({"os": ["a"], "exclude": [{"os": "a"}]}) == []


def test_expression_matrix_is_not_expanded():
    assert expand_matrix("${{ fromJSON(needs.setup.outputs.matrix) }}") == []


def test_scalar_value_is_a_single_value():
    assert expand_matrix({"os": "${{ inputs.os }}", "node": [18]}) == [
        {"os": "${{ inputs.os }}", "node": 18}
    ]


def test_placeholder_substitution():
    assert variation_name("Build (${{ matrix.os }})", {"os": "linux"}) == "Build (linux)"
    assert (
        variation_name("${{ matrix.os }}/${{ matrix.arch }}", {"os": "mac", "arch": "arm64"})
        == "mac/arm64"
    )


def test_values_appended_without_placeholder():
    assert variation_name("Test", {"os": "linux", "node": 20}) == "Test (linux, 20)"
    assert variation_name("Lint", {"fix": True}) == "Lint (true)"


def test_expand_step_names_variations(project):
    step = Step(
        id="build",
        name="Build (${{ matrix.os }})",
        pipeline="CI",
        matrix={"os": ["linux", "mac"]},
    )
    variations = expand_step(step)
    assert [v.name for v in variations] == ["Build (linux)", "Build (mac)"]
    assert [v.key for v in variations] == ["job:CI/build#0", "job:CI/build#1"]


def test_expand_step_without_matrix_is_single_node():
    assert expand_step(Step(id="lint", name="Lint", pipeline="CI")) == []


def test_step_graph_needs_edges(project):
    pipeline = make_pipeline(
        project,
        "CI",
        {"push": None},
        {
            "lint": {},
            "test": {"needs": ["lint"]},
            "deploy": {"needs": ["lint", "test"]},
        },
    )
    graph = build_step_graph(pipeline)

    assert list(graph.nodes) == ["job:CI/lint", "job:CI/test", "job:CI/deploy"]
    assert [(e.source.id, e.destination.id, e.label) for e in graph.edges] == [
        ("lint", "test", "needs"),
        ("lint", "deploy", "needs"),
        ("test", "deploy", "needs"),
    ]
    assert [s.id for s in graph.roots()] == ["lint"]


def test_unknown_needs_is_fatal(project):
    pipeline = make_pipeline(project, "CI", {"push": None}, {"test": {"needs": ["build"]}})
    with pytest.raises(UnknownStepError, match="'build'"):
        build_step_graph(pipeline)

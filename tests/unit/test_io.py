import json
from pathlib import Path

import pytest

from workflow_mermaid.io import (
    load_project,
    load_registry,
    normalize_activation,
    normalize_repository_url,
)


def _write_project(root: Path, name: str, url, workflows: dict[str, str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    metadata = {"name": name}
    if url is not None:
        metadata["repository"] = url
    (root / "package.json").write_text(json.dumps(metadata), encoding="utf-8")

    wf_dir = root / ".github" / "workflows"
    wf_dir.mkdir(parents=True, exist_ok=True)
    for filename, body in workflows.items():
        (wf_dir / filename).write_text(body, encoding="utf-8")
    return root


CI_YAML = """\
name: CI
on:
  push:
    branches: [main]
  pull_request:
jobs:
  lint:
    runs-on: ubuntu-latest
  test:
    name: Test (${{ matrix.node }})
    needs: lint
    strategy:
      matrix:
        node: [18, 20]
"""


def test_load_project_reads_workflows_and_jobs(tmp_path):
    root = _write_project(
        tmp_path / "app",
        "app",
        {"type": "git", "url": "git+https://github.com/acme/app.git"},
        {"ci.yml": CI_YAML, "notes.txt": "ignored"},
    )

    project = load_project(root)

    assert project.name == "app"
    assert project.url == "https://github.com/acme/app"
    assert list(project.pipelines) == ["CI"]

    ci = project.pipelines["CI"]
    assert ci.project is project
    assert ci.activation == {"push": {"branches": ["main"]}, "pull_request": None}
    assert ci.link == "https://github.com/acme/app/blob/develop/.github/workflows/ci.yml"
    assert [(s.id, s.name, s.needs) for s in ci.steps] == [
        ("lint", "lint", []),
        ("test", "Test (${{ matrix.node }})", ["lint"]),
    ]
    assert ci.steps[1].matrix == {"node": [18, 20]}
    assert ci.steps[1].link == ci.link


def test_unnamed_workflow_uses_file_name_and_branch_option(tmp_path):
    root = _write_project(
        tmp_path / "app",
        "app",
        "https://github.com/acme/app",
        {"release.yaml": "on: workflow_dispatch\njobs:\n  ship: {}\n"},
    )

    project = load_project(root, branch="main")

    pipeline = project.pipelines["release.yaml"]
    assert pipeline.activation == {"workflow_dispatch": None}
    assert pipeline.link == "https://github.com/acme/app/blob/main/.github/workflows/release.yaml"


def test_no_repository_means_no_links(tmp_path):
    root = _write_project(tmp_path / "app", "app", None, {"ci.yml": CI_YAML})
    project = load_project(root)
    assert project.url == ""
    assert project.pipelines["CI"].link is None


def test_missing_project_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_project(tmp_path / "missing")


def test_invalid_yaml_is_reported_with_path(tmp_path):
    root = _write_project(tmp_path / "app", "app", None, {"bad.yml": "jobs: [unclosed\n"})
    with pytest.raises(ValueError, match="bad.yml"):
        load_project(root)


def test_load_registry_tracks_shadowed_names(tmp_path):
    first = _write_project(tmp_path / "a", "a", None, {"ci.yml": CI_YAML})
    second = _write_project(tmp_path / "b", "b", None, {"ci.yml": CI_YAML})

    registry = load_registry([first, second])

    assert list(registry.projects) == ["a", "b"]
    assert registry.pipelines["CI"].project.name == "b"
    assert [p.project.name for p in registry.shadowed] == ["a"]


@pytest.mark.parametrize(
    "on, expected",
    [
        ("push", {"push": None}),
        (["push", "pull_request"], {"push": None, "pull_request": None}),
        ({"schedule": [{"cron": "0 0 * * *"}]}, {"schedule": [{"cron": "0 0 * * *"}]}),
        (None, {}),
    ],
)
def test_normalize_activation(on, expected):
    assert normalize_activation(on) == expected


def test_normalize_repository_url():
    assert normalize_repository_url("https://github.com/acme/app/") == "https://github.com/acme/app"

# workflow_mermaid/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import yaml

from .constants import (
    LINK_BRANCH_DEFAULT,
    PROJECT_METADATA_FILE,
    WORKFLOW_SUFFIXES,
    WORKFLOWS_SUBDIR,
)
from .model import Pipeline, Project, Registry, Step


def _load_yaml_mapping(path: Path) -> dict[Any, Any]:
    raw = path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {path}: {e}") from e

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def _load_json_mapping(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JSON {path}: {e}") from e

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level JSON must be an object in {path}, got {type(data).__name__}"
        )

    return data


def normalize_repository_url(url: str) -> str:
    """Turn an npm repository url into a browsable base url."""
    url = url.strip()
    if url.startswith("git+"):
        url = url[len("git+"):]
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url.rstrip("/")


def _repository_url(metadata: dict[str, Any]) -> str:
    repository = metadata.get("repository")
    if isinstance(repository, dict):
        repository = repository.get("url")
    if isinstance(repository, str):
        return normalize_repository_url(repository)
    return ""


def normalize_activation(on: Any) -> dict[str, Any]:
    """Normalize the `on:` value to a mapping of condition kind -> data.

    `on: push` and `on: [push, pull_request]` carry no per-kind data.
    """
    if on is None:
        return {}
    if isinstance(on, str):
        return {on: None}
    if isinstance(on, list):
        return {str(kind): None for kind in on}
    if isinstance(on, dict):
        return {str(kind): data for kind, data in on.items()}
    raise TypeError(f"unsupported `on:` value of type {type(on).__name__}")


def _activation(doc: dict[Any, Any]) -> Any:
    # YAML 1.1 reads a bare `on` key as boolean True.
    if "on" in doc:
        return doc["on"]
    return doc.get(True)


def _needs(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def workflow_link(url: str, filename: str, branch: str = LINK_BRANCH_DEFAULT) -> str | None:
    if not url:
        return None
    return f"{url}/blob/{branch}/{'/'.join(WORKFLOWS_SUBDIR)}/{filename}"


def load_pipeline(path: Path, project: Project, *, branch: str = LINK_BRANCH_DEFAULT) -> Pipeline:
    """Read one workflow file into a Pipeline with its jobs."""
    doc = _load_yaml_mapping(path)
    name = doc.get("name")
    if not isinstance(name, str) or not name:
        name = path.name

    link = workflow_link(project.url, path.name, branch)
    pipeline = Pipeline(
        id=name,
        name=name,
        path=str(path),
        project=project,
        activation=normalize_activation(_activation(doc)),
        link=link,
    )

    jobs = doc.get("jobs") or {}
    if not isinstance(jobs, dict):
        raise TypeError(f"`jobs` must be a mapping in {path}")

    for job_id, job in jobs.items():
        job = job if isinstance(job, dict) else {}
        strategy = job.get("strategy")
        job_name = job.get("name")
        pipeline.steps.append(
            Step(
                id=str(job_id),
                name=job_name if isinstance(job_name, str) and job_name else str(job_id),
                pipeline=name,
                needs=_needs(job.get("needs")),
                matrix=strategy.get("matrix") if isinstance(strategy, dict) else None,
                link=link,
            )
        )

    return pipeline


def workflow_files(workflows_dir: Path) -> list[Path]:
    return sorted(
        p for p in workflows_dir.iterdir() if p.is_file() and p.suffix in WORKFLOW_SUFFIXES
    )


def load_project(path: Path, *, branch: str = LINK_BRANCH_DEFAULT) -> Project:
    """Load a project checkout: its package.json plus every workflow file."""
    if not path.exists():
        raise FileNotFoundError(str(path))

    metadata = _load_json_mapping(path / PROJECT_METADATA_FILE)
    name = metadata.get("name")
    if not isinstance(name, str) or not name:
        name = path.resolve().name

    project = Project(name=name, url=_repository_url(metadata), path=str(path))

    workflows_dir = path.joinpath(*WORKFLOWS_SUBDIR)
    if not workflows_dir.is_dir():
        return project

    for wf_path in workflow_files(workflows_dir):
        pipeline = load_pipeline(wf_path, project, branch=branch)
        project.add_pipeline(pipeline)

    return project


def load_registry(paths: Iterable[Path], *, branch: str = LINK_BRANCH_DEFAULT) -> Registry:
    """Ingest every project path, in order, into one Registry."""
    registry = Registry()
    for path in paths:
        registry.add_project(load_project(path, branch=branch))
    return registry

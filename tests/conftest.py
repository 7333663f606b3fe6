from __future__ import annotations

import pytest

from workflow_mermaid.model import Project, Registry


@pytest.fixture
def project() -> Project:
    return Project(name="app", url="", path="/src/app")


@pytest.fixture
def registry() -> Registry:
    return Registry()

# workflow_mermaid/constants.py
from __future__ import annotations

DIRECTIONS: tuple[str, ...] = ("TD", "TB", "BT", "RL", "LR")
DIRECTION_DEFAULT = "LR"

# Spaces per nesting level in the emitted flowchart.
INDENT = 4

# First allocated id is 10 -> "a"; 0-9 would render as bare digits.
ID_START = 10

PROJECT_METADATA_FILE = "package.json"
WORKFLOWS_SUBDIR: tuple[str, ...] = (".github", "workflows")
WORKFLOW_SUFFIXES: tuple[str, ...] = (".yml", ".yaml")

LINK_BRANCH_DEFAULT = "develop"
CLICK_TOOLTIP = "Click to open workflow"

# Keys of strategy.matrix that are overrides, not parameters.
MATRIX_RESERVED_KEYS: tuple[str, ...] = ("include", "exclude")

# workflow_mermaid/errors.py
from __future__ import annotations


class LookupFailure(KeyError):
    """A workflow or job references a name that was never ingested.

    Lookup failures are fatal: the run aborts before anything is printed.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable on stderr.
        return str(self.args[0]) if self.args else ""


class UnknownPipelineError(LookupFailure):
    """A `workflow_run` trigger names a workflow that does not exist."""


class UnknownStepError(LookupFailure):
    """A job lists a `needs` entry that is not a job of the same workflow."""


class CycleDetectedError(ValueError):
    """Graph traversal reached a node already on the current path."""

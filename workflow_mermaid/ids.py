# workflow_mermaid/ids.py
from __future__ import annotations

from .constants import ID_START
from .mermaid_fmt import text_block

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Lowercase base-36 representation of a non-negative integer."""
    if value < 0:
        raise ValueError(f"cannot encode negative value {value!r}")
    if value == 0:
        return "0"

    out: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


class IdAllocator:
    """Short, renderer-safe identifiers for arbitrary string keys.

    Identifiers are memoized for the lifetime of the allocator, so the same
    key always maps to the same id within one diagram.
    """

    def __init__(self, start: int = ID_START) -> None:
        self._next = start
        self._ids: dict[str, str] = {}

    def get(self, key: str) -> str:
        existing = self._ids.get(key)
        if existing is not None:
            return existing

        new_id = to_base36(self._next)
        self._ids[key] = new_id
        self._next += 1
        return new_id

    def __len__(self) -> int:
        return len(self._ids)

    def table(self) -> list[tuple[str, str]]:
        """(id, key) pairs in allocation order."""
        return [(short, key) for key, short in self._ids.items()]

    def debug_block(self) -> str:
        return text_block("\n".join(f"{short}: {key}" for short, key in self.table()))

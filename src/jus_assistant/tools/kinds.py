from __future__ import annotations

from enum import Enum


class ToolKind(str, Enum):
    """Function tools the assistant is allowed to call."""

    SEARCH_LEGAL = "search_legal"

    @classmethod
    def from_name(cls, name: str | None) -> "ToolKind | None":
        for kind in cls:
            if kind.value == name:
                return kind
        return None

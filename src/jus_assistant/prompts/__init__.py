"""Assistant instructions.

Sections are stored as separate .txt files and joined in order when the
assistant is provisioned. Set ASSISTANT_INSTRUCTIONS to replace them with a
single custom text.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Order of instruction sections (filenames without .txt)
PROMPT_SECTION_ORDER = (
    "role",
    "search_tool",
    "citations",
)


def _prompts_dir() -> Path:
    return Path(__file__).resolve().parent


def _load_section(name: str) -> str:
    path = _prompts_dir() / f"{name}.txt"
    if not path.exists():
        logger.warning("Prompt section not found: %s", path)
        return ""
    return path.read_text(encoding="utf-8").strip()


def build_instructions(
    *,
    section_order: tuple[str, ...] | None = None,
    separator: str = "\n\n",
) -> str:
    """Load and join the instruction sections in order."""
    order = section_order or PROMPT_SECTION_ORDER
    parts = [content for content in (_load_section(name) for name in order) if content]
    return separator.join(parts)


def get_instructions(override: str | None = None) -> str:
    if override and override.strip():
        return override.strip()
    return build_instructions()


__all__ = [
    "PROMPT_SECTION_ORDER",
    "build_instructions",
    "get_instructions",
]

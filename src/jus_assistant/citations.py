from __future__ import annotations

import re

# File-search annotations such as 【4:0†source】
_CITATION_MARKER = re.compile(r"【\d+:\d+†[^】]*】")


def strip_citation_markers(text: str) -> str:
    """Remove file-search citation markers from assistant text."""
    return _CITATION_MARKER.sub("", text)

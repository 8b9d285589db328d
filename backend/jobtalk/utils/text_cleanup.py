"""
Text cleanup utilities for raw LLM output.
"""

from __future__ import annotations

import re

_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove an optional surrounding ```json ... ``` fence and outer whitespace."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def normalize_message(text: str) -> str:
    """Collapse runs of blank lines and trim a user chat message."""
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()

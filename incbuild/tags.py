from __future__ import annotations

import re

from .constants import HTML_ELEMENTS

# `.` does not match newlines, so each match stays within one line and runs
# from the first `<` to the last `>` on it.
ELEMENT_RE = re.compile(r"<.*>")

_STANDARD_NAMES: frozenset[str] = frozenset(HTML_ELEMENTS)


def extract_element_tokens(text: str) -> list[str]:
    """Return the raw `<...>` spans found in `text`, one per matching line."""
    return ELEMENT_RE.findall(text)


def element_name(token: str) -> str:
    """`<name attributes>` -> `name`."""
    end = token.find(">")
    if end == -1:
        end = len(token)
    space = token.find(" ")
    if space != -1:
        end = min(end, space)
    return token[1:end]


def is_custom_element(token: str) -> bool:
    # Closing tags come out as "/name" and therefore count as custom.
    return element_name(token) not in _STANDARD_NAMES


def custom_element_names(text: str) -> set[str]:
    """Deduplicated names of every non-standard element referenced in `text`."""
    return {
        element_name(token)
        for token in extract_element_tokens(text)
        if is_custom_element(token)
    }

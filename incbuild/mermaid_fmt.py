from __future__ import annotations

import html
import re

# Mermaid node IDs must be alphanumeric/underscore and must not start with a
# digit.
MERMAID_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_UNSAFE_ID_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def mm_text(text: str) -> str:
    """Escape text for Mermaid labels."""
    normalized = re.sub(r"\s+", " ", html.unescape(str(text))).strip()
    return (
        normalized.replace("&", "#amp;")
        .replace("<", "#lt;")
        .replace(">", "#gt;")
        .replace('"', "#quot;")
        .replace("|", "#124;")
    )


def mm_safe_id(tag: str, used: set[str]) -> str:
    """Derive a unique Mermaid-safe node id from a tag identity.

    Tag identities come from file names and may contain `-`, `.` or start
    with a digit.
    """
    base = _UNSAFE_ID_CHARS_RE.sub("_", tag) or "_"
    if not MERMAID_ID_RE.match(base):
        base = "t_" + base
    candidate = base
    n = 2
    while candidate in used:
        candidate = f"{base}_{n}"
        n += 1
    used.add(candidate)
    return candidate


def mm_flow_node(node_id: str, label: str) -> str:
    return f'  {node_id}["{mm_text(label)}"]'


def mm_flow_edge(src: str, dst: str, *, dotted: bool = False) -> str:
    if dotted:
        return f"  {src} -.-> {dst}"
    return f"  {src} --> {dst}"


def mm_class_def(class_name: str, style: str) -> str:
    return f"  classDef {class_name} {style}"


def mm_class_apply(node_ids: list[str] | tuple[str, ...], class_name: str) -> str:
    return f"  class {','.join(node_ids)} {class_name}"


def mm_comment(text: str) -> str:
    # Ensure it won't be parsed as a directive.
    t = str(text).replace("\n", " ").strip()
    if t.startswith("{"):
        t = " " + t
    return f"%% {t}"

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from .model import BuildGraph

Severity = Literal["error", "warning"]

# Characters that end an element name; a tag containing one can never match.
_NAME_BREAKERS = (" ", ">", "<")


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Validation configuration.

    `ignore` drops issues by code; `escalate` turns warnings into errors.
    `strict` escalates every warning.
    """

    ignore: frozenset[str] = field(default_factory=frozenset)
    escalate: frozenset[str] = field(default_factory=frozenset)
    strict: bool = False


def validate_graph_issues(
    graph: BuildGraph, cfg: Optional[ValidateConfig] = None
) -> list[ValidationIssue]:
    """Return structured issues for a scanned graph, in deterministic order."""

    cfg = cfg or ValidateConfig()
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error"
            if severity == "warning" and (cfg.strict or code in cfg.escalate)
            else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    for tag, replaced, entry in graph.duplicates:
        emit(
            "warning",
            "W_DUPLICATE_TAG",
            f"tag {tag!r} is defined by both {replaced.relative_path}{replaced.extension} "
            f"and {entry.relative_path}{entry.extension}; the latter wins",
            path=entry.relative_path + entry.extension,
            hint="Tag identities come from file names and must be unique across the tree",
        )

    for tag in sorted(graph.index):
        entry = graph.index[tag]
        if any(ch in tag for ch in _NAME_BREAKERS):
            emit(
                "warning",
                "W_TAG_UNREFERENCEABLE",
                f"tag {tag!r} contains a space or angle bracket and cannot be included",
                path=entry.relative_path + entry.extension,
            )

        deps = graph.dependencies(tag)
        if tag in deps:
            emit(
                "warning",
                "W_SELF_REFERENCE",
                f"{tag!r} includes itself; the reference is left unexpanded",
                path=entry.relative_path + entry.extension,
            )

    dangling = graph.dangling_references()
    for tag in sorted(dangling):
        entry = graph.index[tag]
        for name in sorted(dangling[tag]):
            # Closing tags ("/name") and empty brackets are never includes.
            if not name or name.startswith("/"):
                continue
            emit(
                "warning",
                "W_DANGLING_REFERENCE",
                f"{tag!r} references <{name}> but no document defines it; left literal",
                path=entry.relative_path + entry.extension,
            )

    return issues

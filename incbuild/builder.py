from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .graph_diagram import gen_dependency_flow
from .io import read_text
from .model import BuildGraph, SourceEntry
from .scan import scan_tree
from .toposort import BuildError, build_order
from .validate import ValidateConfig, ValidationIssue, validate_graph_issues
from .writer import write_md, write_output


@dataclass
class BuildResult:
    order: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)


def expand_includes(
    tag: str, content: str, index: Mapping[str, SourceEntry], in_dir: Path
) -> str:
    """Replace every `<name>` of an indexed tag with that tag's source text.

    Substitution is a single scan of `content`: included text is pasted
    as-is, so references nested inside it stay literal.
    """
    pasted: dict[str, str] = {}
    for name, entry in index.items():
        ref = f"<{name}>"
        if ref not in content:
            continue
        if name == tag:
            print(
                f"error: recursion is not allowed, leaving {ref} unexpanded in {tag!r}",
                file=sys.stderr,
            )
            continue
        pasted[ref] = read_text(entry.source_path(in_dir))

    if not pasted:
        return content

    pattern = re.compile("|".join(re.escape(ref) for ref in pasted))
    return pattern.sub(lambda m: pasted[m.group(0)], content)


def build_tag(
    tag: str, index: Mapping[str, SourceEntry], in_dir: Path, out_dir: Path
) -> Path:
    """Expand one document and write it to its mirrored output path."""
    entry = index[tag]
    in_path = entry.source_path(in_dir)
    out_path = entry.output_path(out_dir)
    print(f"build {tag} at {in_path}, into {out_path}")

    content = expand_includes(tag, read_text(in_path), index, in_dir)
    write_output(out_path, content)
    return out_path


def _report(issue: ValidationIssue) -> None:
    print(f"{issue.severity}: {issue.message}", file=sys.stderr)
    if issue.hint:
        print(f"{issue.severity}: hint: {issue.hint}", file=sys.stderr)


def _raise_on_errors(issues: list[ValidationIssue]) -> None:
    for issue in issues:
        if issue.severity == "warning":
            _report(issue)

    errors = [iss for iss in issues if iss.severity == "error"]
    if errors:
        for issue in errors:
            _report(issue)
        raise BuildError(f"validation failed with {len(errors)} error(s)")


def build(
    in_dir: Path,
    out_dir: Path,
    *,
    cfg: Optional[ValidateConfig] = None,
    graph_report: Optional[Path] = None,
) -> BuildResult:
    """Scan `in_dir`, order the includes and write the expanded tree to `out_dir`.

    Nothing is written when validation fails or the include graph has a cycle.
    """
    graph: BuildGraph = scan_tree(in_dir, exclude=(out_dir,))

    issues = validate_graph_issues(graph, cfg)
    _raise_on_errors(issues)

    order = build_order(graph.digraph, graph.index)

    if graph_report is not None:
        write_md(graph_report, f"Include graph of {in_dir}", gen_dependency_flow(graph, order))

    result = BuildResult(order=order, issues=issues)
    for tag in order:
        result.written.append(build_tag(tag, graph.index, in_dir, out_dir))
    return result

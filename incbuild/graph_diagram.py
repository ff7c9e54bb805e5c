from __future__ import annotations

from .mermaid_fmt import (
    mm_class_apply,
    mm_class_def,
    mm_comment,
    mm_flow_edge,
    mm_flow_node,
    mm_safe_id,
)
from .model import BuildGraph


def gen_dependency_flow(graph: BuildGraph, order: list[str]) -> str:
    """Generate the include graph (flowchart TD) of a scanned tree.

    An edge `a --> b` means document `a` includes `b`. Custom names that
    resolve to no document are drawn as dotted edges to `missing` nodes.
    Nodes are declared in build order.
    """
    used: set[str] = set()
    ids: dict[str, str] = {}
    ordered = set(order)
    remaining = sorted(t for t in graph.index if t not in ordered)
    for tag in list(order) + remaining:
        ids[tag] = mm_safe_id(tag, used)

    lines: list[str] = ["flowchart TD", mm_comment("edge a --> b: a includes b")]
    for tag, node_id in ids.items():
        entry = graph.index[tag]
        lines.append(mm_flow_node(node_id, f"{tag} ({entry.relative_path}{entry.extension})"))

    missing: dict[str, str] = {}
    edges: list[str] = []
    for tag, node_id in ids.items():
        for dep in sorted(graph.dependencies(tag)):
            if dep == tag or not dep or dep.startswith("/"):
                continue
            if dep in ids:
                edges.append(mm_flow_edge(node_id, ids[dep]))
                continue
            if dep not in missing:
                missing[dep] = mm_safe_id(f"missing_{dep}", used)
                lines.append(mm_flow_node(missing[dep], f"<{dep}> (missing)"))
            edges.append(mm_flow_edge(node_id, missing[dep], dotted=True))

    lines.extend(edges)
    if missing:
        lines.append(mm_class_def("missing", "stroke-dasharray: 4 4,fill:#fff4e5"))
        lines.append(mm_class_apply(list(missing.values()), "missing"))

    return "\n".join(lines)

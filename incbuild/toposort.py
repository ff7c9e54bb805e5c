from __future__ import annotations

import enum
from collections.abc import Mapping, Set

from .model import SourceEntry


class BuildError(Exception):
    """A condition that aborts the whole build."""


class CycleError(BuildError):
    """The dependency digraph is not acyclic."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("the dependency graph isn't acyclic: " + " -> ".join(cycle))


class VisitState(enum.Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


def _visit(
    vertex: str,
    digraph: Mapping[str, Set[str]],
    states: dict[str, VisitState],
    stack: list[str],
    output: list[str],
) -> None:
    states[vertex] = VisitState.IN_PROGRESS
    stack.append(vertex)
    # Vertices that were referenced but never scanned have no edge set.
    for nxt in sorted(digraph.get(vertex, ())):
        if nxt == vertex:
            # Self-inclusion is reported by the builder, not treated as a cycle.
            continue
        state = states.get(nxt, VisitState.UNVISITED)
        if state is VisitState.IN_PROGRESS:
            raise CycleError(stack[stack.index(nxt):] + [nxt])
        if state is VisitState.UNVISITED:
            _visit(nxt, digraph, states, stack, output)
    stack.pop()
    states[vertex] = VisitState.DONE
    output.append(vertex)


def sort_topologically(digraph: Mapping[str, Set[str]]) -> list[str]:
    """Return a topological order of `digraph`: every vertex precedes its dependencies.

    Raises CycleError on the first back edge found.
    """
    states: dict[str, VisitState] = {v: VisitState.UNVISITED for v in digraph}
    output: list[str] = []
    for vertex in digraph:
        if states[vertex] is VisitState.UNVISITED:
            _visit(vertex, digraph, states, [], output)
    output.reverse()
    return output


def build_order(
    digraph: Mapping[str, Set[str]], index: Mapping[str, SourceEntry]
) -> list[str]:
    """Dependency-first order of every tag that has a source document."""
    order = sort_topologically(digraph)
    order.reverse()
    return [tag for tag in order if tag in index]

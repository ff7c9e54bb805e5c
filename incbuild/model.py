from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .constants import RELATIVE_MARKER

Digraph = dict[str, set[str]]


@dataclass(frozen=True)
class SourceEntry:
    """Where a tag's document lives, relative to the input root.

    `relative_path` is extension-less and carries the `./` marker, e.g.
    `./partials/header`; `extension` keeps the suffix (`.html`) so the output
    file can mirror the input name exactly.
    """

    relative_path: str
    extension: str = ""

    @classmethod
    def from_file(cls, file_path: Path, in_dir: Path) -> "SourceEntry":
        rel = PurePosixPath(file_path.relative_to(in_dir).as_posix())
        stem = rel.with_name(rel.stem) if rel.suffix else rel
        return cls(relative_path=RELATIVE_MARKER + stem.as_posix(), extension=rel.suffix)

    def _rel(self) -> str:
        rel = self.relative_path
        if rel.startswith(RELATIVE_MARKER):
            rel = rel[len(RELATIVE_MARKER):]
        return rel + self.extension

    def source_path(self, in_dir: Path) -> Path:
        return in_dir / self._rel()

    def output_path(self, out_dir: Path) -> Path:
        return out_dir / self._rel()


def tag_identity(file_path: Path) -> str:
    """Logical name of a document: its filename without the last extension."""
    return file_path.stem


@dataclass
class BuildGraph:
    """Per-build state: dependency digraph, tag -> path index, collisions.

    Created fresh for every build and passed explicitly to the scanner,
    validator, sorter and builder.
    """

    digraph: Digraph = field(default_factory=dict)
    index: dict[str, SourceEntry] = field(default_factory=dict)
    # (tag, replaced entry, new entry) for every identity defined twice.
    duplicates: list[tuple[str, SourceEntry, SourceEntry]] = field(default_factory=list)

    def record(self, tag: str, deps: set[str], entry: SourceEntry) -> None:
        previous = self.index.get(tag)
        if previous is not None and previous != entry:
            self.duplicates.append((tag, previous, entry))
        self.digraph[tag] = set(deps)
        self.index[tag] = entry

    def dependencies(self, tag: str) -> set[str]:
        return self.digraph.get(tag, set())

    def dangling_references(self) -> dict[str, set[str]]:
        """Custom names per tag that resolve to no indexed document."""
        out: dict[str, set[str]] = {}
        for tag, deps in self.digraph.items():
            missing = {d for d in deps if d not in self.index}
            if missing:
                out[tag] = missing
        return out

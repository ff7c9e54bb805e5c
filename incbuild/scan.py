from __future__ import annotations

import sys
from pathlib import Path

from .io import read_text
from .model import BuildGraph, SourceEntry, tag_identity
from .tags import custom_element_names


def parse_file(file_path: Path, in_dir: Path, graph: BuildGraph) -> None:
    """Record one document's custom-tag dependencies and its location."""
    content = read_text(file_path)
    graph.record(
        tag_identity(file_path),
        custom_element_names(content),
        SourceEntry.from_file(file_path, in_dir),
    )


def scan_directory(
    dir_path: Path,
    in_dir: Path,
    graph: BuildGraph,
    exclude: frozenset[Path] = frozenset(),
) -> None:
    """Walk `dir_path` depth-first and parse every regular file under it.

    Entries are visited in name order. A directory that cannot be listed is
    reported and skipped; the rest of the tree is still scanned. Directories
    whose resolved path is in `exclude` are not entered.
    """
    try:
        entries = sorted(dir_path.iterdir(), key=lambda p: p.name)
    except OSError as e:
        print(f"error: cannot read directory {dir_path}: {e}", file=sys.stderr)
        return

    for entry in entries:
        if entry.is_symlink() and entry.is_dir():
            print(f"warning: not following symlinked directory {entry}", file=sys.stderr)
            continue

        if entry.is_dir():
            if entry.resolve() not in exclude:
                scan_directory(entry, in_dir, graph, exclude)
            continue

        try:
            parse_file(entry, in_dir, graph)
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: cannot read {entry}: {e}", file=sys.stderr)


def scan_tree(in_dir: Path, exclude: tuple[Path, ...] = ()) -> BuildGraph:
    """Scan `in_dir` into a fresh BuildGraph.

    `exclude` lists directories to leave out, typically an output directory
    that lives inside the input tree.
    """
    graph = BuildGraph()
    scan_directory(in_dir, in_dir, graph, frozenset(p.resolve() for p in exclude))
    return graph

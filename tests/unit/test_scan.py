from pathlib import Path

from incbuild.model import BuildGraph, SourceEntry
from incbuild.scan import parse_file, scan_directory, scan_tree


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_scan_records_dependencies_and_paths(tmp_path: Path):
    src = tmp_path / "src"
    _write(src / "index.html", "<main>\n<x-header>\n<x-card>\n</main>\n")
    _write(src / "partials" / "x-header.html", "<header>hi</header>\n")
    _write(src / "partials" / "cards" / "x-card.htm", "<x-icon>\n")

    graph = scan_tree(src)

    assert graph.digraph == {
        "index": {"x-header", "x-card", "/main"},
        "x-card": {"x-icon"},
        "x-header": set(),
    }
    assert graph.index["index"] == SourceEntry("./index", ".html")
    assert graph.index["x-header"] == SourceEntry("./partials/x-header", ".html")
    assert graph.index["x-card"] == SourceEntry("./partials/cards/x-card", ".htm")
    assert graph.duplicates == []


def test_extension_is_stripped_at_the_last_dot(tmp_path: Path):
    src = tmp_path / "src"
    f = _write(src / "notes.v2.md", "text\n")
    g = _write(src / "LICENSE", "text\n")

    graph = BuildGraph()
    parse_file(f, src, graph)
    parse_file(g, src, graph)

    assert graph.index["notes.v2"] == SourceEntry("./notes.v2", ".md")
    assert graph.index["LICENSE"] == SourceEntry("./LICENSE", "")


def test_duplicate_identity_last_write_wins(tmp_path: Path):
    src = tmp_path / "src"
    _write(src / "a" / "nav.html", "A\n")
    _write(src / "b" / "nav.html", "<x-b>\n")

    graph = scan_tree(src)

    assert graph.index["nav"] == SourceEntry("./b/nav", ".html")
    assert graph.digraph["nav"] == {"x-b"}
    assert [d[0] for d in graph.duplicates] == ["nav"]


def test_undecodable_file_is_skipped(tmp_path: Path, capsys):
    src = tmp_path / "src"
    _write(src / "ok.html", "fine\n")
    (src / "logo.png").write_bytes(b"\x89PNG\xff\xfe\xfa")

    graph = scan_tree(src)

    assert list(graph.index) == ["ok"]
    assert "error: cannot read" in capsys.readouterr().err


def test_unlistable_directory_is_skipped(tmp_path: Path, capsys, monkeypatch):
    src = tmp_path / "src"
    _write(src / "locked" / "hidden.html", "x\n")
    _write(src / "open" / "shown.html", "y\n")

    real_iterdir = Path.iterdir

    def fake_iterdir(self):
        if self.name == "locked":
            raise PermissionError("permission denied")
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", fake_iterdir)

    graph = BuildGraph()
    scan_directory(src, src, graph)

    assert list(graph.index) == ["shown"]
    assert "cannot read directory" in capsys.readouterr().err


def test_excluded_output_dir_is_not_scanned(tmp_path: Path):
    src = tmp_path / "src"
    _write(src / "page.html", "x\n")
    _write(src / "build" / "page.html", "stale\n")

    graph = scan_tree(src, exclude=(src / "build",))

    assert graph.duplicates == []
    assert graph.index["page"] == SourceEntry("./page", ".html")

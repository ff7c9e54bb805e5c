from pathlib import Path

from incbuild.model import BuildGraph, SourceEntry, tag_identity


def test_source_entry_mirrors_paths(tmp_path: Path):
    src = tmp_path / "src"
    entry = SourceEntry.from_file(src / "blog" / "post.html", src)

    assert entry == SourceEntry("./blog/post", ".html")
    assert entry.source_path(src) == src / "blog" / "post.html"
    assert entry.output_path(tmp_path / "out") == tmp_path / "out" / "blog" / "post.html"


def test_tag_identity_uses_real_extension():
    assert tag_identity(Path("x/footer.html")) == "footer"
    assert tag_identity(Path("x/footer.htm")) == "footer"
    assert tag_identity(Path("x/footer")) == "footer"


def test_record_tracks_only_real_collisions():
    graph = BuildGraph()
    graph.record("nav", {"a"}, SourceEntry("./one/nav", ".html"))
    graph.record("nav", {"a"}, SourceEntry("./one/nav", ".html"))
    assert graph.duplicates == []

    graph.record("nav", {"b"}, SourceEntry("./two/nav", ".html"))
    assert graph.duplicates == [
        ("nav", SourceEntry("./one/nav", ".html"), SourceEntry("./two/nav", ".html"))
    ]
    assert graph.dependencies("nav") == {"b"}
    assert graph.dependencies("unknown") == set()


def test_dangling_references():
    graph = BuildGraph()
    graph.record("page", {"x-card", "x-gone"}, SourceEntry("./page", ".html"))
    graph.record("x-card", set(), SourceEntry("./x-card", ".html"))

    assert graph.dangling_references() == {"page": {"x-gone"}}

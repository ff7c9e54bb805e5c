from incbuild.graph_diagram import gen_dependency_flow
from incbuild.mermaid_fmt import MERMAID_ID_RE, mermaid_block, mm_safe_id, mm_text
from incbuild.model import BuildGraph, SourceEntry


def test_mm_safe_id_sanitizes_and_dedupes():
    used: set[str] = set()
    assert mm_safe_id("x-card", used) == "x_card"
    assert mm_safe_id("x.card", used) == "x_card_2"
    assert mm_safe_id("404", used) == "t_404"
    assert all(MERMAID_ID_RE.match(i) for i in used)


def test_mm_text_escapes_angle_brackets():
    assert mm_text('<x-nav  class="a">') == "#lt;x-nav class=#quot;a#quot;#gt;"


def test_mermaid_block_fences_code():
    assert mermaid_block("flowchart TD\n\n") == "```mermaid\nflowchart TD\n```\n"


def test_dependency_flow_lists_nodes_and_edges():
    graph = BuildGraph()
    graph.record("index", {"x-nav", "x-gone", "/main", "index"}, SourceEntry("./index", ".html"))
    graph.record("x-nav", set(), SourceEntry("./parts/x-nav", ".html"))

    code = gen_dependency_flow(graph, ["x-nav", "index"])
    lines = code.splitlines()

    assert lines[0] == "flowchart TD"
    assert '  x_nav["x-nav (./parts/x-nav.html)"]' in lines
    assert '  index["index (./index.html)"]' in lines
    assert "  index --> x_nav" in lines
    assert "  index -.-> missing_x_gone" in lines
    assert "  class missing_x_gone missing" in lines
    # Closing tags and self-inclusion are not drawn.
    assert not any("main" in line for line in lines)
    assert "  index --> index" not in lines

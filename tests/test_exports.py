# tests/test_exports.py
"""Graphviz 快照、Markdown 報告與批次處理流程。"""

import pytest

from forcegraph.builders.converter import convert
from forcegraph.core.graph_processor import GraphProcessor
from forcegraph.models import Viewport
from forcegraph.parsers.dataset_loader import build_dataset
from forcegraph.renderers.graph_renderer import GraphRenderer
from forcegraph.renderers.snapshot_renderer import generate_snapshot_dot_source, render_snapshot
from forcegraph.reporters.markdown_reporter import generate_markdown_report
from forcegraph.utils.color_utils import ColorPalette, get_analogous_dark_color

from .helpers import RecordingPalette


@pytest.fixture
def settled(triangle_dataset):
    graph_data = convert(None, triangle_dataset, ColorPalette())
    renderer = GraphRenderer(seed=1)
    renderer.render(graph_data, Viewport(400, 300))
    renderer.settle()
    return graph_data, renderer


def test_snapshot_source_pins_every_node(settled):
    graph_data, renderer = settled
    source = generate_snapshot_dot_source(graph_data, renderer.buffer, 300, "#123456")
    assert source.count("pos=") == 3
    assert "n0 -- n1" in source
    assert "n1 -- n2" in source
    assert "#123456" in source


def test_snapshot_maps_symbols_to_graphviz_shapes():
    dataset = build_dataset(
        ["LinkWeight", "SourceGroup"],
        [{"source": "A", "target": "B", "LinkWeight": 1, "SourceGroup": 1}],
        objects={"symbol": {"show": True}},
    )
    graph_data = convert(None, dataset, RecordingPalette())
    renderer = GraphRenderer(seed=1)
    renderer.render(graph_data, Viewport(200, 200))
    source = generate_snapshot_dot_source(graph_data, renderer.buffer, 200)
    assert "shape=star" in source


def test_snapshot_with_missing_engine_logs_and_returns_false(settled, tmp_path, caplog):
    graph_data, renderer = settled
    config = {"layout_engine": "forcegraph-missing-engine", "save_source_file": True}
    output = tmp_path / "snap.png"
    assert render_snapshot(graph_data, renderer.buffer, output, 300, config) is False
    assert output.with_suffix(".txt").is_file()
    assert "未找到" in caplog.text


def test_markdown_report_lists_nodes_and_links(settled, tmp_path):
    graph_data, _ = settled
    output = tmp_path / "report.md"
    assert generate_markdown_report("triangle", graph_data, output)
    text = output.read_text(encoding="utf-8")
    assert "# ForceGraph 報告: triangle" in text
    assert "| 0 | A |" in text
    assert "LINKS: C (weight: 7)" in text
    assert "3 ~ 7" in text


def test_dark_border_color_accepts_short_hex():
    assert get_analogous_dark_color("#fff") == get_analogous_dark_color("#ffffff")


def test_palette_extends_deterministically():
    palette = ColorPalette()
    assert palette.color_at(0) == "#01B8AA"
    extended = palette.color_at(15)
    assert extended.startswith("#") and len(extended) == 7
    assert palette.color_at(15) == extended
    assert palette.color_at(-1) == palette.color_at(9)


def test_processor_writes_outputs(tmp_path):
    (tmp_path / "data.yaml").write_text(
        "measures: [LinkWeight, SourceGroup]\n"
        "records:\n"
        "  - {source: A, target: B, LinkWeight: 5, SourceGroup: 2}\n"
        "  - {source: B, target: C, LinkWeight: 1}\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "demo.yaml"
    config_path.write_text(
        "dataset_path: data.yaml\noutput_dir: out\nsimulation:\n  seed: 1\nobjects:\n  symbol:\n    show: true\n",
        encoding="utf-8",
    )

    assert GraphProcessor(config_path).run() is True
    svg = (tmp_path / "out" / "demo_graph.svg").read_text(encoding="utf-8")
    assert svg.count('class="node"') == 3
    assert (tmp_path / "out" / "demo_GraphReport.md").is_file()


def test_processor_skips_malformed_dataset(tmp_path, caplog):
    (tmp_path / "data.yaml").write_text("records: {not: a list}\n", encoding="utf-8")
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("dataset_path: data.yaml\noutput_dir: out\n", encoding="utf-8")
    assert GraphProcessor(config_path).run() is False
    assert "格式錯誤" in caplog.text


def test_snapshot_accepts_non_hex_palette_colors():
    dataset = build_dataset(["LinkWeight"], [{"source": "A", "target": "B", "LinkWeight": 1}])
    graph_data = convert(None, dataset, RecordingPalette())
    graph_data.node_list[1].color = "steelblue"
    renderer = GraphRenderer(seed=1)
    renderer.render(graph_data, Viewport(200, 200))

    source = generate_snapshot_dot_source(graph_data, renderer.buffer, 200)
    assert source.count("color=gray20") == 2
    assert "fillcolor=steelblue" in source


def test_processor_skips_records_with_non_scalar_endpoints(tmp_path, caplog):
    (tmp_path / "data.yaml").write_text(
        "measures: [LinkWeight]\nrecords:\n  - {source: [1, 2], target: B, LinkWeight: 1}\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "nested.yaml"
    config_path.write_text("dataset_path: data.yaml\noutput_dir: out\n", encoding="utf-8")
    assert GraphProcessor(config_path).run() is False
    assert "格式錯誤" in caplog.text


def test_large_group_index_colors_in_constant_time():
    palette = ColorPalette()
    dataset = build_dataset(
        ["LinkWeight", "SourceGroup"], [{"source": "A", "target": "B", "LinkWeight": 1, "SourceGroup": 10**9}]
    )
    graph_data = convert(None, dataset, palette)
    color = graph_data.node_list[0].color
    assert color.startswith("#") and len(color) == 7
    assert palette.color_at(10**9) == color
    assert len(palette._colors) == 10

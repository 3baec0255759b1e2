# tests/test_visual.py
"""GraphVisual 宿主介面：更新、屬性列舉與事件迴圈上的即時模式。"""

import asyncio

from forcegraph.core.visual import GraphVisual
from forcegraph.models import GraphMetadata, Viewport
from forcegraph.parsers.dataset_loader import build_dataset

from .helpers import RecordingPalette

VIEWPORT = Viewport(width=640, height=480)


def test_update_without_data_keeps_previous_render(triangle_dataset):
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    graph_data = visual.update([triangle_dataset], VIEWPORT)
    svg_before = visual.to_svg()

    assert visual.update(None, VIEWPORT) is None
    assert visual.update([], VIEWPORT) is None
    assert visual.update([None], VIEWPORT) is None
    assert visual.graph_data is graph_data
    assert visual.to_svg() == svg_before


def test_update_resets_role_indices(triangle_dataset):
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([triangle_dataset], VIEWPORT)
    first_metadata = visual.index_list

    grouped = build_dataset(["SourceGroup", "LinkWeight"], [{"source": "A", "target": "B", "LinkWeight": 1}])
    visual.update([grouped], VIEWPORT)
    assert visual.index_list is not first_metadata
    assert visual.index_list == GraphMetadata(value_index=1, source_group_index=0)


def test_enumerates_defaults_before_any_update():
    visual = GraphVisual()
    assert visual.enumerate_properties() == {
        "label_fill": "#333",
        "link_distance": 50.0,
        "charge": -200.0,
        "use_shape": False,
    }


def test_enumerates_object_instances_from_dataset_objects():
    dataset = build_dataset(
        ["LinkWeight"],
        [{"source": "A", "target": "B", "LinkWeight": 1}],
        objects={
            "label": {"fill": {"solid": {"color": "#ff0000"}}},
            "parameters": {"distance": 120, "charge": "-50"},
            "symbol": {"show": True},
        },
    )
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([dataset], VIEWPORT)

    [label] = visual.enumerate_object_instances("label")
    assert label["properties"] == {"fill": {"solid": {"color": "#ff0000"}}}
    assert label["selector"] is None

    distance, charge = visual.enumerate_object_instances("parameters")
    assert distance["properties"] == {"distance": 120.0}
    assert charge["properties"] == {"charge": -50.0}

    [symbol] = visual.enumerate_object_instances("symbol")
    assert symbol["properties"] == {"show": True}

    assert visual.enumerate_object_instances("unknown") == []


def test_invalid_parameters_fall_back_to_defaults():
    dataset = build_dataset(
        ["LinkWeight"],
        [{"source": "A", "target": "B", "LinkWeight": 1}],
        objects={"parameters": {"distance": "far"}, "label": {"fill": "#abc"}},
    )
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([dataset], VIEWPORT)
    properties = visual.enumerate_properties()
    assert properties["link_distance"] == 50.0
    assert properties["label_fill"] == "#abc"


def test_live_updates_are_driven_by_the_event_loop(triangle_dataset):
    async def scenario():
        visual = GraphVisual(palette=RecordingPalette(), tick_interval=0, seed=4)
        visual.update([triangle_dataset], VIEWPORT)
        superseding = build_dataset(
            ["LinkWeight"],
            [{"source": "X", "target": "Y", "LinkWeight": 2}],
        )
        graph_data = visual.update([superseding], VIEWPORT)
        settled = await visual.wait_settled()
        return visual, graph_data, settled

    visual, graph_data, settled = asyncio.run(scenario())
    assert settled is True
    assert not visual.renderer.simulation.running
    assert [node.label for node in graph_data.node_list] == ["X", "Y"]
    assert graph_data.node_list[0].x != 0.0 or graph_data.node_list[0].y != 0.0


def test_drag_passthrough_pins_node(triangle_dataset):
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([triangle_dataset], VIEWPORT)
    visual.drag_start(2)
    visual.drag_move(2, 30.0, 40.0)
    visual.settle()
    node = visual.graph_data.node_list[2]
    assert (node.x, node.y) == (30.0, 40.0)
    visual.drag_end(2)


def test_malformed_host_objects_are_ignored():
    dataset = build_dataset(
        ["LinkWeight"],
        [{"source": "A", "target": "B", "LinkWeight": 1}],
        objects={"parameters": 5, "symbol": "on", "label": "red"},
    )
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([dataset], VIEWPORT)
    assert visual.enumerate_properties() == {
        "label_fill": "#333",
        "link_distance": 50.0,
        "charge": -200.0,
        "use_shape": False,
    }


def test_symbol_show_requires_a_boolean():
    dataset = build_dataset(
        ["LinkWeight"],
        [{"source": "A", "target": "B", "LinkWeight": 1}],
        objects={"symbol": {"show": "false"}},
    )
    visual = GraphVisual(palette=RecordingPalette(), seed=1)
    visual.update([dataset], VIEWPORT)
    assert visual.enumerate_properties()["use_shape"] is False

# tests/test_force_simulation.py
"""力導向模擬：alpha 冷卻、事件、節點權重、拖曳固定與四分樹。"""

import math
import random

import pytest

from forcegraph.layout.force_simulation import DRAG_FLAG, ForceSimulation
from forcegraph.layout.position_buffer import PositionBuffer
from forcegraph.layout.quadtree import QuadTree


def _simulation(count=3, links=((0, 1), (0, 2)), seed=1, **kwargs):
    buffer = PositionBuffer(count)
    simulation = ForceSimulation(size=(400, 300), seed=seed, **kwargs)
    simulation.seed(buffer, list(links))
    return simulation, buffer


def test_start_assigns_positions_inside_viewport_and_degree_weights():
    simulation, buffer = _simulation()
    simulation.start()
    assert simulation.alpha == pytest.approx(0.1)
    assert simulation.weights == [2, 1, 1]
    for i in range(len(buffer)):
        assert 0 <= buffer.x[i] <= 400
        assert 0 <= buffer.y[i] <= 300
        assert (buffer.px[i], buffer.py[i]) == (buffer.x[i], buffer.y[i])


def test_alpha_cools_geometrically_until_end_event():
    simulation, _ = _simulation()
    events = []
    simulation.on("tick", lambda sim: events.append("tick"))
    simulation.on("end", lambda sim: events.append("end"))
    simulation.start()

    simulation.tick()
    assert simulation.alpha == pytest.approx(0.099)

    expected_steps, alpha = 1, 0.1 * 0.99
    while True:
        expected_steps += 1
        alpha *= 0.99
        if alpha < 0.005:
            break

    steps = simulation.run_until_settled(max_ticks=1000) + 1
    assert steps == expected_steps
    assert not simulation.running
    assert events.count("end") == 1
    assert events[-1] == "end"
    assert events.count("tick") == expected_steps - 1


def test_tick_after_stop_reports_finished():
    simulation, _ = _simulation()
    simulation.start().stop()
    assert simulation.tick() is True


def test_set_alpha_from_zero_emits_start():
    simulation, _ = _simulation()
    starts = []
    simulation.on("start", starts.append)
    simulation.start()
    simulation.set_alpha(0.05)
    assert len(starts) == 1
    simulation.stop()
    simulation.resume()
    assert len(starts) == 2


def test_run_until_settled_stops_at_tick_cap(caplog):
    simulation, _ = _simulation()
    simulation.start()
    assert simulation.run_until_settled(max_ticks=10) == 10
    assert not simulation.running
    assert "未收斂" in caplog.text


def test_dragged_node_is_pinned_until_released():
    simulation, buffer = _simulation()
    simulation.start()
    simulation.drag_start(0)
    simulation.drag_move(0, 120.0, 80.0)
    for _ in range(5):
        simulation.tick()
    assert buffer.position(0) == (120.0, 80.0)
    assert buffer.fixed[0] & DRAG_FLAG

    simulation.drag_end(0)
    assert buffer.fixed[0] == 0


def test_drag_move_wakes_a_settled_simulation():
    simulation, _ = _simulation()
    simulation.start()
    simulation.run_until_settled()
    simulation.drag_start(1)
    simulation.drag_move(1, 10.0, 10.0)
    assert simulation.running


def test_linked_nodes_relax_toward_link_distance():
    buffer = PositionBuffer(2)
    buffer.x[:] = [0.0, 400.0]
    buffer.y[:] = [150.0, 150.0]
    simulation = ForceSimulation(size=(400, 300), charge=0.0, link_distance=50.0, seed=3)
    simulation.seed(buffer, [(0, 1)]).start()
    simulation.run_until_settled()
    distance = math.dist(buffer.position(0), buffer.position(1))
    assert distance < 400.0


def test_coincident_seeds_are_separated_by_charge():
    buffer = PositionBuffer(4)
    buffer.x[:] = [0.0] * 4
    buffer.y[:] = [0.0] * 4
    simulation = ForceSimulation(size=(400, 300), seed=5)
    simulation.seed(buffer, []).start()
    simulation.tick()
    assert len({buffer.position(i) for i in range(4)}) > 1


def test_quadtree_total_charge_matches_sum_of_points():
    buffer = PositionBuffer(3)
    buffer.x[:] = [0.0, 10.0, 20.0]
    buffer.y[:] = [0.0, 5.0, 20.0]
    tree = QuadTree(buffer)

    tree.accumulate(alpha=0.1, charges=[-200.0, -200.0, -200.0], rng=random.Random(0))
    assert tree.root.charge == pytest.approx(-60.0)
    assert tree.root.cx == pytest.approx(10.0)
    assert tree.root.cy == pytest.approx(25.0 / 3)


def test_drag_with_invalid_index_is_ignored():
    simulation, buffer = _simulation()
    simulation.start()
    before = [buffer.position(i) for i in range(len(buffer))]

    for index in (-1, 3, 99):
        simulation.drag_start(index)
        simulation.drag_move(index, 5.0, 5.0)
        simulation.drag_end(index)

    assert buffer.fixed == [0, 0, 0]
    assert [buffer.position(i) for i in range(len(buffer))] == before

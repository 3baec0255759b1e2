# src/forcegraph/layout/force_simulation.py
"""
力導向模擬：以電荷斥力、連結彈簧、中心重力與摩擦力反覆更新節點位置。

每一步 (tick) 都會讓 alpha 冷卻；alpha 低於門檻時模擬停止並發出 'end' 事件。
模擬本身不排程，由 TickScheduler 或同步的 run_until_settled 驅動。
"""

# 1. 標準庫導入
import logging
import math
import random
from collections import defaultdict
from collections.abc import Callable, Sequence
from typing import Any

# 2. 第三方庫導入
import networkx as nx

# 3. 本專案導入
from forcegraph.layout.position_buffer import PositionBuffer
from forcegraph.layout.quadtree import QuadNode, QuadTree
from forcegraph.utils.logging_utils import TICK_MARKER

DRAG_FLAG = 2

SIMULATION_EVENTS = ("start", "tick", "end")

DEFAULT_SIMULATION_SETTINGS: dict[str, Any] = {
    "friction": 0.9,
    "gravity": 0.1,
    "theta": 0.8,
    "link_strength": 1.0,
    "alpha": 0.1,
    "alpha_decay": 0.99,
    "alpha_min": 0.005,
    "charge_distance": math.inf,
}


class ForceSimulation:
    """一個渲染週期內的力導向模擬，持有並修改 PositionBuffer。"""

    def __init__(
        self,
        size: tuple[float, float],
        charge: float = -200.0,
        link_distance: float = 50.0,
        settings: dict[str, Any] | None = None,
        seed: int | None = None,
    ):
        merged = {**DEFAULT_SIMULATION_SETTINGS, **(settings or {})}
        self.size = size
        self.charge = float(charge)
        self.link_distance = float(link_distance)
        self.friction = float(merged["friction"])
        self.gravity = float(merged["gravity"])
        self.theta = float(merged["theta"])
        self.link_strength = float(merged["link_strength"])
        self.alpha_start = float(merged["alpha"])
        self.alpha_decay = float(merged["alpha_decay"])
        self.alpha_min = float(merged["alpha_min"])
        self.charge_distance = float(merged["charge_distance"])

        self.rng = random.Random(seed)
        self.alpha = 0.0
        self.tick_count = 0
        self.buffer = PositionBuffer()
        self.links: list[tuple[int, int]] = []
        self.weights: list[int] = []
        self.charges: list[float] = []
        self.graph = nx.MultiGraph()
        self._listeners: dict[str, list[Callable[[ForceSimulation], None]]] = defaultdict(list)

    def on(self, event: str, callback: Callable[["ForceSimulation"], None]) -> "ForceSimulation":
        if event not in SIMULATION_EVENTS:
            raise ValueError(f"未知的模擬事件: {event}")
        self._listeners[event].append(callback)
        return self

    def _emit(self, event: str):
        for callback in list(self._listeners[event]):
            callback(self)

    def seed(self, buffer: PositionBuffer, links: Sequence[tuple[int, int]]) -> "ForceSimulation":
        """交付位置緩衝區 (以參照) 與以索引表示的連結。連結端點必須已驗證有效。"""
        self.buffer = buffer
        self.links = list(links)
        return self

    @property
    def running(self) -> bool:
        return self.alpha > 0

    def start(self) -> "ForceSimulation":
        """計算節點權重、初始化缺少的位置並喚醒模擬。"""
        n = len(self.buffer)
        self.graph = nx.MultiGraph()
        self.graph.add_nodes_from(range(n))
        self.graph.add_edges_from(self.links)
        self.weights = [self.graph.degree(i) for i in range(n)]
        self.charges = [self.charge] * n

        buffer = self.buffer
        width, height = self.size
        for i in range(n):
            if math.isnan(buffer.x[i]):
                buffer.x[i] = self._initial_position(i, buffer.x, width)
            if math.isnan(buffer.y[i]):
                buffer.y[i] = self._initial_position(i, buffer.y, height)
            if math.isnan(buffer.px[i]):
                buffer.px[i] = buffer.x[i]
            if math.isnan(buffer.py[i]):
                buffer.py[i] = buffer.y[i]

        logging.info(
            f"力導向模擬啟動: {n} 個節點、{len(self.links)} 條連結 "
            f"(charge={self.charge}, link_distance={self.link_distance})。"
        )
        return self.resume()

    def _initial_position(self, index: int, axis: list[float], extent: float) -> float:
        """優先沿用已有位置的鄰居座標，否則在畫布範圍內隨機取值。"""
        for neighbor in self.graph.neighbors(index):
            if not math.isnan(axis[neighbor]):
                return axis[neighbor]
        return self.rng.random() * extent

    def resume(self) -> "ForceSimulation":
        return self.set_alpha(self.alpha_start)

    def stop(self) -> "ForceSimulation":
        return self.set_alpha(0.0)

    def set_alpha(self, value: float) -> "ForceSimulation":
        """alpha 由 0 轉為正值時發出 'start' 事件，讓排程器重新開始驅動。"""
        if self.alpha:
            self.alpha = value if value > 0 else 0.0
        elif value > 0:
            self.alpha = value
            self._emit("start")
        return self

    def tick(self) -> bool:
        """
        執行一步積分。

        Returns:
            模擬已結束 (alpha 冷卻至門檻以下或已停止) 時回傳 True。
        """
        if not self.alpha:
            return True
        self.alpha *= self.alpha_decay
        if self.alpha < self.alpha_min:
            self.alpha = 0.0
            logging.info(f"力導向模擬已收斂，共 {self.tick_count} 步。")
            self._emit("end")
            return True

        self.tick_count += 1
        self._apply_links()
        self._apply_gravity()
        self._apply_charge()
        self._integrate()

        logging.debug(f"{TICK_MARKER} #{self.tick_count} alpha={self.alpha:.5f}")
        self._emit("tick")
        return False

    def _apply_links(self):
        buffer, weights = self.buffer, self.weights
        for s, t in self.links:
            x = buffer.x[t] - buffer.x[s]
            y = buffer.y[t] - buffer.y[s]
            distance_sq = x * x + y * y
            if not distance_sq:
                continue
            distance = math.sqrt(distance_sq)
            factor = self.alpha * self.link_strength * (distance - self.link_distance) / distance
            x *= factor
            y *= factor
            total_weight = weights[s] + weights[t]
            k = weights[s] / total_weight if total_weight else 0.5
            buffer.x[t] -= x * k
            buffer.y[t] -= y * k
            k = 1 - k
            buffer.x[s] += x * k
            buffer.y[s] += y * k

    def _apply_gravity(self):
        k = self.alpha * self.gravity
        if not k:
            return
        buffer = self.buffer
        cx, cy = self.size[0] / 2, self.size[1] / 2
        for i in range(len(buffer)):
            if not buffer.fixed[i]:
                buffer.x[i] += (cx - buffer.x[i]) * k
                buffer.y[i] += (cy - buffer.y[i]) * k

    def _apply_charge(self):
        if not self.charge or not len(self.buffer):
            return
        tree = QuadTree(self.buffer)
        tree.accumulate(self.alpha, self.charges, self.rng)
        for i in range(len(self.buffer)):
            if not self.buffer.fixed[i]:
                tree.visit(self._repulse(i))

    def _repulse(self, index: int) -> Callable[[QuadNode, float, float, float, float], bool]:
        buffer = self.buffer
        theta_sq = self.theta * self.theta
        distance_limit_sq = self.charge_distance * self.charge_distance

        def visitor(quad: QuadNode, x1: float, y1: float, x2: float, y2: float) -> bool:
            if quad.point != index:
                dx = quad.cx - buffer.x[index]
                dy = quad.cy - buffer.y[index]
                dw = x2 - x1
                dn = dx * dx + dy * dy
                # 象限夠遠時以其質心近似整體電荷。
                if dw * dw / theta_sq < dn:
                    if dn < distance_limit_sq:
                        k = quad.charge / dn
                        buffer.px[index] -= dx * k
                        buffer.py[index] -= dy * k
                    return True
                if quad.point is not None and dn and dn < distance_limit_sq:
                    k = quad.point_charge / dn
                    buffer.px[index] -= dx * k
                    buffer.py[index] -= dy * k
            return not quad.charge

        return visitor

    def _integrate(self):
        buffer = self.buffer
        friction = self.friction
        for i in range(len(buffer)):
            if buffer.fixed[i]:
                buffer.x[i] = buffer.px[i]
                buffer.y[i] = buffer.py[i]
            else:
                x, y = buffer.x[i], buffer.y[i]
                buffer.x[i] -= (buffer.px[i] - x) * friction
                buffer.y[i] -= (buffer.py[i] - y) * friction
                buffer.px[i] = x
                buffer.py[i] = y

    def _valid_node(self, index: int) -> bool:
        if 0 <= index < len(self.buffer):
            return True
        logging.debug(f"拖曳的節點索引 {index} 超出範圍，已忽略。")
        return False

    def drag_start(self, index: int):
        if self._valid_node(index):
            self.buffer.fixed[index] |= DRAG_FLAG

    def drag_move(self, index: int, x: float, y: float):
        """拖曳直接覆寫節點位置並喚醒模擬，下一步的調和會帶動相連的連結端點。"""
        if not self._valid_node(index):
            return
        self.buffer.move_to(index, x, y)
        self.resume()

    def drag_end(self, index: int):
        if self._valid_node(index):
            self.buffer.fixed[index] &= ~DRAG_FLAG

    def run_until_settled(self, max_ticks: int = 1000) -> int:
        """同步執行直到收斂或達到步數上限，回傳實際執行的步數。"""
        steps = 0
        while steps < max_ticks:
            steps += 1
            if self.tick():
                break
        if self.running:
            logging.warning(f"模擬在 {max_ticks} 步內未收斂，已強制停止。")
            self.stop()
        return steps

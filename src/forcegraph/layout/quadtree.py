# src/forcegraph/layout/quadtree.py
"""
Barnes-Hut 四分樹，用於近似計算節點間的電荷斥力。

節點以索引儲存，座標直接讀寫 PositionBuffer。
插入、累積與走訪皆以顯式堆疊實作，大量重合點也不會觸及遞迴上限。
"""

# 1. 標準庫導入
import math
import random
from collections.abc import Callable, Sequence

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.layout.position_buffer import PositionBuffer

COINCIDENT_EPSILON = 0.01

Bounds = tuple[float, float, float, float]
QuadVisitor = Callable[["QuadNode", float, float, float, float], bool]


class QuadNode:
    __slots__ = ("leaf", "nodes", "point", "x", "y", "charge", "point_charge", "cx", "cy")

    def __init__(self):
        self.leaf = True
        self.nodes: list[QuadNode | None] = [None, None, None, None]
        self.point: int | None = None
        self.x: float | None = None
        self.y: float | None = None
        self.charge = 0.0
        self.point_charge = 0.0
        self.cx = 0.0
        self.cy = 0.0


def _descend(node: QuadNode, x: float, y: float, bounds: Bounds) -> tuple[QuadNode, Bounds]:
    x1, y1, x2, y2 = bounds
    xm, ym = (x1 + x2) * 0.5, (y1 + y2) * 0.5
    right, below = x >= xm, y >= ym
    i = (below << 1) | right
    node.leaf = False
    child = node.nodes[i]
    if child is None:
        child = node.nodes[i] = QuadNode()
    if right:
        x1 = xm
    else:
        x2 = xm
    if below:
        y1 = ym
    else:
        y2 = ym
    return child, (x1, y1, x2, y2)


class QuadTree:
    """以緩衝區目前位置建立的四分樹。"""

    def __init__(self, buffer: PositionBuffer, indices: Sequence[int] | None = None):
        self.buffer = buffer
        self.root = QuadNode()
        indices = range(len(buffer)) if indices is None else indices
        points = [i for i in indices if math.isfinite(buffer.x[i]) and math.isfinite(buffer.y[i])]

        if points:
            x1 = min(buffer.x[i] for i in points)
            y1 = min(buffer.y[i] for i in points)
            x2 = max(buffer.x[i] for i in points)
            y2 = max(buffer.y[i] for i in points)
        else:
            x1 = y1 = x2 = y2 = 0.0
        dx, dy = x2 - x1, y2 - y1
        if dx > dy:
            y2 = y1 + dx
        else:
            x2 = x1 + dy
        self.bounds: Bounds = (x1, y1, x2, y2)

        for i in points:
            self.insert(i, buffer.x[i], buffer.y[i])

    def insert(self, point: int, x: float, y: float):
        node, bounds = self.root, self.bounds
        while True:
            if not node.leaf:
                node, bounds = _descend(node, x, y, bounds)
                continue
            if node.x is None:
                node.point, node.x, node.y = point, x, y
                return
            if abs(node.x - x) + abs(node.y - y) < COINCIDENT_EPSILON:
                # 重合點：保留原點於此，新點下沉到子節點。
                node, bounds = _descend(node, x, y, bounds)
                continue
            existing, ex, ey = node.point, node.x, node.y
            node.point = node.x = node.y = None
            child, child_bounds = _descend(node, ex, ey, bounds)
            child.point, child.x, child.y = existing, ex, ey

    def _pre_order(self) -> list[QuadNode]:
        order: list[QuadNode] = []
        stack = [self.root]
        while stack:
            quad = stack.pop()
            order.append(quad)
            stack.extend(child for child in quad.nodes if child is not None)
        return order

    def accumulate(self, alpha: float, charges: Sequence[float], rng: random.Random):
        """
        由下而上累積每個象限的總電荷與電荷質心。

        非葉節點上仍帶有點者代表重合點，會被加上 [-0.5, 0.5) 的隨機擾動以便分開。
        """
        buffer = self.buffer
        for quad in reversed(self._pre_order()):
            cx = cy = 0.0
            quad.charge = 0.0
            if not quad.leaf:
                for child in quad.nodes:
                    if child is None:
                        continue
                    quad.charge += child.charge
                    cx += child.charge * child.cx
                    cy += child.charge * child.cy
            if quad.point is not None:
                p = quad.point
                if not quad.leaf:
                    buffer.x[p] += rng.random() - 0.5
                    buffer.y[p] += rng.random() - 0.5
                k = alpha * charges[p]
                quad.point_charge = k
                quad.charge += k
                cx += k * buffer.x[p]
                cy += k * buffer.y[p]
            if quad.charge:
                quad.cx = cx / quad.charge
                quad.cy = cy / quad.charge
            else:
                quad.cx = quad.cy = 0.0

    def visit(self, visitor: QuadVisitor):
        """深度優先走訪；visitor 回傳 True 時略過該象限的子節點。"""
        stack: list[tuple[QuadNode, Bounds]] = [(self.root, self.bounds)]
        while stack:
            quad, (x1, y1, x2, y2) = stack.pop()
            if visitor(quad, x1, y1, x2, y2):
                continue
            sx, sy = (x1 + x2) * 0.5, (y1 + y2) * 0.5
            children = quad.nodes
            child_bounds = (
                (x1, y1, sx, sy),
                (sx, y1, x2, sy),
                (x1, sy, sx, y2),
                (sx, sy, x2, y2),
            )
            for i in (3, 2, 1, 0):
                child = children[i]
                if child is not None:
                    stack.append((child, child_bounds[i]))

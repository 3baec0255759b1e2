# src/forcegraph/layout/__init__.py
"""
佈局套件：位置緩衝區、Barnes-Hut 四分樹、力導向模擬與事件迴圈排程。
"""

from .force_simulation import ForceSimulation
from .position_buffer import PositionBuffer
from .quadtree import QuadTree
from .tick_scheduler import TickScheduler

__all__ = [
    "ForceSimulation",
    "PositionBuffer",
    "QuadTree",
    "TickScheduler",
]

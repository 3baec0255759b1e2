# src/forcegraph/layout/position_buffer.py
"""
節點位置的明確持有緩衝區。

模擬步驟與拖曳處理是唯二的寫入者，渲染調和是唯一的讀取者；
三者都在同一個事件迴圈回呼中完成，因此不需要任何鎖。
"""

# 1. 標準庫導入
import math
from collections.abc import Sequence

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.models import NodeDatapoint


class PositionBuffer:
    """以節點索引定址的 x/y 與前一步位置 px/py，以及固定旗標。"""

    def __init__(self, count: int = 0):
        self.x: list[float] = [math.nan] * count
        self.y: list[float] = [math.nan] * count
        self.px: list[float] = [math.nan] * count
        self.py: list[float] = [math.nan] * count
        self.fixed: list[int] = [0] * count

    def __len__(self) -> int:
        return len(self.x)

    @classmethod
    def seed_from(cls, nodes: Sequence[NodeDatapoint]) -> "PositionBuffer":
        """以節點目前的 x/y 作為初始位置建立緩衝區。"""
        buffer = cls(len(nodes))
        for node in nodes:
            buffer.x[node.index] = float(node.x)
            buffer.y[node.index] = float(node.y)
        return buffer

    def position(self, index: int) -> tuple[float, float]:
        return self.x[index], self.y[index]

    def move_to(self, index: int, x: float, y: float):
        """同時覆寫目前與前一步位置，使節點在下一步停在原地。"""
        self.x[index] = self.px[index] = float(x)
        self.y[index] = self.py[index] = float(y)

    def sync_to(self, nodes: Sequence[NodeDatapoint]):
        """將緩衝區的位置寫回節點的 x/y 欄位。"""
        for node in nodes:
            if 0 <= node.index < len(self.x):
                node.x = self.x[node.index]
                node.y = self.y[node.index]

# src/forcegraph/builders/range_normalizer.py
"""
計算節點大小與連結權重的範圍，並提供渲染使用的線性比例函式。
"""

# 1. 標準庫導入
import math
from collections.abc import Sequence
from dataclasses import dataclass

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.models import ABSENT, GraphData, GraphMetadata, LinkDatapoint, NodeDatapoint


@dataclass(frozen=True)
class PixelRange:
    min: float
    delta: float

    @property
    def max(self) -> float:
        return self.min + self.delta

    @property
    def midpoint(self) -> float:
        return self.min + self.delta / 2


NODE_SIZE_RANGE = PixelRange(min=15, delta=15)
IMAGE_SIZE_RANGE = PixelRange(min=50, delta=50)
LINK_SIZE_RANGE = PixelRange(min=3, delta=7)
LINK_OPACITY_RANGE = PixelRange(min=0.2, delta=0.6)


def node_size_range(
    nodes: Sequence[NodeDatapoint], metadata: GraphMetadata
) -> tuple[float | None, float | None]:
    """
    節點大小的 (最小, 最大)。

    只有來源與目標大小角色都存在時才掃描所有節點；
    否則以第一個節點的大小作為上下界 (比例函式會退化為中點)。
    """
    if not nodes:
        return None, None
    first = nodes[0].size
    if metadata.source_size_index == ABSENT or metadata.target_size_index == ABSENT:
        return first, first
    sizes = [node.size for node in nodes if math.isfinite(node.size)]
    if not sizes:
        return first, first
    return min(sizes), max(sizes)


def link_value_range(links: Sequence[LinkDatapoint]) -> tuple[float | None, float | None]:
    """連結權重的 (最小, 最大)，忽略非有限值；沒有連結時回傳 (None, None)。"""
    values = [link.value for link in links if math.isfinite(link.value)]
    if not values:
        return None, None
    return min(values), max(values)


def scale(value: float, data_min: float | None, data_max: float | None, pixel_range: PixelRange) -> float:
    """
    線性內插：range_min + (value - data_min) * delta / (data_max - data_min)。

    data_max == data_min、範圍未知或 value 不是有限數值時回傳中點。
    """
    if not math.isfinite(value) or data_min is None or data_max is None or data_max == data_min:
        return pixel_range.midpoint
    return pixel_range.min + (value - data_min) * pixel_range.delta / (data_max - data_min)


def get_node_size(graph_data: GraphData, value: float) -> float:
    return scale(value, graph_data.min_node_size, graph_data.max_node_size, NODE_SIZE_RANGE)


def get_image_size(graph_data: GraphData, value: float) -> float:
    return scale(value, graph_data.min_node_size, graph_data.max_node_size, IMAGE_SIZE_RANGE)


def get_link_size(graph_data: GraphData, value: float) -> float:
    return scale(value, graph_data.min_link_size, graph_data.max_link_size, LINK_SIZE_RANGE)


def get_link_opacity(graph_data: GraphData, value: float) -> float:
    """連結權重映射到 [0.2, 0.8] 的不透明度，退化時為 0.5。"""
    return scale(value, graph_data.min_link_size, graph_data.max_link_size, LINK_OPACITY_RANGE)

# src/forcegraph/core/visual.py
"""
宿主面向的視覺元件：接收資料更新、觸發轉換與渲染，並列舉屬性面板的目前值。
"""

# 1. 標準庫導入
import asyncio
import logging
from collections.abc import Sequence
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.builders.converter import Palette, convert, read_parameters
from forcegraph.layout.force_simulation import ForceSimulation
from forcegraph.layout.tick_scheduler import TickScheduler
from forcegraph.models import DEFAULT_LABEL_FILL, GraphData, GraphMetadata, MatrixDataset, Viewport
from forcegraph.renderers.graph_renderer import GraphRenderer
from forcegraph.renderers.scene import Scene
from forcegraph.utils.color_utils import ColorPalette

VISUAL_CLASS_NAME = "graph"


def _fill_color(fill: Any) -> str | None:
    """接受 "#RRGGBB" 字串或 {"solid": {"color": ...}} 形式的填色。"""
    if isinstance(fill, str):
        return fill
    if isinstance(fill, dict):
        solid = fill.get("solid")
        if isinstance(solid, dict) and isinstance(solid.get("color"), str):
            return solid["color"]
    return None


class GraphVisual:
    """
    力導向圖視覺元件。

    update() 每次都重建 GraphData 並完整取代進行中的模擬；
    在 asyncio 事件迴圈中呼叫時，模擬由 TickScheduler 逐步驅動，
    否則由呼叫端以 settle() 同步驅動。
    """

    def __init__(
        self,
        palette: Palette | None = None,
        simulation_settings: dict[str, Any] | None = None,
        tick_interval: float = 0.016,
        seed: int | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.colors = palette or ColorPalette()
        self.scheduler = TickScheduler(tick_interval, loop)
        self.renderer = GraphRenderer(
            scene=Scene(VISUAL_CLASS_NAME),
            simulation_settings=simulation_settings,
            scheduler=self.scheduler,
            seed=seed,
        )
        self.dataset: MatrixDataset | None = None
        self.index_list: GraphMetadata | None = None
        self.graph_data: GraphData | None = None

    def update(self, data_views: Sequence[MatrixDataset | None] | None, viewport: Viewport) -> GraphData | None:
        """
        處理一次資料更新。缺少資料時保留先前的渲染結果並回傳 None。
        """
        if not data_views or data_views[0] is None:
            logging.debug("資料更新未包含任何資料集，保留先前的渲染結果。")
            return None

        self.dataset = data_views[0]
        self.index_list = GraphMetadata()
        self.graph_data = convert(self.index_list, self.dataset, self.colors)
        self.render(self.graph_data, viewport)
        return self.graph_data

    def render(self, graph_data: GraphData, viewport: Viewport) -> ForceSimulation:
        return self.renderer.render(graph_data, viewport)

    def settle(self, max_ticks: int = 1000) -> int:
        return self.renderer.settle(max_ticks)

    async def wait_settled(self) -> bool:
        """等待事件迴圈上的模擬自然收斂。"""
        return await self.scheduler.wait()

    def drag_start(self, index: int):
        self.renderer.drag_start(index)

    def drag_move(self, index: int, x: float, y: float):
        self.renderer.drag_move(index, x, y)

    def drag_end(self, index: int):
        self.renderer.drag_end(index)

    def to_svg(self) -> str:
        return self.renderer.to_svg()

    def get_label_fill(self) -> str:
        if self.dataset is not None:
            label = self.dataset.objects.get("label")
            color = _fill_color(label.get("fill")) if isinstance(label, dict) else None
            if color:
                return color
        return DEFAULT_LABEL_FILL

    def enumerate_properties(self) -> dict[str, Any]:
        """回傳 {label_fill, link_distance, charge, use_shape} 供宿主設定介面顯示。"""
        if self.graph_data is not None:
            link_distance = self.graph_data.link_distance
            charge = self.graph_data.charge
            use_shape = self.graph_data.use_shape
        else:
            link_distance, charge, use_shape = read_parameters(None)
        return {
            "label_fill": self.get_label_fill(),
            "link_distance": link_distance,
            "charge": charge,
            "use_shape": use_shape,
        }

    def enumerate_object_instances(self, object_name: str) -> list[dict[str, Any]]:
        """依屬性面板物件名稱列舉實例；未知名稱回傳空列表。"""
        properties = self.enumerate_properties()
        if object_name == "label":
            return [
                {
                    "object_name": "label",
                    "display_name": "Label",
                    "selector": None,
                    "properties": {"fill": {"solid": {"color": properties["label_fill"]}}},
                }
            ]
        if object_name == "parameters":
            return [
                {
                    "object_name": "parameters",
                    "display_name": "Parameters",
                    "selector": None,
                    "properties": {"distance": properties["link_distance"]},
                },
                {
                    "object_name": "parameters",
                    "display_name": "Parameters",
                    "selector": None,
                    "properties": {"charge": properties["charge"]},
                },
            ]
        if object_name == "symbol":
            return [
                {
                    "object_name": "symbol",
                    "display_name": "Symbol",
                    "selector": None,
                    "properties": {"show": properties["use_shape"]},
                }
            ]
        return []

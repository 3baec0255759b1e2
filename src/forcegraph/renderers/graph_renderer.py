# src/forcegraph/renderers/graph_renderer.py
"""
力導向圖的增量渲染器。

每次資料更新時：停止舊模擬、調和連結與節點元素 (enter / exit)、
依圖片或符號模式切換元素集合，並以新的模擬驅動每一步的位置更新。
"""

# 1. 標準庫導入
import logging
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.builders.range_normalizer import get_image_size, get_link_opacity, get_link_size, get_node_size
from forcegraph.layout.force_simulation import ForceSimulation
from forcegraph.layout.position_buffer import PositionBuffer
from forcegraph.layout.tick_scheduler import TickScheduler
from forcegraph.models import DEFAULT_NODE_SHAPE, GraphData, LinkDatapoint, NodeDatapoint, Viewport
from forcegraph.renderers.scene import Scene, SceneElement
from forcegraph.renderers.symbols import format_number, symbol_path

LINK_CLASS = "link"
NODE_CLASS = "node"
IMAGE_CLASS = "image"
LINK_STROKE = "grey"


class GraphRenderer:
    """持有 Scene、目前的 GraphData、位置緩衝區與模擬。"""

    def __init__(
        self,
        scene: Scene | None = None,
        simulation_settings: dict[str, Any] | None = None,
        scheduler: TickScheduler | None = None,
        seed: int | None = None,
    ):
        self.scene = scene or Scene()
        self.simulation_settings = dict(simulation_settings or {})
        self.scheduler = scheduler
        self.seed = seed
        self.graph_data: GraphData | None = None
        self.buffer = PositionBuffer()
        self.simulation: ForceSimulation | None = None

    # --- 生命週期 ---

    def supersede(self):
        """停止進行中的模擬與排程；舊的寫入者在新模擬建立前就被移除。"""
        if self.simulation is not None and self.simulation.running:
            logging.info("新的資料更新取代了進行中的模擬。")
        if self.scheduler is not None:
            self.scheduler.stop()
        if self.simulation is not None:
            self.simulation.stop()
        self.simulation = None

    def render(self, graph_data: GraphData, viewport: Viewport) -> ForceSimulation:
        """
        對新的 GraphData 進行一次完整渲染週期。

        Args:
            graph_data: 本週期的圖形資料；節點位置由新建的緩衝區持有。
            viewport: 畫布大小，同時作為模擬的邊界大小。

        Returns:
            已啟動的 ForceSimulation。
        """
        self.supersede()
        self.graph_data = graph_data
        self.scene.resize(viewport.width, viewport.height)

        links = graph_data.resolved_links()
        dropped = len(graph_data.link_list) - len(links)
        if dropped:
            logging.warning(f"已捨棄 {dropped} 條端點無法解析的連結。")

        self.buffer = PositionBuffer.seed_from(graph_data.node_list)
        simulation = ForceSimulation(
            size=(viewport.width, viewport.height),
            charge=graph_data.charge,
            link_distance=graph_data.link_distance,
            settings=self.simulation_settings,
            seed=self.seed,
        )
        simulation.seed(self.buffer, [(link.source, link.target) for link in links])
        simulation.on("tick", self._on_tick)
        simulation.on("start", self._schedule)
        self.simulation = simulation

        self._reconcile_links(links)
        self._reconcile_nodes(graph_data)

        simulation.start()
        return simulation

    def _schedule(self, simulation: ForceSimulation):
        if self.scheduler is None:
            return
        try:
            self.scheduler.start(simulation.tick)
        except RuntimeError:
            logging.debug("沒有執行中的事件迴圈，模擬改由呼叫端同步驅動。")

    def _on_tick(self, simulation: ForceSimulation):
        if simulation is not self.simulation:
            return
        self.update_positions()

    # --- 元素調和 ---

    def _reconcile_links(self, links: list[LinkDatapoint]):
        graph_data = self.graph_data
        join = self.scene.join(LINK_CLASS, links)
        for link in join.enter:
            element = self.scene.append("line", LINK_CLASS, link)
            element.set_style(
                stroke_width=get_link_size(graph_data, link.value),
                stroke_opacity=get_link_opacity(graph_data, link.value),
                stroke=LINK_STROKE,
            )
            self._place_link(element)
        for element in join.exit:
            self.scene.remove(element)

    def _reconcile_nodes(self, graph_data: GraphData):
        if graph_data.use_image:
            self.scene.remove_all(NODE_CLASS)
            css_class, tag = IMAGE_CLASS, "image"
        else:
            self.scene.remove_all(IMAGE_CLASS)
            css_class, tag = NODE_CLASS, "path"

        join = self.scene.join(css_class, graph_data.node_list)
        for node in join.enter:
            element = self.scene.append(tag, css_class, node)
            element.title = str(node.label)
            self._place_node(element)
        for element in join.exit:
            self.scene.remove(element)

    # --- 每一步的位置更新 ---

    def update_positions(self):
        """將緩衝區位置寫回節點，並更新所有連結端點與節點標記。"""
        if self.graph_data is None:
            return
        self.buffer.sync_to(self.graph_data.node_list)
        for element in self.scene.select_all(LINK_CLASS):
            self._place_link(element)
        css_class = IMAGE_CLASS if self.graph_data.use_image else NODE_CLASS
        for element in self.scene.select_all(css_class):
            self._place_node(element)

    def _place_link(self, element: SceneElement):
        link: LinkDatapoint = element.datum
        if not (0 <= link.source < len(self.buffer) and 0 <= link.target < len(self.buffer)):
            return
        x1, y1 = self.buffer.position(link.source)
        x2, y2 = self.buffer.position(link.target)
        element.set_attrs(x1=x1, y1=y1, x2=x2, y2=y2)

    def _place_node(self, element: SceneElement):
        graph_data = self.graph_data
        node: NodeDatapoint = element.datum
        if not 0 <= node.index < len(self.buffer):
            return
        x, y = self.buffer.position(node.index)
        if graph_data.use_image:
            edge = get_image_size(graph_data, node.size)
            element.set_attrs(
                transform=f"translate({format_number(x - edge / 2)},{format_number(y - edge / 2)})",
                **{"xlink:href": node.image},
                width=edge,
                height=edge,
            )
        else:
            radius = get_node_size(graph_data, node.size)
            shape = node.shape if graph_data.use_shape else DEFAULT_NODE_SHAPE
            element.set_attrs(
                transform=f"translate({format_number(x)},{format_number(y)})",
                d=symbol_path(shape, radius * radius),
            )
            element.set_style(fill=node.color)

    # --- 拖曳 ---

    def drag_start(self, index: int):
        if self.simulation is not None:
            self.simulation.drag_start(index)

    def drag_move(self, index: int, x: float, y: float):
        if self.simulation is not None:
            self.simulation.drag_move(index, x, y)

    def drag_end(self, index: int):
        if self.simulation is not None:
            self.simulation.drag_end(index)

    def settle(self, max_ticks: int = 1000) -> int:
        """沒有事件迴圈時同步驅動模擬直到收斂。"""
        if self.simulation is None:
            return 0
        return self.simulation.run_until_settled(max_ticks)

    def to_svg(self) -> str:
        return self.scene.to_svg()

# src/forcegraph/builders/converter.py
"""
純轉換入口：將矩陣資料集編譯為一個渲染週期的 GraphData。
"""

# 1. 標準庫導入
import logging
import math
from typing import Any, Protocol

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.builders.link_builder import create_link_points, to_number, uses_image
from forcegraph.builders.node_builder import create_node_points
from forcegraph.builders.range_normalizer import link_value_range, node_size_range
from forcegraph.models import DEFAULT_CHARGE, DEFAULT_LINK_DISTANCE, GraphData, GraphMetadata, MatrixDataset
from forcegraph.parsers.role_resolver import resolve_roles


class Palette(Protocol):
    def color_at(self, index: int) -> str: ...


def _object_properties(objects: dict[str, Any], object_name: str) -> dict[str, Any]:
    """取得單一宿主物件的屬性映射；不是映射的值視為未設定。"""
    properties = objects.get(object_name)
    if properties is None:
        return {}
    if not isinstance(properties, dict):
        logging.debug(f"宿主物件 '{object_name}' 的值 {properties!r} 不是映射，已忽略。")
        return {}
    return properties


def _numeric_parameter(objects: dict[str, Any], name: str, default: float) -> float:
    parameters = _object_properties(objects, "parameters")
    raw = parameters.get(name)
    if raw is None:
        return default
    value = to_number(raw)
    if not math.isfinite(value):
        logging.warning(f"參數 '{name}' 的值 {raw!r} 不是數值，改用預設值 {default}。")
        return default
    return value


def read_parameters(objects: dict[str, Any] | None) -> tuple[float, float, bool]:
    """從宿主物件讀取 (link_distance, charge, use_shape)。"""
    if not isinstance(objects, dict):
        objects = {}
    link_distance = _numeric_parameter(objects, "distance", DEFAULT_LINK_DISTANCE)
    charge = _numeric_parameter(objects, "charge", DEFAULT_CHARGE)
    show = _object_properties(objects, "symbol").get("show", False)
    if not isinstance(show, bool):
        logging.debug(f"symbol.show 的值 {show!r} 不是布林值，視為 False。")
        show = False
    return link_distance, charge, show


def convert(role_hints: GraphMetadata | None, dataset: MatrixDataset, palette: Palette) -> GraphData:
    """
    角色解析 -> 節點去重 -> 連結與屬性綁定 -> 範圍正規化。

    Args:
        role_hints: 角色索引；通常為全 -1 的新物件，會被就地填入。
        dataset: 輸入的矩陣資料集。
        palette: 提供 color_at(index) 的調色盤服務。

    Returns:
        新建立的 GraphData。
    """
    metadata = resolve_roles(dataset.value_sources, role_hints)
    link_distance, charge, use_shape = read_parameters(dataset.objects)

    nodes = create_node_points(dataset.source_rows, dataset.target_rows, palette.color_at)
    links = create_link_points(
        metadata,
        dataset.value_sources,
        dataset.source_rows,
        dataset.target_rows,
        nodes,
        palette.color_at,
    )

    min_node_size, max_node_size = node_size_range(nodes, metadata)
    min_link_size, max_link_size = link_value_range(links)

    graph_data = GraphData(
        node_list=nodes,
        link_list=links,
        use_image=uses_image(metadata),
        use_shape=use_shape,
        link_distance=link_distance,
        charge=charge,
        min_node_size=min_node_size,
        max_node_size=max_node_size,
        min_link_size=min_link_size,
        max_link_size=max_link_size,
    )
    logging.info(
        f"圖形轉換完成: {len(nodes)} 個節點、{len(links)} 條連結 "
        f"(圖片模式: {graph_data.use_image}, 符號模式: {graph_data.use_shape})。"
    )
    return graph_data

# src/forcegraph/builders/link_builder.py
"""
交叉連接來源列與目標列，抽取每個儲存格的量值，產生連結並覆寫節點屬性。

節點屬性採「最後寫入者勝出」：掃描順序為來源列為主、目標列次之、
量值索引最後；同一節點在多個配對中被寫入時，以最後一次寫入為準。
"""

# 1. 標準庫導入
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.builders.node_builder import build_label_index, lookup_node_index
from forcegraph.models import (
    ABSENT,
    SHAPE_TABLE,
    GraphMetadata,
    LinkDatapoint,
    MeasureColumn,
    NodeDatapoint,
    TreeNode,
)


def to_number(value: Any) -> float:
    """
    將儲存格值轉為浮點數。布林視為 0/1，空字串視為 0，無法轉換者回傳 NaN。
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def shape_for_group(group: int) -> str:
    return SHAPE_TABLE[group % len(SHAPE_TABLE)]


def uses_image(metadata: GraphMetadata) -> bool:
    """只有來源與目標圖片角色都解析到欄位時才使用圖片模式。"""
    return metadata.source_image_index != ABSENT and metadata.target_image_index != ABSENT


def _apply_group(node: NodeDatapoint, raw_value: Any, color_at: Callable[[int], str]):
    group_value = to_number(raw_value)
    if not math.isfinite(group_value):
        logging.debug(f"節點 '{node.label}' 的群組值 {raw_value!r} 不是數值，已忽略。")
        return
    group = int(group_value)
    node.group = group
    node.color = color_at(group)
    node.shape = shape_for_group(group)


def _apply_size(node: NodeDatapoint, raw_value: Any):
    size = to_number(raw_value)
    if not math.isfinite(size):
        logging.debug(f"節點 '{node.label}' 的大小值 {raw_value!r} 不是數值，已忽略。")
        return
    node.size = size * size


def create_link_points(
    metadata: GraphMetadata,
    value_sources: Sequence[MeasureColumn],
    source_rows: Sequence[TreeNode],
    target_rows: Sequence[TreeNode],
    nodes: list[NodeDatapoint],
    color_at: Callable[[int], str],
) -> list[LinkDatapoint]:
    """
    對每一個 (來源列 × 目標列) 配對，依量值的角色產生連結或覆寫節點屬性。

    - 權重角色：產生一條 LinkDatapoint。沒有權重值的配對不會成為連結。
    - 群組角色：覆寫 group，並依新群組重新計算 color 與 shape。
    - 大小角色：覆寫 size 為 value²。
    - 圖片角色：覆寫 image 為原始字串值。

    無法解析的 label 會得到索引 -1；此時連結仍照原樣產生 (由渲染端捨棄)，
    但不會對任何節點寫入屬性。

    Args:
        metadata: 已解析的角色索引。
        value_sources: 量值欄位描述，其長度決定每個儲存格的量值數。
        source_rows: 來源列，每列攜帶扁平化的儲存格值。
        target_rows: 目標列。
        nodes: 由 create_node_points 建立的節點列表，會被就地修改。
        color_at: 調色盤服務。

    Returns:
        依掃描順序排列的連結列表。
    """
    links: list[LinkDatapoint] = []
    label_index = build_label_index(nodes)
    measure_count = len(value_sources)

    def node_at(index: int) -> NodeDatapoint | None:
        return nodes[index] if index != ABSENT else None

    for row in source_rows:
        source_index = lookup_node_index(label_index, row.value)
        source_node = node_at(source_index)

        for column_index, target_row in enumerate(target_rows):
            target_index = lookup_node_index(label_index, target_row.value)
            target_node = node_at(target_index)

            for measure_index in range(measure_count):
                cell = row.cell(column_index, measure_index, measure_count)
                if cell is None or cell.value is None:
                    continue
                role_index = cell.value_source_index if cell.value_source_index is not None else 0
                raw_value = cell.value

                if metadata.value_index == role_index:
                    links.append(LinkDatapoint(source=source_index, target=target_index, value=to_number(raw_value)))

                if metadata.source_group_index == role_index and source_node is not None:
                    _apply_group(source_node, raw_value, color_at)
                if metadata.target_group_index == role_index and target_node is not None:
                    _apply_group(target_node, raw_value, color_at)

                if metadata.source_size_index == role_index and source_node is not None:
                    _apply_size(source_node, raw_value)
                if metadata.target_size_index == role_index and target_node is not None:
                    _apply_size(target_node, raw_value)

                if metadata.source_image_index == role_index and source_node is not None:
                    source_node.image = str(raw_value)
                if metadata.target_image_index == role_index and target_node is not None:
                    target_node.image = str(raw_value)

    logging.debug(f"連結綁定完成: {len(links)} 條連結。")
    return links

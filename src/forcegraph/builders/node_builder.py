# src/forcegraph/builders/node_builder.py
"""
將來源列與目標列的分類值去重，建構順序穩定的節點列表。
"""

# 1. 標準庫導入
import logging
from collections.abc import Callable, Sequence
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.models import ABSENT, NodeDatapoint, SelectionId, TreeNode

ColorResolver = Callable[[int], str]


def build_label_index(nodes: Sequence[NodeDatapoint]) -> dict[Any, int]:
    """
    建立 label -> 節點索引的查找表。

    節點 label 唯一，因此與逐一線性比對取第一個符合者的結果相同。
    """
    label_index: dict[Any, int] = {}
    for node in nodes:
        label_index.setdefault(node.label, node.index)
    return label_index


def lookup_node_index(label_index: dict[Any, int], label: Any) -> int:
    """查無此 label 時回傳 -1，不可雜湊的值同樣視為查無。"""
    try:
        return label_index.get(label, ABSENT)
    except TypeError:
        return ABSENT


def create_node_points(
    source_rows: Sequence[TreeNode],
    target_rows: Sequence[TreeNode],
    color_at: ColorResolver,
) -> list[NodeDatapoint]:
    """
    依 (全部來源列, 再全部目標列) 的首次出現順序建立唯一節點。

    以雜湊表去重，首見者勝出。

    Args:
        source_rows: 來源分類樹的葉節點。
        target_rows: 目標分類樹的葉節點。
        color_at: 調色盤服務，將密集整數索引映射為顏色。

    Returns:
        節點列表；節點的 index、group 與其在列表中的位置一致。
    """
    nodes: list[NodeDatapoint] = []
    seen: dict[Any, int] = {}

    for row in [*source_rows, *target_rows]:
        if lookup_node_index(seen, row.value) != ABSENT:
            continue
        index = len(nodes)
        try:
            seen[row.value] = index
        except TypeError:
            logging.warning(f"分類值 {row.value!r} 無法作為節點鍵，已略過。")
            continue
        nodes.append(
            NodeDatapoint(
                index=index,
                label=row.value,
                group=index,
                color=color_at(index),
                selector=SelectionId.create_with_id(row.identity),
            )
        )

    logging.debug(f"節點建構完成: {len(nodes)} 個唯一節點。")
    return nodes

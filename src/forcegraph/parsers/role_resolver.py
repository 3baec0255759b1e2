# src/forcegraph/parsers/role_resolver.py
"""
依量值欄位的顯示名稱，將欄位對應到七個語義角色。
"""

# 1. 標準庫導入
import logging
from collections.abc import Iterable

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.models import ABSENT, GraphMetadata, MeasureColumn

ROLE_KEYWORDS: dict[str, str] = {
    "linkweight": "value_index",
    "sourcegroup": "source_group_index",
    "targetgroup": "target_group_index",
    "sourcesize": "source_size_index",
    "targetsize": "target_size_index",
    "sourceimage": "source_image_index",
    "targetimage": "target_image_index",
}


def resolve_roles(
    value_sources: Iterable[MeasureColumn],
    metadata: GraphMetadata | None = None,
) -> GraphMetadata:
    """
    單次掃描量值欄位，填入 GraphMetadata 的角色索引。

    名稱比對不分大小寫。同一角色以第一個符合的欄位為準，
    未符合任何關鍵字的欄位會被忽略。缺少角色是合法設定，不會拋出例外。

    Args:
        value_sources: 依欄位順序排列的量值欄位描述。
        metadata: 可選的既有索引物件 (宿主傳入的角色提示)，會被就地填入。

    Returns:
        填好的 GraphMetadata。
    """
    if metadata is None:
        metadata = GraphMetadata()

    for column_index, column in enumerate(value_sources):
        name = (column.display_name or "").lower()
        field_name = ROLE_KEYWORDS.get(name)
        if field_name is None:
            continue
        if getattr(metadata, field_name) == ABSENT:
            setattr(metadata, field_name, column_index)

    logging.debug(f"角色解析結果: {metadata}")
    return metadata

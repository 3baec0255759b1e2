# tests/helpers.py
"""共用的測試資料建構器。"""

from forcegraph.models import MatrixValue, MeasureColumn, TreeNode


class RecordingPalette:
    """以 "c<index>" 表示顏色，並記錄每次查詢。"""

    def __init__(self):
        self.requests: list[int] = []

    def color_at(self, index: int) -> str:
        self.requests.append(index)
        return f"c{index}"


def make_row(value, cells=(), identity=None) -> TreeNode:
    """以 (值, 量值索引) 配對建立一個來源列。"""
    return TreeNode(
        value=value,
        identity=identity if identity is not None else value,
        values=[MatrixValue(value=v, value_source_index=k) for v, k in cells],
    )


def make_measures(*names: str) -> list[MeasureColumn]:
    return [MeasureColumn(display_name=name) for name in names]


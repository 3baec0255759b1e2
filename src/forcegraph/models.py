# src/forcegraph/models.py
"""
定義力導向圖在一個更新週期內使用的資料模型。

包含兩類結構：
1. 輸入端的矩陣資料集 (來源/目標兩棵分類樹與量值欄位)。
2. 輸出端的圖形模型 (節點、連結與 GraphData 聚合根)。
"""

# 1. 標準庫導入
from dataclasses import dataclass, field
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

ABSENT = -1

SHAPE_TABLE: tuple[str, ...] = ("circle", "cross", "diamond", "square", "triangle-up")

DEFAULT_NODE_SHAPE = "circle"
DEFAULT_NODE_SIZE = 10.0
DEFAULT_LINK_DISTANCE = 50.0
DEFAULT_CHARGE = -200.0
DEFAULT_LABEL_FILL = "#333"


@dataclass(frozen=True)
class SelectionId:
    """選取識別的不透明包裝，由資料列的 identity 產生。"""

    identity: Any

    @classmethod
    def create_with_id(cls, identity: Any) -> "SelectionId":
        return cls(identity)


@dataclass
class MeasureColumn:
    """一個量值欄位的描述。"""

    display_name: str


@dataclass
class MatrixValue:
    """矩陣中的一個儲存格值。value_source_index 為 None 時視為第 0 個量值。"""

    value: Any
    value_source_index: int | None = None


@dataclass
class TreeNode:
    """分類樹的葉節點 (一個來源或目標列)。"""

    value: Any
    identity: Any = None
    values: list[MatrixValue] = field(default_factory=list)

    def cell(self, column_index: int, measure_index: int, measure_count: int) -> MatrixValue | None:
        """以 (欄, 量值) 位置取得扁平儲存格，超出範圍時回傳 None。"""
        position = column_index * measure_count + measure_index
        if 0 <= position < len(self.values):
            return self.values[position]
        return None


@dataclass
class MatrixDataset:
    """
    階層式關聯資料集：來源列、目標列、量值欄位與宿主物件設定。

    objects 對應宿主的屬性面板物件，例如
    {"parameters": {"distance": 50, "charge": -200}, "symbol": {"show": False}}。
    """

    source_rows: list[TreeNode] = field(default_factory=list)
    target_rows: list[TreeNode] = field(default_factory=list)
    value_sources: list[MeasureColumn] = field(default_factory=list)
    objects: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class GraphMetadata:
    """七個語義角色在量值欄位清單中的索引，-1 表示該角色不存在。"""

    value_index: int = ABSENT
    source_group_index: int = ABSENT
    target_group_index: int = ABSENT
    source_size_index: int = ABSENT
    target_size_index: int = ABSENT
    source_image_index: int = ABSENT
    target_image_index: int = ABSENT


@dataclass
class NodeDatapoint:
    index: int
    label: Any
    color: str
    selector: SelectionId | None = None
    x: float = 0.0
    y: float = 0.0
    group: int = 0
    shape: str = DEFAULT_NODE_SHAPE
    size: float = DEFAULT_NODE_SIZE
    image: str | None = None


@dataclass
class LinkDatapoint:
    source: int
    target: int
    value: float

    def is_resolved(self, node_count: int) -> bool:
        """兩端點皆指向有效節點時回傳 True。"""
        return 0 <= self.source < node_count and 0 <= self.target < node_count


@dataclass
class GraphData:
    """一個渲染週期的聚合根，每次資料更新時整體重建。"""

    node_list: list[NodeDatapoint]
    link_list: list[LinkDatapoint]
    use_image: bool = False
    use_shape: bool = False
    link_distance: float = DEFAULT_LINK_DISTANCE
    charge: float = DEFAULT_CHARGE
    min_node_size: float | None = None
    max_node_size: float | None = None
    min_link_size: float | None = None
    max_link_size: float | None = None

    def resolved_links(self) -> list[LinkDatapoint]:
        """回傳兩端點皆可解析的連結，-1 端點的連結被捨棄。"""
        node_count = len(self.node_list)
        return [link for link in self.link_list if link.is_resolved(node_count)]


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

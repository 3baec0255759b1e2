# src/forcegraph/renderers/__init__.py
"""
渲染器套件，負責將圖形資料調和為視覺元素，並匯出 SVG 與 Graphviz 快照。
"""

from .graph_renderer import GraphRenderer
from .scene import Scene, SceneElement
from .snapshot_renderer import generate_snapshot_dot_source, render_snapshot
from .symbols import symbol_path

__all__ = [
    "GraphRenderer",
    "Scene",
    "SceneElement",
    "generate_snapshot_dot_source",
    "render_snapshot",
    "symbol_path",
]

# src/forcegraph/builders/__init__.py
"""
建構器套件，負責將矩陣資料集轉換為節點/連結圖形資料結構。
"""

from .converter import convert, read_parameters
from .link_builder import create_link_points
from .node_builder import create_node_points
from .range_normalizer import get_image_size, get_link_opacity, get_link_size, get_node_size

__all__ = [
    "convert",
    "create_link_points",
    "create_node_points",
    "get_image_size",
    "get_link_opacity",
    "get_link_size",
    "get_node_size",
    "read_parameters",
]

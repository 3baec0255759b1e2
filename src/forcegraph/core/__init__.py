# src/forcegraph/core/__init__.py
"""
ForceGraph 的核心協調器套件。

此套件負責將資料載入、轉換、模擬、渲染和報告等子系統串連起來，
並提供宿主面向的 GraphVisual 元件。
"""

from .config_loader import ConfigLoader
from .graph_processor import GraphProcessor
from .visual import GraphVisual

__all__ = [
    "ConfigLoader",
    "GraphProcessor",
    "GraphVisual",
]

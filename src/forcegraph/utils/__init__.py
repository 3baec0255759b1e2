# src/forcegraph/utils/__init__.py
"""
通用工具函式套件。
"""

from .color_utils import ColorPalette, get_analogous_dark_color
from .logging_utils import TickNoiseFilter, configure_root_logger
from .path_utils import find_project_root

__all__ = [
    "ColorPalette",
    "TickNoiseFilter",
    "configure_root_logger",
    "find_project_root",
    "get_analogous_dark_color",
]

# src/forcegraph/parsers/__init__.py
"""
解析器套件，負責解讀輸入資料集與量值欄位的語義角色。
"""

from .dataset_loader import DatasetFormatError, build_dataset, load_dataset
from .role_resolver import resolve_roles

__all__ = [
    "DatasetFormatError",
    "build_dataset",
    "load_dataset",
    "resolve_roles",
]

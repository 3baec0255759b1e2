# src/forcegraph/core/config_loader.py
"""
負責載入、合併與更新單一圖形專案的設定。
"""

# 1. 標準庫導入
import copy
import logging
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
import yaml
from ruamel.yaml import YAML

# 3. 本專案導入
from forcegraph.models import DEFAULT_CHARGE, DEFAULT_LABEL_FILL, DEFAULT_LINK_DISTANCE

DEFAULT_VISUAL_CONFIG: dict[str, Any] = {
    "dataset_path": None,
    "output_dir": "output",
    "objects": {
        "label": {"fill": DEFAULT_LABEL_FILL},
        "parameters": {"distance": DEFAULT_LINK_DISTANCE, "charge": DEFAULT_CHARGE},
        "symbol": {"show": False},
    },
    "viewport": {"width": 800, "height": 600},
    "simulation": {
        "friction": 0.9,
        "gravity": 0.1,
        "theta": 0.8,
        "link_strength": 1.0,
        "alpha": 0.1,
        "alpha_decay": 0.99,
        "alpha_min": 0.005,
        "tick_interval": 0.016,
        "max_ticks": 1000,
        "seed": None,
    },
    "exports": {
        "svg": True,
        "snapshot": {
            "enabled": False,
            "format": "png",
            "layout_engine": "neato",
            "save_source_file": False,
            "render_timeout": 120,
        },
        "report": True,
    },
    "logging": {"tick_debug": False},
}


class ConfigLoader:
    """一個處理設定檔載入與合併的類別。"""

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.config = self._load_yaml(config_path)
        if self.config is not None:
            self.config = self._merge_configs(copy.deepcopy(DEFAULT_VISUAL_CONFIG), self.config)

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any] | None:
        """安全地載入一個 YAML 檔案；空檔案視為空設定。"""
        if not path.is_file():
            logging.error(f"指定的設定檔不存在: {path}")
            return None
        try:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logging.error(f"解析設定檔 '{path.name}' 時發生錯誤: {e}")
            return None
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            logging.error(f"設定檔 '{path.name}' 的頂層必須是映射。")
            return None
        return loaded

    @staticmethod
    def from_dict(user_config: dict[str, Any]) -> dict[str, Any]:
        """不經檔案，直接將使用者設定合併到預設設定。"""
        return ConfigLoader._merge_configs(copy.deepcopy(DEFAULT_VISUAL_CONFIG), user_config)

    @staticmethod
    def _merge_configs(default: dict, user: dict) -> dict:
        """遞迴地合併使用者設定到預設設定中。"""
        for key, value in user.items():
            if isinstance(value, dict) and isinstance(default.get(key), dict):
                default[key] = ConfigLoader._merge_configs(default[key], value)
            else:
                default[key] = value
        return default

    @staticmethod
    def update_config_file(config_path: Path, updates: dict[str, Any]) -> bool:
        """使用 ruamel.yaml 安全地更新設定檔，保留註解和格式。"""
        yaml_loader = YAML()
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml_loader.load(f)
            if config_data is None:
                config_data = {}

            for key, value in updates.items():
                keys = key.split(".")
                d = config_data
                for k in keys[:-1]:
                    d = d.setdefault(k, {})
                d[keys[-1]] = value

            with open(config_path, "w", encoding="utf-8") as f:
                yaml_loader.dump(config_data, f)
            logging.info(f"已自動更新設定檔: {config_path.name}")
            return True
        except Exception as e:
            logging.error(f"自動更新設定檔 '{config_path.name}' 時失敗: {e}")
            return False

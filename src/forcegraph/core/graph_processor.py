# src/forcegraph/core/graph_processor.py
"""
ForceGraph 的核心處理引擎：對單一專案執行一次完整的批次渲染週期。
"""

# 1. 標準庫導入
import logging
import os
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.core.config_loader import ConfigLoader
from forcegraph.core.visual import GraphVisual
from forcegraph.models import MatrixDataset, Viewport
from forcegraph.parsers.dataset_loader import DatasetFormatError, load_dataset
from forcegraph.renderers.snapshot_renderer import render_snapshot
from forcegraph.reporters.markdown_reporter import generate_markdown_report
from forcegraph.utils.logging_utils import configure_root_logger
from forcegraph.utils.path_utils import resolve_relative_to

SCHEDULING_KEYS = ("tick_interval", "max_ticks", "seed")


class GraphProcessor:
    """一個處理單一專案完整渲染流程的類別。"""

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.project_name = config_path.stem
        self.config_loader = ConfigLoader(config_path)
        self.config = self.config_loader.config

    def _prepare_paths(self) -> tuple[Path | None, Path | None]:
        """根據設定準備資料檔與輸出目錄路徑；兩者皆相對於設定檔所在目錄。"""
        dataset_path_str = self.config.get("dataset_path")
        output_dir_str = self.config.get("output_dir", "output")
        if not dataset_path_str or not output_dir_str:
            return None, None

        dataset_path = resolve_relative_to(self.config_path, dataset_path_str)
        output_dir = resolve_relative_to(self.config_path, output_dir_str)
        os.makedirs(output_dir, exist_ok=True)
        return dataset_path, output_dir

    def _merge_objects(self, dataset: MatrixDataset):
        """設定檔的 objects 作為基底，資料檔自帶的 objects 逐欄覆寫。"""
        merged: dict[str, dict[str, Any]] = {}
        for source in (self.config.get("objects") or {}, dataset.objects):
            for name, properties in source.items():
                if isinstance(properties, dict):
                    merged.setdefault(name, {}).update(properties)
        dataset.objects = merged

    def _split_simulation_settings(self) -> tuple[dict[str, Any], dict[str, Any]]:
        simulation_config = dict(self.config.get("simulation") or {})
        scheduling = {key: simulation_config.pop(key) for key in SCHEDULING_KEYS if key in simulation_config}
        return simulation_config, scheduling

    def run(self) -> bool:
        """執行完整的專案處理流程。成功產出至少一個輸出時回傳 True。"""
        if not self.config:
            logging.error(f"因設定檔 '{self.config_path.name}' 載入失敗，終止處理。")
            return False

        configure_root_logger(allow_ticks=bool((self.config.get("logging") or {}).get("tick_debug")))
        logging.info(f"========== 開始處理專案: {self.project_name} ==========")

        dataset_path, output_dir = self._prepare_paths()
        if not dataset_path or not output_dir:
            logging.error(f"設定檔 '{self.config_path.name}' 缺少 'dataset_path' 或 'output_dir'，終止處理。")
            return False

        try:
            dataset = load_dataset(dataset_path)
        except DatasetFormatError as e:
            logging.error(f"資料檔 '{dataset_path.name}' 格式錯誤: {e}，已跳過。")
            return False
        if dataset is None:
            return False
        self._merge_objects(dataset)

        simulation_settings, scheduling = self._split_simulation_settings()
        viewport_config = self.config.get("viewport") or {}
        viewport = Viewport(
            width=float(viewport_config.get("width", 800)),
            height=float(viewport_config.get("height", 600)),
        )

        visual = GraphVisual(
            simulation_settings=simulation_settings,
            tick_interval=float(scheduling.get("tick_interval", 0.016)),
            seed=scheduling.get("seed"),
        )
        graph_data = visual.update([dataset], viewport)
        if graph_data is None:
            logging.warning("沒有產生任何圖形資料，已跳過輸出。")
            return False

        ticks = visual.settle(int(scheduling.get("max_ticks", 1000)))
        logging.info(f"佈局已穩定 ({ticks} 步): {len(graph_data.node_list)} 個節點、{len(graph_data.link_list)} 條連結。")

        exports = self.config.get("exports") or {}
        produced = False

        if exports.get("svg", True):
            svg_path = output_dir / f"{self.project_name}_graph.svg"
            try:
                svg_path.write_text(visual.to_svg(), encoding="utf-8")
                logging.info(f"SVG 已成功儲存至: {svg_path}")
                produced = True
            except OSError as e:
                logging.error(f"寫入 SVG 時發生錯誤: {e}")

        snapshot_config = exports.get("snapshot") or {}
        if snapshot_config.get("enabled"):
            output_format = snapshot_config.get("format", "png")
            snapshot_path = output_dir / f"{self.project_name}_snapshot.{output_format}"
            produced |= render_snapshot(
                graph_data,
                visual.renderer.buffer,
                snapshot_path,
                viewport.height,
                snapshot_config,
                visual.get_label_fill(),
            )

        if exports.get("report", True):
            report_path = output_dir / f"{self.project_name}_GraphReport.md"
            produced |= generate_markdown_report(self.project_name, graph_data, report_path)

        logging.info(f"========== 專案 {self.project_name} 處理完畢 ==========")
        return produced

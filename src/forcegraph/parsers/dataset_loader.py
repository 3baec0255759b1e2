# src/forcegraph/parsers/dataset_loader.py
"""
將長格式 (每筆一個來源-目標配對) 的資料文件樞紐轉換為矩陣資料集。

支援 YAML 與 JSON 文件 (JSON 是 YAML 的子集，統一以 yaml.safe_load 讀取)。
"""

# 1. 標準庫導入
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
import yaml

# 3. 本專案導入
from forcegraph.models import MatrixDataset, MatrixValue, MeasureColumn, TreeNode


class DatasetFormatError(ValueError):
    """資料文件結構不符合預期時拋出。"""


def _row_identity(record: dict[str, Any], role: str) -> Any:
    explicit = record.get(f"{role}_identity")
    if explicit is not None:
        return explicit
    return f"{role}:{record[role]}"


def build_dataset(
    measures: list[str],
    records: Iterable[dict[str, Any]],
    objects: dict[str, dict[str, Any]] | None = None,
) -> MatrixDataset:
    """
    將記錄列表樞紐為 MatrixDataset。

    來源列與目標列各自依首次出現順序排列；每個來源列攜帶一個長度為
    len(targets) * len(measures) 的扁平值列表，以 j * len(measures) + k 定址。
    同一配對的後續記錄會覆寫其明確提供的量值。

    Args:
        measures: 量值欄位顯示名稱，順序即欄位索引。
        records: 每筆至少包含 "source" 與 "target" 的字典。
        objects: 可選的宿主物件設定。

    Returns:
        樞紐後的 MatrixDataset。
    """
    source_rows: dict[Any, TreeNode] = {}
    target_rows: dict[Any, TreeNode] = {}
    cells: dict[tuple[Any, Any], dict[int, Any]] = {}

    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise DatasetFormatError(f"第 {position} 筆記錄不是映射: {record!r}")
        if "source" not in record or "target" not in record:
            raise DatasetFormatError(f"第 {position} 筆記錄缺少 'source' 或 'target' 欄位。")

        source, target = record["source"], record["target"]
        try:
            hash((source, target))
        except TypeError:
            raise DatasetFormatError(
                f"第 {position} 筆記錄的 'source' 與 'target' 必須是純量值: {source!r} -> {target!r}"
            ) from None
        if source not in source_rows:
            source_rows[source] = TreeNode(value=source, identity=_row_identity(record, "source"))
        if target not in target_rows:
            target_rows[target] = TreeNode(value=target, identity=_row_identity(record, "target"))

        pair_cells = cells.setdefault((source, target), {})
        for measure_index, measure_name in enumerate(measures):
            if measure_name in record:
                pair_cells[measure_index] = record[measure_name]

    measure_count = len(measures)
    targets = list(target_rows)
    for source, row in source_rows.items():
        row.values = [
            MatrixValue(value=cells.get((source, target), {}).get(k), value_source_index=k)
            for target in targets
            for k in range(measure_count)
        ]

    logging.debug(
        f"樞紐完成: {len(source_rows)} 個來源列、{len(target_rows)} 個目標列、{measure_count} 個量值欄位。"
    )
    return MatrixDataset(
        source_rows=list(source_rows.values()),
        target_rows=list(target_rows.values()),
        value_sources=[MeasureColumn(display_name=str(name)) for name in measures],
        objects=dict(objects or {}),
    )


def parse_dataset_document(document: Any) -> MatrixDataset:
    """驗證已載入的文件結構並轉換為 MatrixDataset。"""
    if not isinstance(document, dict):
        raise DatasetFormatError("資料文件的頂層必須是映射。")

    measures = document.get("measures", [])
    records = document.get("records", [])
    objects = document.get("objects") or {}

    if not isinstance(measures, list):
        raise DatasetFormatError("'measures' 必須是字串列表。")
    if not isinstance(records, list):
        raise DatasetFormatError("'records' 必須是記錄列表。")
    if not isinstance(objects, dict):
        raise DatasetFormatError("'objects' 必須是映射。")

    return build_dataset([str(m) for m in measures], records, objects)


def load_dataset(path: Path) -> MatrixDataset | None:
    """
    從 YAML/JSON 檔案載入資料集。

    檔案不存在或無法解析時記錄錯誤並回傳 None；
    結構錯誤則拋出 DatasetFormatError，交由呼叫端決定是否跳過。
    """
    if not path.is_file():
        logging.error(f"指定的資料檔不存在: {path}")
        return None
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logging.error(f"解析資料檔 '{path.name}' 時發生錯誤: {e}")
        return None
    except OSError as e:
        logging.error(f"讀取資料檔 '{path.name}' 時發生錯誤: {e}")
        return None

    dataset = parse_dataset_document(document)
    logging.info(
        f"已載入資料集 '{path.name}': {len(dataset.source_rows)} 個來源、{len(dataset.target_rows)} 個目標。"
    )
    return dataset

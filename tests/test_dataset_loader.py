# tests/test_dataset_loader.py
"""長格式記錄樞紐為矩陣資料集。"""

import json

import pytest

from forcegraph.parsers.dataset_loader import DatasetFormatError, build_dataset, load_dataset, parse_dataset_document


def test_pivot_addresses_cells_by_target_then_measure():
    dataset = build_dataset(
        ["LinkWeight", "SourceGroup"],
        [
            {"source": "A", "target": "B", "LinkWeight": 5, "SourceGroup": 1},
            {"source": "A", "target": "C", "LinkWeight": 3},
            {"source": "B", "target": "C", "LinkWeight": 7},
        ],
    )
    assert [row.value for row in dataset.source_rows] == ["A", "B"]
    assert [row.value for row in dataset.target_rows] == ["B", "C"]

    row_a = dataset.source_rows[0]
    assert len(row_a.values) == 4
    assert [(cell.value, cell.value_source_index) for cell in row_a.values] == [(5, 0), (1, 1), (3, 0), (None, 1)]
    assert row_a.cell(1, 0, 2).value == 3
    assert dataset.source_rows[1].cell(0, 0, 2).value is None


def test_identities_default_to_role_prefix_or_explicit_value():
    dataset = build_dataset(["LinkWeight"], [{"source": "A", "target": "B", "target_identity": "node-b"}])
    assert dataset.source_rows[0].identity == "source:A"
    assert dataset.target_rows[0].identity == "node-b"


def test_later_records_overwrite_named_measures_only():
    dataset = build_dataset(
        ["LinkWeight", "SourceSize"],
        [
            {"source": "A", "target": "B", "LinkWeight": 1, "SourceSize": 4},
            {"source": "A", "target": "B", "LinkWeight": 2},
        ],
    )
    assert [cell.value for cell in dataset.source_rows[0].values] == [2, 4]


def test_malformed_documents_raise():
    with pytest.raises(DatasetFormatError):
        parse_dataset_document(["not", "a", "mapping"])
    with pytest.raises(DatasetFormatError):
        parse_dataset_document({"measures": "LinkWeight"})
    with pytest.raises(DatasetFormatError):
        build_dataset(["LinkWeight"], [{"source": "A"}])


def test_loads_json_documents(tmp_path):
    path = tmp_path / "network.json"
    path.write_text(
        json.dumps(
            {
                "measures": ["LinkWeight"],
                "records": [{"source": "A", "target": "B", "LinkWeight": 5}],
                "objects": {"parameters": {"distance": 80}},
            }
        ),
        encoding="utf-8",
    )
    dataset = load_dataset(path)
    assert dataset.value_sources[0].display_name == "LinkWeight"
    assert dataset.objects == {"parameters": {"distance": 80}}


def test_missing_file_returns_none(tmp_path):
    assert load_dataset(tmp_path / "nope.yaml") is None


@pytest.mark.parametrize("source, target", [([1, 2], "B"), ("A", {"id": "B"})])
def test_non_scalar_endpoints_raise_format_error(source, target):
    with pytest.raises(DatasetFormatError):
        parse_dataset_document(
            {"measures": ["LinkWeight"], "records": [{"source": source, "target": target, "LinkWeight": 1}]}
        )

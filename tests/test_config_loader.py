# tests/test_config_loader.py
"""設定檔載入、遞迴合併與保留註解的更新。"""

from forcegraph.core.config_loader import DEFAULT_VISUAL_CONFIG, ConfigLoader


def test_user_values_are_merged_recursively(tmp_path):
    config_path = tmp_path / "demo.yaml"
    config_path.write_text(
        "dataset_path: data.yaml\nobjects:\n  parameters:\n    charge: -80\nsimulation:\n  seed: 3\n",
        encoding="utf-8",
    )
    config = ConfigLoader(config_path).config

    assert config["dataset_path"] == "data.yaml"
    assert config["objects"]["parameters"] == {"distance": 50.0, "charge": -80}
    assert config["objects"]["symbol"] == {"show": False}
    assert config["simulation"]["seed"] == 3
    assert config["simulation"]["friction"] == 0.9
    assert DEFAULT_VISUAL_CONFIG["objects"]["parameters"]["charge"] == -200.0


def test_empty_file_yields_defaults(tmp_path):
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")
    assert ConfigLoader(config_path).config == DEFAULT_VISUAL_CONFIG


def test_missing_or_malformed_files_yield_none(tmp_path, caplog):
    assert ConfigLoader(tmp_path / "missing.yaml").config is None

    broken = tmp_path / "broken.yaml"
    broken.write_text("objects: [unclosed\n", encoding="utf-8")
    assert ConfigLoader(broken).config is None

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    assert ConfigLoader(listing).config is None
    assert "頂層必須是映射" in caplog.text


def test_from_dict_does_not_share_defaults():
    first = ConfigLoader.from_dict({"viewport": {"width": 1024}})
    first["objects"]["label"]["fill"] = "#000"
    second = ConfigLoader.from_dict({})
    assert first["viewport"] == {"width": 1024, "height": 600}
    assert second["objects"]["label"]["fill"] == "#333"


def test_update_config_file_preserves_comments(tmp_path):
    config_path = tmp_path / "project.yaml"
    config_path.write_text("# 範例專案\nobjects:\n  symbol:\n    show: false  # 符號模式\n", encoding="utf-8")

    assert ConfigLoader.update_config_file(config_path, {"objects.symbol.show": True, "viewport.width": 1200})

    text = config_path.read_text(encoding="utf-8")
    assert "# 範例專案" in text
    assert "# 符號模式" in text
    config = ConfigLoader(config_path).config
    assert config["objects"]["symbol"]["show"] is True
    assert config["viewport"] == {"width": 1200, "height": 600}


def test_update_config_file_reports_failure(tmp_path):
    assert ConfigLoader.update_config_file(tmp_path / "absent.yaml", {"a": 1}) is False

"""Tests for the Config system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from savekeeper.config import Config
from savekeeper.errors import ConfigError
from savekeeper.models.backup_record import ExportRoot


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_dir=tmp_path)


class TestConfig:
    def test_default_values(self, config: Config) -> None:
        assert config.export_root is None
        assert config.username == "User"
        assert config.max_copy_workers == 8
        assert config.cleanup_partial_backups is False

    def test_set_and_get(self, config: Config) -> None:
        with config.batch_update():
            config.set("export_root", "/some/JKSV")
        assert config.export_root == Path("/some/JKSV")

    def test_persisted_to_disk(self, config: Config, tmp_path: Path) -> None:
        config.username = "Player1"
        data = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
        assert data["username"] == "Player1"
        assert Config(config_dir=tmp_path).username == "Player1"

    def test_batch_update_single_write(self, config: Config, tmp_path: Path) -> None:
        with config.batch_update():
            config.set("max_copy_workers", 2)
            assert not (tmp_path / "config.json").exists()
            config.set("cleanup_partial_backups", True)
        assert config.max_copy_workers == 2
        assert config.cleanup_partial_backups is True

    def test_workers_clamped(self, config: Config) -> None:
        config.max_copy_workers = 0
        assert config.max_copy_workers == 1

    def test_corrupt_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
        assert Config(config_dir=tmp_path).username == "User"

    def test_log_dir(self, config: Config, tmp_path: Path) -> None:
        assert config.log_dir == tmp_path / "logs"
        config.set("log_to_file", False)
        assert config.log_dir is None

    def test_get_with_default(self, config: Config) -> None:
        assert config.get("username") == "User"
        assert config.get("missing", "fallback") == "fallback"

    def test_file_values_override_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text(
            json.dumps({"export_root": "./exports/JKSV", "max_copy_workers": 3}), encoding="utf-8"
        )
        config = Config(config_dir=tmp_path)
        assert config.get("export_root") == "./exports/JKSV"
        assert config.max_copy_workers == 3
        assert config.username == "User"

    def test_instances_are_independent(self, tmp_path: Path) -> None:
        first = Config(config_dir=tmp_path / "a")
        second = Config(config_dir=tmp_path / "b")
        first.username = "Player1"
        assert second.username == "User"
        assert second.data_dir == tmp_path / "b"


class TestExportRootFromConfig:
    def test_unset_root(self, config: Config) -> None:
        with pytest.raises(ConfigError):
            ExportRoot.from_config(config)

    def test_configured_root(self, config: Config, tmp_path: Path) -> None:
        root = tmp_path / "JKSV"
        root.mkdir()
        config.export_root = root
        export_root = ExportRoot.from_config(config)
        assert export_root.root_path == root
        assert export_root.is_jksv_style

    def test_configured_root_keeps_raw_string(
        self, config: Config, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "exports" / "JKSV").mkdir(parents=True)
        config.set("export_root", "./exports/JKSV")
        export_root = ExportRoot.from_config(config)
        assert export_root.raw_root == "./exports/JKSV"
        assert export_root.contains("./exports/JKSV/Game [X]")

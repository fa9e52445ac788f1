#!/usr/bin/env python3
"""Tests for the tcx-backup command line."""

import logging
from unittest.mock import patch

import pytest

from tcx_backup.clients.storage_client import LocalStorage
from tcx_backup.core.config import BackupConfig
from tcx_backup.main import build_parser, run
from tests.fixtures.document_fixtures import SAMPLE_TCX


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring logging for the whole test session."""
    with patch("tcx_backup.main.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def storage(tmp_path):
    (tmp_path / "project.tcx").write_text(SAMPLE_TCX, encoding="utf-8")
    return LocalStorage(tmp_path)


@pytest.mark.unit
class TestCli:
    """Test suite for the CLI commands."""

    def test_parser_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_create_then_restore(self, storage, tmp_path):
        assert run(["create", "project.tcx"], storage=storage) == 0
        assert (tmp_path / "project_backup.json").exists()

        assert run(["restore", "project.tcx"], storage=storage) == 0

    def test_create_all(self, storage, tmp_path):
        (tmp_path / "second.tcx").write_text(SAMPLE_TCX, encoding="utf-8")

        assert run(["create", "--all"], storage=storage) == 0

        assert (tmp_path / "project_backup.json").exists()
        assert (tmp_path / "second_backup.json").exists()

    def test_all_delegates_to_batch_operations(self, storage):
        with patch("tcx_backup.main.BackupService.create_all") as mock_create_all:
            assert run(["update", "--all"], storage=storage) == 0

        mock_create_all.assert_called_once_with(action="updated")

        with patch("tcx_backup.main.BackupService.restore_all") as mock_restore_all:
            assert run(["restore", "--all", "--force"], storage=storage) == 0

        mock_restore_all.assert_called_once_with(check=False)

    def test_update_logs_updated(self, storage, caplog):
        caplog.set_level(logging.INFO)

        run(["update", "project.tcx"], storage=storage)

        assert "project_backup.json was updated" in caplog.messages

    def test_restore_missing_backup_exits_zero(self, storage, tmp_path, caplog):
        caplog.set_level(logging.INFO)

        assert run(["restore", "project.tcx"], storage=storage) == 0

        assert "Error: project_backup.json does not exist" in caplog.messages
        assert (tmp_path / "project.tcx").read_text(encoding="utf-8") == SAMPLE_TCX

    def test_restore_force_without_backup_fails(self, storage):
        assert run(["restore", "--force", "project.tcx"], storage=storage) == 1

    def test_malformed_backup_fails(self, storage, tmp_path):
        (tmp_path / "project_backup.json").write_text("{oops", encoding="utf-8")

        assert run(["restore", "project.tcx"], storage=storage) == 1
        assert (tmp_path / "project.tcx").read_text(encoding="utf-8") == SAMPLE_TCX

    def test_wrong_extension_fails(self, storage):
        assert run(["create", "notes.txt"], storage=storage) == 1

    def test_no_files_is_usage_error(self, storage):
        assert run(["create"], storage=storage) == 2

    def test_list(self, storage, capsys):
        run(["create", "project.tcx"], storage=storage)

        assert run(["list"], storage=storage) == 0

        assert "project.tcx\tbackup" in capsys.readouterr().out

    def test_options_override_config(self, storage, no_logging_setup):
        config = BackupConfig()

        run(["--log-format", "json", "--log-level", "debug", "list"], config=config, storage=storage)

        assert config.LOG_FORMAT == "json"
        no_logging_setup.assert_called_once_with(level="DEBUG", log_format="json")

    def test_data_dir_selects_local_storage(self, tmp_path):
        (tmp_path / "project.tcx").write_text(SAMPLE_TCX, encoding="utf-8")

        assert run(["--data-dir", str(tmp_path), "--backend", "local", "create", "project.tcx"]) == 0

        assert (tmp_path / "project_backup.json").exists()

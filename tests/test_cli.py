"""Tests for the command-line interface."""
import io
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from inventory_catalog import cli
from inventory_catalog.photos import PhotoUpload
from inventory_catalog.store import InventoryStore


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


class TestInit:

    def test_creates_empty_document(self, temp_dir):
        target = temp_dir / "cache"

        assert cli.init_inventory(target) == 0
        assert json.loads((target / "inventory.json").read_text(encoding="utf-8")) == []

    def test_leaves_existing_document_alone(self, temp_dir):
        store = InventoryStore(temp_dir)
        store.create("Chair")

        assert cli.init_inventory(temp_dir) == 0
        assert [item.name for item in store.list()] == ["Chair"]

    def test_main_dispatches_init(self, temp_dir):
        with patch("sys.argv", ["inventory-catalog", "init", str(temp_dir / "new")]):
            assert cli.main() == 0

        assert (temp_dir / "new" / "inventory.json").exists()


class TestValidate:

    def test_consistent_inventory(self, temp_dir, capsys):
        store = InventoryStore(temp_dir)
        store.create("Desk Lamp", photo=PhotoUpload("lamp.jpg", io.BytesIO(b"x")))

        assert cli.validate_command(temp_dir) == 0
        assert "no validation issues" in capsys.readouterr().out

    def test_reports_missing_and_orphan_files(self, temp_dir, capsys):
        store = InventoryStore(temp_dir)
        item = store.create("Desk Lamp", photo=PhotoUpload("lamp.jpg", io.BytesIO(b"x")))
        (temp_dir / item.photo_filename).unlink()
        (temp_dir / "stray.png").write_bytes(b"y")

        assert cli.validate_command(temp_dir) == 1

        out = capsys.readouterr().out
        assert f"photo file '{item.photo_filename}' missing" in out
        assert "Orphan file not bound to any item: stray.png" in out

    def test_reports_duplicate_ids(self, temp_dir, capsys):
        (temp_dir / "inventory.json").write_text(json.dumps([
            {"id": "1", "name": "Chair"},
            {"id": "1", "name": "Table"},
        ]), encoding="utf-8")

        assert cli.validate_command(temp_dir) == 1
        assert "Duplicate item ID: 1" in capsys.readouterr().out

    def test_corrupt_document(self, temp_dir):
        (temp_dir / "inventory.json").write_text("[", encoding="utf-8")

        assert cli.validate_command(temp_dir) == 1

    def test_missing_directory(self, temp_dir):
        assert cli.validate_command(temp_dir / "nope") == 1
        assert not (temp_dir / "nope").exists()


class TestServe:

    def test_runs_uvicorn_with_cli_overrides(self, temp_dir):
        with patch("uvicorn.run") as mock_run:
            result = cli.serve_command(host="127.0.0.1", port=8123, cache=temp_dir)

        assert result == 0
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8123

"""Tests for State Manager and storage backends."""

import json
from pathlib import Path

import pytest
import yaml

from sirf_table_reader.core.state import (
    DiskStorage,
    DocumentState,
    MemoryStorage,
    StateManager,
)
from sirf_table_reader.schemas.fragment import TextFragment


class TestMemoryStorage:
    """Test suite for MemoryStorage backend."""

    @pytest.fixture
    def storage(self) -> MemoryStorage:
        return MemoryStorage()

    def test_save_and_load(self, storage: MemoryStorage) -> None:
        storage.save("results/extraction", {"rows": []})
        assert storage.load("results/extraction") == {"rows": []}

    def test_load_default(self, storage: MemoryStorage) -> None:
        """Loading a missing key returns the default."""
        assert storage.load("nonexistent", default="default") == "default"
        assert storage.load("nonexistent") is None

    def test_exists(self, storage: MemoryStorage) -> None:
        assert not storage.exists("key")
        storage.save("key", b"value")
        assert storage.exists("key")


class TestDiskStorage:
    """Test suite for DiskStorage backend."""

    @pytest.fixture
    def storage(self, tmp_path: Path) -> DiskStorage:
        return DiskStorage(tmp_path)

    def test_directory_creation(self, storage: DiskStorage) -> None:
        """All run directories exist after construction."""
        assert storage.cache_dir.exists()
        assert storage.fragments_dir.exists()
        assert storage.results_dir.exists()
        assert storage.workbooks_dir.exists()
        assert storage.logs_dir.exists()

    def test_fragments_stored_as_json(self, storage: DiskStorage) -> None:
        data = [{"x": 1.0, "y": 2.0, "text": "Qty", "width": None}]

        storage.save("fragments/001", data)

        path = storage.fragments_dir / "page_001.json"
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == data
        assert storage.load("fragments/001") == data

    def test_results_stored_as_yaml(self, storage: DiskStorage) -> None:
        """Results are human-readable YAML with key order preserved."""
        data = {"strategy": "fixed", "metadata": {"Request Date": "2024-01-01"}}

        storage.save("results/extraction", data)

        path = storage.results_dir / "extraction.yaml"
        text = path.read_text(encoding="utf-8")
        assert text.index("strategy") < text.index("metadata")
        assert yaml.safe_load(text) == data
        assert storage.load("results/extraction") == data

    def test_workbook_requires_bytes(self, storage: DiskStorage) -> None:
        with pytest.raises(TypeError):
            storage.save("workbooks/form", "not bytes")

    def test_workbook_roundtrip(self, storage: DiskStorage) -> None:
        storage.save("workbooks/form", b"PK\x03\x04")

        assert storage.path_for("workbooks/form") == storage.workbooks_dir / "form.xlsx"
        assert storage.load("workbooks/form") == b"PK\x03\x04"

    def test_load_missing_returns_default(self, storage: DiskStorage) -> None:
        assert storage.load("results/missing", default={}) == {}
        assert not storage.exists("results/missing")

    @pytest.mark.parametrize("key", ["no_slash", "images/001"])
    def test_invalid_keys(self, storage: DiskStorage, key: str) -> None:
        with pytest.raises(ValueError):
            storage.save(key, b"")


class TestStateManager:
    """Test suite for StateManager."""

    @pytest.fixture(params=["memory", "disk"])
    def manager(self, request, tmp_path: Path) -> StateManager:
        storage = MemoryStorage() if request.param == "memory" else DiskStorage(tmp_path)
        return StateManager(storage)

    def test_initial_state(self, manager: StateManager) -> None:
        assert manager.state == DocumentState()

    def test_fragments_roundtrip(self, manager: StateManager) -> None:
        """Saved fragments load back as TextFragment objects."""
        page = [TextFragment(2, 4, "Request Date", 6.0), TextFragment(8, 4, "2024-01-01")]

        manager.save_fragments(1, page)
        loaded = manager.load_fragments(1)

        assert loaded == page
        assert manager.state.pages[1] == page

    def test_load_missing_fragments(self, manager: StateManager) -> None:
        assert manager.load_fragments(7) is None

    def test_save_operation_result(self, manager: StateManager) -> None:
        manager.save_operation_result("extraction", {"rows": [{"Item Code": "IC-001"}]})

        assert manager.state.operation_results["extraction"]["rows"][0]["Item Code"] == "IC-001"
        assert manager.storage.exists("results/extraction")

    def test_save_workbook(self, manager: StateManager) -> None:
        manager.save_workbook("form", b"xlsx")

        assert manager.state.workbooks == {"form": b"xlsx"}
        assert manager.storage.load("workbooks/form") == b"xlsx"

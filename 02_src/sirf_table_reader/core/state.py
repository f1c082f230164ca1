"""Run state: extracted fragments, operation results and workbooks.

Keys have the form "<kind>/<name>":
- fragments/001      -> cache/fragments/page_001.json
- results/extraction -> results/extraction.yaml
- workbooks/form     -> workbooks/form.xlsx
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import yaml

from ..schemas.fragment import Page
from ..utils.normalization import normalize_page

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Key/value store used by StateManager."""

    def save(self, key: str, value: Any) -> None:
        ...

    def load(self, key: str, default: Any = None) -> Any:
        ...

    def exists(self, key: str) -> bool:
        ...


class MemoryStorage:
    """Keeps everything in a dict; nothing touches the filesystem."""

    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}
        logger.info("Using in-memory state storage")

    def save(self, key: str, value: Any) -> None:
        self._items[key] = value
        logger.debug(f"MemoryStorage: stored '{key}'")

    def load(self, key: str, default: Any = None) -> Any:
        return self._items.get(key, default)

    def exists(self, key: str) -> bool:
        return key in self._items


def _write_json(path: Path, value: Any) -> None:
    path.write_text(json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8")


def _write_yaml(path: Path, value: Any) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(value, f, allow_unicode=True, default_flow_style=False, sort_keys=False)


def _write_bytes(path: Path, value: Any) -> None:
    if not isinstance(value, bytes):
        raise TypeError(f"Workbook content must be bytes, got {type(value).__name__}")
    path.write_bytes(value)


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _read_bytes(path: Path) -> Any:
    return path.read_bytes()


# kind -> (directory relative to the run dir, file name template, writer, reader)
_LAYOUT: Dict[str, Tuple[str, str, Callable[[Path, Any], None], Callable[[Path], Any]]] = {
    "fragments": ("cache/fragments", "page_{}.json", _write_json, _read_json),
    "results": ("results", "{}.yaml", _write_yaml, _read_yaml),
    "workbooks": ("workbooks", "{}.xlsx", _write_bytes, _read_bytes),
}


class DiskStorage:
    """Stores run state under a run directory.

    Creates cache/fragments, results, workbooks and logs on construction;
    the CLI writes its log file into logs/.
    """

    def __init__(self, state_dir: Path) -> None:
        """Initialize disk storage.

        Args:
            state_dir: Run directory (created if missing)
        """
        self.state_dir = Path(state_dir)
        self.cache_dir = self.state_dir / "cache"
        self.fragments_dir = self.state_dir / _LAYOUT["fragments"][0]
        self.results_dir = self.state_dir / _LAYOUT["results"][0]
        self.workbooks_dir = self.state_dir / _LAYOUT["workbooks"][0]
        self.logs_dir = self.state_dir / "logs"

        for directory in (self.fragments_dir, self.results_dir, self.workbooks_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

        logger.info(f"Run state directory: {self.state_dir}")

    def _resolve(self, key: str):
        kind, sep, name = key.partition("/")
        if not sep or not name:
            raise ValueError(f"Storage key must look like '<kind>/<name>', got '{key}'")
        if kind not in _LAYOUT:
            raise ValueError(f"Unknown storage kind '{kind}' (expected one of {', '.join(_LAYOUT)})")
        directory, template, writer, reader = _LAYOUT[kind]
        return self.state_dir / directory / template.format(name), writer, reader

    def path_for(self, key: str) -> Path:
        """File path backing a key."""
        return self._resolve(key)[0]

    def save(self, key: str, value: Any) -> None:
        path, writer, _ = self._resolve(key)
        try:
            writer(path, value)
        except (OSError, TypeError, yaml.YAMLError) as e:
            logger.error(f"Could not write '{key}' to {path}: {e}")
            raise
        logger.debug(f"DiskStorage: wrote '{key}' -> {path}")

    def load(self, key: str, default: Any = None) -> Any:
        path, _, reader = self._resolve(key)
        if not path.exists():
            return default
        try:
            return reader(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Could not read '{key}' from {path}: {e}")
            raise

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()


@dataclass
class DocumentState:
    """What the current run has produced so far.

    Attributes:
        pages: 1-based page number -> fragments
        operation_results: Operation name -> plain result data
        workbooks: Workbook name -> xlsx bytes
    """

    pages: Dict[int, Page] = field(default_factory=dict)
    operation_results: Dict[str, Any] = field(default_factory=dict)
    workbooks: Dict[str, bytes] = field(default_factory=dict)


class StateManager:
    """Mirrors run state into a storage backend."""

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage
        self.state = DocumentState()
        logger.info(f"StateManager ready ({type(storage).__name__})")

    @staticmethod
    def _page_key(page_num: int) -> str:
        return f"fragments/{page_num:03d}"

    def save_fragments(self, page_num: int, fragments: Page) -> None:
        """Persist the fragments of one page (1-based page number)."""
        self.storage.save(self._page_key(page_num), [asdict(f) for f in fragments])
        self.state.pages[page_num] = list(fragments)
        logger.debug(f"Stored page {page_num}: {len(fragments)} fragments")

    def load_fragments(self, page_num: int) -> Optional[Page]:
        """Fragments of one page, or None when the page was never stored."""
        raw: Optional[List[Dict[str, Any]]] = self.storage.load(self._page_key(page_num))
        if raw is None:
            return None
        fragments = normalize_page(raw)
        self.state.pages[page_num] = fragments
        return fragments

    def save_operation_result(self, operation: str, result: Any) -> None:
        """Persist plain result data of an operation (YAML on disk)."""
        self.storage.save(f"results/{operation}", result)
        self.state.operation_results[operation] = result
        logger.info(f"Stored result of '{operation}'")

    def save_workbook(self, name: str, content: bytes) -> None:
        """Persist rendered xlsx bytes under workbooks/<name>."""
        self.storage.save(f"workbooks/{name}", content)
        self.state.workbooks[name] = content
        logger.info(f"Stored workbook '{name}' ({len(content)} bytes)")

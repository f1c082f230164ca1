"""Core components: geometry algorithms, assembler, state management and processor."""

from .rows import bucket_rows, cluster_rows
from .labels import extract_metadata, find_value
from .strategies import (
    BaseTableStrategy,
    DynamicHeaderStrategy,
    FixedSchemaStrategy,
)
from .projection import build_grid, build_grids, segment_columns
from .assembler import TableAssembler, select_strategy
from .state import (
    StorageBackend,
    MemoryStorage,
    DiskStorage,
    DocumentState,
    StateManager,
)
from .processor import DocumentProcessor

__all__ = [
    # Geometry
    "bucket_rows",
    "cluster_rows",
    "extract_metadata",
    "find_value",
    "segment_columns",
    "build_grid",
    "build_grids",
    # Strategies
    "BaseTableStrategy",
    "DynamicHeaderStrategy",
    "FixedSchemaStrategy",
    "TableAssembler",
    "select_strategy",
    # State management
    "StorageBackend",
    "MemoryStorage",
    "DiskStorage",
    "DocumentState",
    "StateManager",
    "DocumentProcessor",
]

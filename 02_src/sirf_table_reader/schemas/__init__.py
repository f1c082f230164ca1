"""Data schemas for SIRF Table Reader."""

from .fragment import InvalidInput, Page, TextFragment
from .document import (
    ColumnDefinition,
    ColumnInterval,
    ExtractionResult,
    LabelPattern,
    MetadataField,
    ProjectionGrid,
    ResolvedColumn,
    TableExtraction,
)
from .config import ExtractionConfig, ProcessorConfig
from .sirf import SIRF_COLUMNS, SIRF_METADATA_FIELDS

__all__ = [
    "InvalidInput",
    "Page",
    "TextFragment",
    "ColumnDefinition",
    "ColumnInterval",
    "ExtractionResult",
    "LabelPattern",
    "MetadataField",
    "ProjectionGrid",
    "ResolvedColumn",
    "TableExtraction",
    "ExtractionConfig",
    "ProcessorConfig",
    "SIRF_COLUMNS",
    "SIRF_METADATA_FIELDS",
]

"""SIRF Table Reader - geometric table reconstruction for form-style PDFs.

This package turns positioned text fragments of Stock Issue Request Form
(SIRF) documents into structured rows:
- TableAssembler: metadata lookup, table strategies and projection grids
- DocumentProcessor: loads PDFs or pdf2json dumps into fragments
- TableExtractionOperation: runs the assembler over a loaded document
- SirfWorkbookWriter: renders results into an xlsx workbook
"""

__version__ = "0.1.0"

# Core classes
from .core.processor import DocumentProcessor
from .core.assembler import TableAssembler
from .core.strategies import BaseTableStrategy, DynamicHeaderStrategy, FixedSchemaStrategy
from .core.labels import find_value
from .core.rows import cluster_rows
from .core.projection import segment_columns

# Operations
from .operations.base import BaseOperation
from .operations.table_extraction import TableExtractionOperation

# Writers
from .writers.workbook import SirfWorkbookWriter

# Schemas
from .schemas.config import ExtractionConfig, ProcessorConfig
from .schemas.fragment import InvalidInput, TextFragment
from .schemas.document import (
    ColumnDefinition,
    ColumnInterval,
    ExtractionResult,
    LabelPattern,
    MetadataField,
    ProjectionGrid,
)
from .schemas.sirf import SIRF_COLUMNS, SIRF_METADATA_FIELDS
from .utils.normalization import normalize_fragment, pages_from_pdf2json

__all__ = [
    # Version
    "__version__",

    # Core
    "DocumentProcessor",
    "TableAssembler",
    "BaseTableStrategy",
    "DynamicHeaderStrategy",
    "FixedSchemaStrategy",
    "find_value",
    "cluster_rows",
    "segment_columns",

    # Operations
    "BaseOperation",
    "TableExtractionOperation",

    # Writers
    "SirfWorkbookWriter",

    # Schemas - Config
    "ExtractionConfig",
    "ProcessorConfig",

    # Schemas - Fragments and results
    "InvalidInput",
    "TextFragment",
    "ColumnDefinition",
    "ColumnInterval",
    "ExtractionResult",
    "LabelPattern",
    "MetadataField",
    "ProjectionGrid",
    "SIRF_COLUMNS",
    "SIRF_METADATA_FIELDS",

    # Normalization
    "normalize_fragment",
    "pages_from_pdf2json",
]

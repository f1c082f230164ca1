"""High-level operations over loaded documents."""

from .base import BaseOperation
from .table_extraction import TableExtractionOperation

__all__ = ["BaseOperation", "TableExtractionOperation"]

"""Output writers for extraction results."""

from .workbook import SirfWorkbookWriter

__all__ = ["SirfWorkbookWriter"]

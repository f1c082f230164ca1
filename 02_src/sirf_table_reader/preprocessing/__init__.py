"""Preprocessing module for turning PDF pages into positioned text fragments."""

from .extractor import ExtractConfig, PDFTextExtractor

__all__ = ["ExtractConfig", "PDFTextExtractor"]

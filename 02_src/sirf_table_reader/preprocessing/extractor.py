"""PDF text extractor producing positioned fragments."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import fitz  # pymupdf

from ..schemas.fragment import Page, TextFragment

logger = logging.getLogger(__name__)


@dataclass
class ExtractConfig:
    """Configuration for PDF text extraction.

    Attributes:
        points_per_unit: PDF points per output coordinate unit
        skip_blank: Drop whitespace-only spans
    """

    points_per_unit: float = 16.0
    skip_blank: bool = True


class PDFTextExtractor:
    """Extracts text spans with positions from PDF pages using pymupdf (fitz).

    Each span becomes one TextFragment at the top-left corner of its visible
    glyphs (padding spaces excluded), scaled to form units.
    """

    def __init__(self, config: Optional[ExtractConfig] = None):
        """Initialize extractor with configuration.

        Args:
            config: Extract configuration (scale, blank handling)
        """
        self.config = config or ExtractConfig()

    def _iter_spans(self, page: Any) -> Iterator[Dict[str, Any]]:
        content = page.get_text("rawdict")
        for block in content.get("blocks", []):
            if block.get("type", 0) != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    yield span

    def _span_fragment(self, span: Dict[str, Any]) -> Optional[TextFragment]:
        """Fragment for a rawdict span, positioned on its non-blank characters.

        Leading and trailing spaces are stripped from the text, and x/width
        are taken from the first and last visible glyphs so they describe
        the same text. y is the top of the span box.
        """
        chars = span.get("chars", [])
        visible = [ch for ch in chars if not ch["c"].isspace()]
        if not visible and self.config.skip_blank:
            return None

        x0, y0, x1, _y1 = span["bbox"]
        if visible:
            x0 = visible[0]["bbox"][0]
            x1 = visible[-1]["bbox"][2]

        scale = self.config.points_per_unit
        return TextFragment(
            x=x0 / scale,
            y=y0 / scale,
            text="".join(ch["c"] for ch in chars).strip(),
            width=max(0.0, (x1 - x0) / scale),
        )

    def _page_fragments(self, page: Any) -> Page:
        fragments: Page = []
        for span in self._iter_spans(page):
            fragment = self._span_fragment(span)
            if fragment is not None:
                fragments.append(fragment)
        return fragments

    def extract_pdf(
        self,
        pdf_path: Path,
        page_indices: Optional[List[int]] = None,
    ) -> List[Tuple[int, Page]]:
        """Read fragments from the selected pages.

        Args:
            pdf_path: PDF file
            page_indices: 0-based page indices; None reads every page.
                Out-of-range indices are logged and skipped.

        Returns:
            (1-based page number, fragments) per extracted page
        """
        pdf_path = Path(pdf_path)
        with fitz.open(pdf_path) as doc:
            page_count = doc.page_count
            wanted = range(page_count) if page_indices is None else page_indices

            results: List[Tuple[int, Page]] = []
            for idx in wanted:
                if not 0 <= idx < page_count:
                    logger.warning(f"{pdf_path.name}: no page at index {idx} ({page_count} pages)")
                    continue
                fragments = self._page_fragments(doc[idx])
                logger.debug(f"{pdf_path.name} p{idx + 1}: {len(fragments)} fragments")
                results.append((idx + 1, fragments))

        logger.info(
            f"Extracted {len(results)}/{page_count} pages from {pdf_path} "
            f"at {self.config.points_per_unit:g} points/unit"
        )
        return results

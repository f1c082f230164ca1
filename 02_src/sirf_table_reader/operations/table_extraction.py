"""Table extraction operation - turns a loaded form into an ExtractionResult."""

import logging
from typing import Any, List, Optional, Sequence

from .base import BaseOperation
from ..core.assembler import TableAssembler
from ..schemas.config import ExtractionConfig
from ..schemas.document import ColumnDefinition, ExtractionResult, MetadataField
from ..schemas.sirf import SIRF_COLUMNS, SIRF_METADATA_FIELDS

logger = logging.getLogger(__name__)


class TableExtractionOperation(BaseOperation):
    """Extract metadata, item table and projection grids from a document.

    Defaults to the SIRF layout: SIRF metadata labels and the SIRF fixed
    column schema, with header detection as fallback.
    """

    name = "extraction"

    def __init__(
        self,
        processor: Any,
        config: Optional[ExtractionConfig] = None,
        schema: Optional[Sequence[ColumnDefinition]] = SIRF_COLUMNS,
        metadata_fields: Sequence[MetadataField] = SIRF_METADATA_FIELDS,
        persist: bool = True,
    ):
        """Initialize table extraction operation.

        Args:
            processor: DocumentProcessor instance
            config: Extraction thresholds and strategy selection
            schema: Fixed column definitions (None = header detection only)
            metadata_fields: Labelled metadata fields to look up
            persist: Save the result to state as results/extraction
        """
        super().__init__(processor, persist=persist)
        self.assembler = TableAssembler(
            schema=schema,
            metadata_fields=metadata_fields,
            config=config,
        )

    def execute(self, pages: Optional[List[int]] = None) -> ExtractionResult:
        """Execute extraction.

        Args:
            pages: 1-based page numbers to process (None = all pages)

        Returns:
            ExtractionResult
        """
        all_pages = self.processor.pages
        if pages is None:
            numbers = list(range(1, len(all_pages) + 1))
        else:
            numbers = [i for i in sorted(set(pages)) if 1 <= i <= len(all_pages)]
        selected = [all_pages[i - 1] for i in numbers]

        logger.info(
            f"Starting TableExtractionOperation on {len(selected)} pages "
            f"(of {len(all_pages)} total)"
        )

        result = self.assembler.assemble(selected, numbers)
        self.save_result(result.to_dict())

        logger.info("TableExtractionOperation completed successfully")
        return result

"""Table assembler - runs metadata, table and projection extraction over a document."""

import logging
from typing import Optional, Sequence

from ..schemas.config import ExtractionConfig
from ..schemas.document import ColumnDefinition, ExtractionResult, MetadataField
from ..schemas.fragment import TextFragment
from ..schemas.sirf import SIRF_METADATA_FIELDS
from .labels import extract_metadata
from .projection import build_grids
from .strategies import BaseTableStrategy, DynamicHeaderStrategy, FixedSchemaStrategy

logger = logging.getLogger(__name__)


def select_strategy(
    config: ExtractionConfig,
    schema: Optional[Sequence[ColumnDefinition]] = None,
) -> BaseTableStrategy:
    """Pick the table strategy from configuration.

    "auto" uses the fixed schema when one is supplied, header detection
    otherwise.

    Raises:
        ValueError: If "fixed" is requested without a schema
    """
    if config.strategy == "dynamic":
        return DynamicHeaderStrategy(config)
    if config.strategy == "fixed":
        if not schema:
            raise ValueError("Fixed-schema strategy requires column definitions")
        return FixedSchemaStrategy(schema, config)
    if schema:
        return FixedSchemaStrategy(schema, config)
    return DynamicHeaderStrategy(config)


class TableAssembler:
    """Orchestrates extraction of one document into an ExtractionResult.

    Holds only immutable configuration; every assemble() call resolves its
    own column anchors, so one assembler may serve many documents.
    """

    def __init__(
        self,
        schema: Optional[Sequence[ColumnDefinition]] = None,
        metadata_fields: Sequence[MetadataField] = SIRF_METADATA_FIELDS,
        config: Optional[ExtractionConfig] = None,
    ):
        """Initialize assembler.

        Args:
            schema: Fixed column definitions (None = dynamic header detection)
            metadata_fields: Labelled fields to look up
            config: Extraction thresholds and strategy selection
        """
        self.schema = tuple(schema) if schema else None
        self.metadata_fields = tuple(metadata_fields)
        self.config = config or ExtractionConfig()

    def assemble(
        self,
        pages: Sequence[Sequence[TextFragment]],
        page_numbers: Optional[Sequence[int]] = None,
    ) -> ExtractionResult:
        """Extract metadata, the primary table and per-page projection grids.

        Args:
            pages: Finalized fragments of all pages, in page order
            page_numbers: Document page number of each entry in pages, used
                to number the grids (None = 1..len(pages))

        Returns:
            ExtractionResult; empty input yields empty values, no error
        """
        pages = list(pages or [])
        logger.info(f"Assembling {len(pages)} pages ({sum(len(p) for p in pages)} fragments)")

        metadata = extract_metadata(pages, self.metadata_fields, self.config)

        strategy = select_strategy(self.config, self.schema)
        table = strategy.extract(pages)

        if (
            not table.found
            and isinstance(strategy, FixedSchemaStrategy)
            and self.config.dynamic_fallback
        ):
            logger.info("Fixed schema did not match, falling back to header detection")
            strategy = DynamicHeaderStrategy(self.config)
            table = strategy.extract(pages)

        grids = build_grids(pages, self.config, page_numbers)

        result = ExtractionResult(
            metadata=metadata,
            rows=table.rows,
            headers=table.headers,
            grids=grids,
            strategy=strategy.name if table.found else None,
        )
        logger.info(
            f"Assembled: strategy={result.strategy}, {len(result.headers)} headers, "
            f"{len(result.rows)} rows, {len(grids)} projection grids"
        )
        return result

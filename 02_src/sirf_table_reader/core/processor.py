"""DocumentProcessor - loads a form into pages of positioned text fragments."""

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..preprocessing.extractor import ExtractConfig, PDFTextExtractor
from ..schemas.config import ProcessorConfig
from ..schemas.fragment import Page
from ..utils.normalization import normalize_page, pages_from_pdf2json
from .state import DiskStorage, MemoryStorage, StateManager

logger = logging.getLogger(__name__)

Source = Union[str, Path, Mapping[str, Any], Sequence[Sequence[Any]]]


class DocumentProcessor:
    """Entry point for a single document.

    Accepted sources:
    - PDF path: spans are read with pymupdf
    - .json path or already parsed mapping: pdf2json output
    - list of pages: TextFragment objects or fragment mappings

    Every source ends up as TextFragment pages before extraction starts.
    """

    def __init__(
        self,
        source: Source,
        state_manager: Optional[StateManager] = None,
        config: Optional[ProcessorConfig] = None,
    ):
        """Load the document.

        Args:
            source: PDF/JSON path, pdf2json payload or list of pages
            state_manager: Where fragments and results go (built from
                config.state_dir when omitted: disk if set, memory otherwise)
            config: Processor configuration

        Raises:
            FileNotFoundError: If a source path does not exist
            TypeError: If the source type is not supported
            InvalidInput: If a fragment lacks required geometry
        """
        self.config = config or ProcessorConfig()
        self.state_manager = state_manager or self._default_state_manager()
        self._pages: List[Page] = self._load(source)

        if self.config.auto_save:
            for page_num, page in enumerate(self._pages, start=1):
                self.state_manager.save_fragments(page_num, page)

        logger.info(
            f"Loaded {len(self._pages)} pages, "
            f"{sum(len(p) for p in self._pages)} fragments"
        )

    def _default_state_manager(self) -> StateManager:
        state_dir = self.config.state_dir
        storage = DiskStorage(state_dir) if state_dir is not None else MemoryStorage()
        return StateManager(storage)

    def _load(self, source: Source) -> List[Page]:
        if isinstance(source, (str, Path)):
            return self._load_path(Path(source))
        if isinstance(source, Mapping):
            logger.info("Reading pdf2json payload")
            return pages_from_pdf2json(source)
        if isinstance(source, (list, tuple)):
            logger.info(f"Reading {len(source)} pre-extracted pages")
            return [normalize_page(page) for page in source]
        raise TypeError(
            f"Unsupported source type {type(source).__name__}: "
            "expected a path, a pdf2json mapping or a list of pages"
        )

    def _load_path(self, path: Path) -> List[Page]:
        if not path.exists():
            raise FileNotFoundError(f"Source not found: {path}")

        if path.suffix.lower() == ".json":
            logger.info(f"Reading pdf2json file {path}")
            return pages_from_pdf2json(json.loads(path.read_text(encoding="utf-8")))

        logger.info(f"Reading PDF {path}")
        extractor = PDFTextExtractor(ExtractConfig(points_per_unit=self.config.points_per_unit))
        return [fragments for _, fragments in extractor.extract_pdf(path)]

    @property
    def pages(self) -> List[Page]:
        """Fragments per page, in page order."""
        return self._pages

    @property
    def num_pages(self) -> int:
        return len(self._pages)

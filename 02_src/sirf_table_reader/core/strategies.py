"""Table-structure strategies: fixed schema mapping and dynamic header detection.

Both strategies share the body extraction: find where data starts on each
page, sweep fragments into rows, and assign each fragment to a column
interval [anchor x - margin, next anchor x - margin). They differ in how
the column anchors are discovered, what happens to fragments outside all
intervals, and which rows are kept.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..schemas.config import ExtractionConfig
from ..schemas.document import ColumnDefinition, ResolvedColumn, TableExtraction
from ..schemas.fragment import TextFragment
from .rows import bucket_rows, cluster_rows, sort_by_y

logger = logging.getLogger(__name__)


def column_index(
    x: float,
    columns: Sequence[ResolvedColumn],
    margin: float,
    sentinel: float,
) -> Optional[int]:
    """Index of the column whose interval contains x, or None.

    Columns must be sorted by anchor x. The last interval extends to the
    sentinel.
    """
    for i, column in enumerate(columns):
        start = column.x - margin
        end = columns[i + 1].x - margin if i + 1 < len(columns) else sentinel
        if start <= x < end:
            return i
    return None


def nearest_column(x: float, columns: Sequence[ResolvedColumn]) -> Optional[int]:
    """Index of the column with the closest anchor x (first one on ties)."""
    if not columns:
        return None
    return min(range(len(columns)), key=lambda i: abs(x - columns[i].x))


def _unique_names(names: Iterable[str]) -> List[str]:
    seen: Dict[str, int] = {}
    unique: List[str] = []
    for name in names:
        count = seen.get(name, 0) + 1
        seen[name] = count
        unique.append(name if count == 1 else f"{name} ({count})")
    return unique


class BaseTableStrategy(ABC):
    """Abstract table-structure strategy.

    Subclasses implement column discovery, the out-of-interval policy and
    the row acceptance rule; extract() drives the shared body sweep.
    """

    name = "base"

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """Initialize strategy.

        Args:
            config: Extraction thresholds (default config if omitted)
        """
        self.config = config or ExtractionConfig()

    @abstractmethod
    def resolve_columns(
        self,
        first_page: Sequence[TextFragment],
    ) -> Tuple[List[ResolvedColumn], Optional[float]]:
        """Discover column anchors on the first page.

        Returns:
            (columns sorted by x, table header y or None). An empty column
            list means no table body is extracted.
        """
        raise NotImplementedError

    @abstractmethod
    def place(self, x: float, columns: Sequence[ResolvedColumn]) -> Optional[int]:
        """Column index for a fragment at x, or None to drop it."""
        raise NotImplementedError

    @abstractmethod
    def keep_row(self, cells: Dict[str, str], columns: Sequence[ResolvedColumn]) -> bool:
        """Decide whether a filled row (column id -> text) is kept."""
        raise NotImplementedError

    def extract(self, pages: Sequence[Sequence[TextFragment]]) -> TableExtraction:
        """Extract the table body from all pages.

        Column anchors are resolved once from the first page and reused,
        unchanged, for every following page.
        """
        first_page = pages[0] if pages else []
        columns, header_y = self.resolve_columns(first_page)

        if not columns:
            logger.info(f"[{self.name}] no table columns resolved, table body is empty")
            return TableExtraction(header_y=header_y)

        logger.info(
            f"[{self.name}] {len(columns)} columns: "
            + ", ".join(f"{c.name}@{c.x:g}" for c in columns)
        )

        rows: List[Dict[str, str]] = []
        for page_num, page in enumerate(pages, start=1):
            start_y = self.start_y(page, header_y)
            body = sort_by_y(f for f in page if f.y > start_y)
            kept = 0

            for group in cluster_rows(body, self.config.row_tolerance):
                cells = self.fill_cells(group, columns)
                if self.keep_row(cells, columns):
                    rows.append({c.name: cells[c.id] for c in columns})
                    kept += 1

            logger.debug(f"[{self.name}] page {page_num}: start_y={start_y:g}, {kept} rows kept")

        logger.info(f"[{self.name}] extracted {len(rows)} rows from {len(pages)} pages")
        return TableExtraction(
            headers=[c.name for c in columns],
            rows=rows,
            columns=list(columns),
            header_y=header_y,
        )

    def start_y(self, page: Sequence[TextFragment], header_y: Optional[float]) -> float:
        """Data rows start below the header line when the page carries it, else at 0."""
        if header_y is None:
            return 0.0
        if any(abs(f.y - header_y) < self.config.header_proximity for f in page):
            return header_y + self.config.header_skip
        return 0.0

    def fill_cells(
        self,
        group: Sequence[TextFragment],
        columns: Sequence[ResolvedColumn],
    ) -> Dict[str, str]:
        """Assign row fragments to columns, joining same-cell text with a space."""
        cells = {c.id: "" for c in columns}
        for fragment in group:
            idx = self.place(fragment.x, columns)
            if idx is None:
                continue
            key = columns[idx].id
            cells[key] = f"{cells[key]} {fragment.text}" if cells[key] else fragment.text
        return cells


class FixedSchemaStrategy(BaseTableStrategy):
    """Maps fragments onto a predefined set of named columns.

    Fragments outside every column interval are dropped. A row is kept when
    one of the row-anchor columns is non-empty.
    """

    name = "fixed"

    def __init__(
        self,
        definitions: Sequence[ColumnDefinition],
        config: Optional[ExtractionConfig] = None,
    ):
        """Initialize fixed schema strategy.

        Args:
            definitions: Ordered column definitions (never mutated)
            config: Extraction thresholds
        """
        super().__init__(config)
        self.definitions: Tuple[ColumnDefinition, ...] = tuple(definitions)
        self._anchor_ids: Set[str] = {d.id for d in self.definitions if d.row_anchor}

    def resolve_columns(
        self,
        first_page: Sequence[TextFragment],
    ) -> Tuple[List[ResolvedColumn], Optional[float]]:
        """Anchor each definition at the x of the first fragment matching its label.

        Columns sharing a title are named "Title", "Title (2)", ... in x order.
        """
        anchors: Dict[str, float] = {}
        header_y: Optional[float] = None

        for fragment in first_page:
            for definition in self.definitions:
                if definition.id in anchors or not definition.label.matches(fragment.text):
                    continue
                anchors[definition.id] = fragment.x
                if definition.table_start and header_y is None:
                    header_y = fragment.y
                break

        missing = [d.id for d in self.definitions if d.id not in anchors and not d.optional]
        if missing:
            logger.warning(f"[{self.name}] required columns not found: {', '.join(missing)}")

        resolved = sorted(
            (d for d in self.definitions if d.id in anchors),
            key=lambda d: anchors[d.id],
        )
        names = _unique_names(d.header for d in resolved)
        renamed = [f"{d.header} -> {n}" for d, n in zip(resolved, names) if d.header != n]
        if renamed:
            logger.warning(f"[{self.name}] duplicate column titles renamed: {', '.join(renamed)}")

        columns = [
            ResolvedColumn(id=d.id, name=name, x=anchors[d.id])
            for d, name in zip(resolved, names)
        ]

        if len(columns) < self.config.min_active_columns:
            logger.warning(
                f"[{self.name}] only {len(columns)} columns resolved "
                f"(need {self.config.min_active_columns})"
            )
            return [], header_y

        return columns, header_y

    def place(self, x: float, columns: Sequence[ResolvedColumn]) -> Optional[int]:
        """Interval lookup only; None drops the fragment."""
        return column_index(x, columns, self.config.column_margin, self.config.column_sentinel)

    def keep_row(self, cells: Dict[str, str], columns: Sequence[ResolvedColumn]) -> bool:
        """Keep rows with a filled row-anchor cell."""
        # Anchors that did not resolve on this document cannot veto a row.
        anchor_ids = (self._anchor_ids & set(cells)) or set(cells)
        return any(cells.get(key, "").strip() for key in anchor_ids)


class DynamicHeaderStrategy(BaseTableStrategy):
    """Discovers the header row from keyword hits and uses its fragments as columns.

    Fragments outside every interval fall back to the nearest column, so no
    fragment of the table body is dropped. Any non-empty row is kept.
    """

    name = "dynamic"

    def resolve_columns(
        self,
        first_page: Sequence[TextFragment],
    ) -> Tuple[List[ResolvedColumn], Optional[float]]:
        """Use the first bucketed row with enough keyword hits as the header."""
        cfg = self.config
        keywords = tuple(k.lower() for k in cfg.header_keywords)

        for y_key, group in bucket_rows(first_page, cfg.header_bucket).items():
            if len(group) < cfg.min_header_fragments:
                continue

            ordered = sorted(group, key=lambda f: f.x)
            row_text = " ".join(f.text for f in ordered).lower()
            hits = sum(1 for keyword in keywords if keyword in row_text)

            if hits >= cfg.min_keyword_matches:
                names = _unique_names(f.text for f in ordered)
                columns = [
                    ResolvedColumn(id=name, name=name, x=f.x)
                    for name, f in zip(names, ordered)
                ]
                logger.info(f"[{self.name}] header row at y={y_key:g} ({hits} keyword hits)")
                return columns, y_key

        logger.warning(f"[{self.name}] no header row found on first page")
        return [], None

    def place(self, x: float, columns: Sequence[ResolvedColumn]) -> Optional[int]:
        """Interval lookup, falling back to the nearest anchor."""
        idx = column_index(x, columns, self.config.column_margin, self.config.column_sentinel)
        if idx is None:
            idx = nearest_column(x, columns)
        return idx

    def keep_row(self, cells: Dict[str, str], columns: Sequence[ResolvedColumn]) -> bool:
        """Keep any row with a non-blank cell."""
        return any(value.strip() for value in cells.values())

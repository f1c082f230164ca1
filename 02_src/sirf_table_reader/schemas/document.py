"""Document-level schemas: label patterns, column definitions and extraction results."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


@dataclass(frozen=True)
class LabelPattern:
    """Case-insensitive pattern(s) identifying a semantic field label.

    Attributes:
        patterns: Compiled regular expressions, any of which may match
        right_only: Search for the value on the same line only
            (False = right-or-below)
    """
    patterns: Tuple[Pattern[str], ...]
    right_only: bool = True

    @classmethod
    def of(cls, *patterns: PatternLike, right_only: bool = True) -> "LabelPattern":
        """Build a LabelPattern from strings (compiled case-insensitively) or regexes."""
        return cls(tuple(_compile(p) for p in patterns), right_only=right_only)

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


@dataclass(frozen=True)
class MetadataField:
    """Named metadata field located by its label."""
    name: str
    label: LabelPattern


@dataclass(frozen=True)
class ColumnDefinition:
    """Named column of a fixed schema, anchored at its header's x-position.

    Definitions are templates: they never store a resolved x. Resolution
    produces fresh ResolvedColumn values per extraction call.

    Attributes:
        id: Column identifier
        label: Header label pattern
        optional: Column may be absent from a form without a warning
        table_start: Header y of this column marks the table start
        row_anchor: A data row is kept only if one of the anchor cells is filled
        title: Display name used as output header (defaults to id)
    """
    id: str
    label: LabelPattern
    optional: bool = False
    table_start: bool = False
    row_anchor: bool = False
    title: Optional[str] = None

    @property
    def header(self) -> str:
        return self.title or self.id


@dataclass(frozen=True)
class ResolvedColumn:
    """Column with its discovered anchor x (immutable once built)."""
    id: str
    name: str
    x: float


@dataclass(frozen=True)
class ColumnInterval:
    """Column boundaries derived from the projection profile, in page units."""
    start: float
    end: float


@dataclass
class ProjectionGrid:
    """Label-free grid of one page.

    Attributes:
        page: Page number (1-based)
        columns: Column intervals found by whitespace-gap projection
        rows: Cell texts, one list per row, len == max(1, len(columns))
    """
    page: int
    columns: List[ColumnInterval]
    rows: List[List[str]]


@dataclass
class TableExtraction:
    """Output of one table-structure strategy."""
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)
    columns: List[ResolvedColumn] = field(default_factory=list)
    header_y: Optional[float] = None

    @property
    def found(self) -> bool:
        return bool(self.columns)


@dataclass
class ExtractionResult:
    """Final result consumed by spreadsheet/document writers.

    Attributes:
        metadata: Field name -> value ("" when not found)
        rows: Table rows, header name -> cell text
        headers: Ordered table header names
        grids: Projection-profile grid per non-empty page
        strategy: Name of the strategy that produced rows/headers
    """
    metadata: Dict[str, str] = field(default_factory=dict)
    rows: List[Dict[str, str]] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    grids: List[ProjectionGrid] = field(default_factory=list)
    strategy: Optional[str] = None

    def table(self) -> List[List[str]]:
        """Rows as lists ordered by headers."""
        return [[row.get(h, "") for h in self.headers] for row in self.rows]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view for YAML/JSON persistence."""
        return {
            "strategy": self.strategy,
            "metadata": dict(self.metadata),
            "headers": list(self.headers),
            "rows": [dict(r) for r in self.rows],
            "grids": [
                {
                    "page": g.page,
                    "columns": [{"start": c.start, "end": c.end} for c in g.columns],
                    "rows": [list(r) for r in g.rows],
                }
                for g in self.grids
            ],
        }

"""Projection-profile column segmentation.

Columns are derived purely from whitespace: every fragment's horizontal
span is projected onto a 1-D occupancy array, and runs of empty samples
wider than the gap threshold separate columns. No label knowledge is used,
which makes this a label-free backup view of every page.
"""

import logging
import math
from typing import List, Optional, Sequence

from ..schemas.config import ExtractionConfig
from ..schemas.document import ColumnInterval, ProjectionGrid
from ..schemas.fragment import TextFragment
from .rows import cluster_rows, sort_by_y

logger = logging.getLogger(__name__)


def occupancy_profile(
    fragments: Sequence[TextFragment],
    resolution: int = 10,
    padding: float = 2.0,
    char_width: float = 0.4,
) -> List[bool]:
    """Binary occupancy of the x-axis over [0, max(x + width) + padding).

    Each sample covers 1/resolution units; a sample is occupied when any
    fragment's [x, x + width) span covers it.
    """
    if not fragments:
        return []

    right_edge = max(f.x + f.span_width(char_width) for f in fragments)
    size = max(0, math.ceil(right_edge + padding) * resolution)
    occupied = [False] * size

    for fragment in fragments:
        start = max(0, math.floor(fragment.x * resolution))
        end = min(size, math.floor((fragment.x + fragment.span_width(char_width)) * resolution))
        for i in range(start, end):
            occupied[i] = True

    return occupied


def segment_columns(
    fragments: Sequence[TextFragment],
    config: Optional[ExtractionConfig] = None,
) -> List[ColumnInterval]:
    """Split the occupancy profile into column intervals.

    A column runs from its first occupied sample to just after its last
    one; empty runs no wider than the gap threshold stay inside the column.

    Returns:
        Intervals in page units, ordered left to right. Empty when nothing
        is occupied.
    """
    cfg = config or ExtractionConfig()
    resolution = cfg.projection_resolution
    gap_threshold = cfg.projection_gap * resolution
    occupied = occupancy_profile(
        fragments, resolution, cfg.projection_padding, cfg.char_width_estimate
    )

    columns: List[ColumnInterval] = []
    col_start: Optional[int] = None
    last_occupied = -1
    gap = 0

    for i, filled in enumerate(occupied):
        if filled:
            if col_start is None:
                col_start = i
            last_occupied = i
            gap = 0
        else:
            gap += 1
            if col_start is not None and gap > gap_threshold:
                columns.append(ColumnInterval(col_start / resolution, (last_occupied + 1) / resolution))
                col_start = None

    if col_start is not None:
        columns.append(ColumnInterval(col_start / resolution, (last_occupied + 1) / resolution))

    return columns


def assign_column(fragment: TextFragment, columns: Sequence[ColumnInterval], char_width: float = 0.4) -> Optional[int]:
    """Column with the largest overlap with the fragment span.

    Falls back to the column whose start is closest to the fragment's x
    when nothing overlaps.
    """
    if not columns:
        return None

    start = fragment.x
    end = fragment.x + fragment.span_width(char_width)
    best: Optional[int] = None
    best_overlap = 0.0

    for idx, column in enumerate(columns):
        overlap = min(end, column.end) - max(start, column.start)
        if overlap > best_overlap:
            best_overlap = overlap
            best = idx

    if best is None:
        best = min(range(len(columns)), key=lambda i: abs(columns[i].start - start))
    return best


def build_grid(
    fragments: Sequence[TextFragment],
    page: int = 1,
    config: Optional[ExtractionConfig] = None,
) -> Optional[ProjectionGrid]:
    """Build the projection-profile grid of one page.

    Args:
        fragments: Page fragments in any order
        page: 1-based page number
        config: Extraction thresholds

    Returns:
        ProjectionGrid, or None for a page without fragments
    """
    if not fragments:
        return None

    cfg = config or ExtractionConfig()
    columns = segment_columns(fragments, cfg)
    rows = cluster_rows(sort_by_y(fragments), cfg.row_tolerance)

    grid_rows: List[List[str]] = []
    for row in rows:
        if not columns:
            grid_rows.append([" ".join(f.text for f in row)])
            continue

        cells = [""] * len(columns)
        for fragment in row:
            idx = assign_column(fragment, columns, cfg.char_width_estimate)
            cells[idx] = f"{cells[idx]} {fragment.text}" if cells[idx] else fragment.text
        grid_rows.append(cells)

    logger.debug(f"Projection page {page}: {len(columns)} columns, {len(grid_rows)} rows")
    return ProjectionGrid(page=page, columns=columns, rows=grid_rows)


def build_grids(
    pages: Sequence[Sequence[TextFragment]],
    config: Optional[ExtractionConfig] = None,
    page_numbers: Optional[Sequence[int]] = None,
) -> List[ProjectionGrid]:
    """Projection grid for every page that has at least one fragment.

    Grids are numbered from page_numbers when given (one per page, in order),
    otherwise 1..len(pages).
    """
    if page_numbers is None:
        page_numbers = range(1, len(pages) + 1)
    elif len(page_numbers) != len(pages):
        raise ValueError(f"Got {len(page_numbers)} page numbers for {len(pages)} pages")

    grids: List[ProjectionGrid] = []
    for page_num, page in zip(page_numbers, pages):
        grid = build_grid(page, page_num, config)
        if grid is not None:
            grids.append(grid)
    return grids

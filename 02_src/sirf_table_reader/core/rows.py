"""Row grouping of text fragments by vertical position."""

import math
from typing import Dict, Iterable, List

from ..schemas.fragment import TextFragment


def cluster_rows(fragments: Iterable[TextFragment], tolerance: float = 0.6) -> List[List[TextFragment]]:
    """Group y-sorted fragments into rows with a single sweep.

    A fragment joins the current row while |y - anchor y| <= tolerance,
    where the anchor is the y of the fragment that opened the row.
    Otherwise it opens a new row. The sweep is order dependent: callers
    sort by y beforehand.

    Args:
        fragments: Fragments sorted by y ascending
        tolerance: Max distance to the row anchor

    Returns:
        Rows in sweep order, fragments in encounter order within each row
    """
    rows: List[List[TextFragment]] = []
    anchor_y = None

    for fragment in fragments:
        if anchor_y is None or abs(fragment.y - anchor_y) > tolerance:
            rows.append([fragment])
            anchor_y = fragment.y
        else:
            rows[-1].append(fragment)

    return rows


def sort_by_y(fragments: Iterable[TextFragment]) -> List[TextFragment]:
    """Stable sort by y, preserving enumeration order for equal y."""
    return sorted(fragments, key=lambda f: f.y)


def bucket_key(y: float, bucket: float = 0.5) -> float:
    """Quantize y to the nearest bucket, rounding halves up."""
    return math.floor(y / bucket + 0.5) * bucket


def bucket_rows(fragments: Iterable[TextFragment], bucket: float = 0.5) -> Dict[float, List[TextFragment]]:
    """Group fragments into rows keyed by quantized y.

    Coarser than cluster_rows and independent of input order for
    membership; dict order follows first appearance of each key.
    """
    buckets: Dict[float, List[TextFragment]] = {}
    for fragment in fragments:
        buckets.setdefault(bucket_key(fragment.y, bucket), []).append(fragment)
    return buckets

"""Label-anchored lookup of form metadata values."""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from ..schemas.config import ExtractionConfig
from ..schemas.document import LabelPattern, MetadataField
from ..schemas.fragment import TextFragment

logger = logging.getLogger(__name__)


def _distance(a: TextFragment, b: TextFragment) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def _pick(candidates: List[TextFragment], label: TextFragment, nearest: bool) -> Optional[TextFragment]:
    if not candidates:
        return None
    if nearest:
        return min(candidates, key=lambda c: _distance(c, label))
    return candidates[0]


def find_value(
    fragments: Sequence[TextFragment],
    label: LabelPattern,
    right_only: Optional[bool] = None,
    config: Optional[ExtractionConfig] = None,
) -> str:
    """Find the value written next to a label.

    The label is the first fragment (in enumeration order) matching the
    pattern. The value is the first fragment on the same line strictly to
    the right of it; failing that, and unless right_only, the first
    fragment shortly below it.

    Args:
        fragments: Fragments in extractor enumeration order
        label: Label pattern
        right_only: Override label.right_only
        config: Extraction thresholds

    Returns:
        Value text, or "" if the label or its value is not found
    """
    cfg = config or ExtractionConfig()
    right_only = label.right_only if right_only is None else right_only

    anchor = next((f for f in fragments if label.matches(f.text)), None)
    if anchor is None:
        return ""

    same_line = [
        f for f in fragments
        if abs(f.y - anchor.y) < cfg.label_line_tolerance
        and f.x > anchor.x + cfg.label_right_offset
    ]
    candidate = _pick(same_line, anchor, cfg.nearest_label_candidate)

    if candidate is None and not right_only:
        below = [
            f for f in fragments
            if anchor.y < f.y < anchor.y + cfg.label_below_max
            and abs(f.x - anchor.x) < cfg.label_below_x_tolerance
        ]
        candidate = _pick(below, anchor, cfg.nearest_label_candidate)

    return candidate.text if candidate is not None else ""


def extract_metadata(
    pages: Iterable[Sequence[TextFragment]],
    fields: Iterable[MetadataField],
    config: Optional[ExtractionConfig] = None,
) -> Dict[str, str]:
    """Look up every field against the fragments of all pages pooled together."""
    pooled: List[TextFragment] = [f for page in pages for f in page]
    metadata = {field.name: find_value(pooled, field.label, config=config) for field in fields}

    found = sum(1 for v in metadata.values() if v)
    logger.info(f"Metadata: {found}/{len(metadata)} fields found in {len(pooled)} fragments")
    return metadata

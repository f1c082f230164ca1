"""Configuration schemas for table extraction and document processing."""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

ENV_PREFIX = "SIRF_"

DEFAULT_HEADER_KEYWORDS: Tuple[str, ...] = (
    "code",
    "description",
    "qty",
    "quantity",
    "item",
    "number",
    "uom",
    "type",
    "requested",
    "name",
    "s.no",
    "sno",
)

STRATEGIES = ("auto", "fixed", "dynamic")


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


@dataclass(frozen=True)
class ExtractionConfig:
    """Tunable thresholds for geometric table reconstruction.

    Distances are in page-coordinate units of the fragment source
    (pdf2json form units for SIRF documents).

    Attributes:
        row_tolerance: Max |y - row anchor y| for fragments sharing a row
        label_line_tolerance: Max |dy| for a value on the label's line
        label_right_offset: Value must start this far right of the label
        label_below_max: Max dy for a value below its label
        label_below_x_tolerance: Max |dx| for a value below its label
        nearest_label_candidate: Pick the nearest value candidate instead of
            the first one in enumeration order
        column_margin: Column interval starts this far left of its anchor
        column_sentinel: Right edge of the last column interval
        header_proximity: Max |dy| to detect the header line on a page
        header_skip: Data rows start this far below the header line
        min_active_columns: Fixed schema needs this many resolved columns
        header_bucket: Row bucket size for header detection
        min_header_fragments: Fragments a row needs to be a header candidate
        min_keyword_matches: Keyword hits a row needs to be the header
        header_keywords: Keywords counted in header candidate rows
        projection_resolution: Occupancy samples per coordinate unit
        projection_gap: Gap width that separates two projection columns
        projection_padding: Extra units appended to the occupancy span
        char_width_estimate: Width per character when width is missing
        strategy: "auto", "fixed" or "dynamic"
        dynamic_fallback: Retry with header detection when the fixed
            schema resolves too few columns
    """
    row_tolerance: float = 0.6
    label_line_tolerance: float = 1.0
    label_right_offset: float = 1.0
    label_below_max: float = 4.0
    label_below_x_tolerance: float = 10.0
    nearest_label_candidate: bool = False
    column_margin: float = 2.0
    column_sentinel: float = 1000.0
    header_proximity: float = 2.0
    header_skip: float = 2.0
    min_active_columns: int = 3
    header_bucket: float = 0.5
    min_header_fragments: int = 3
    min_keyword_matches: int = 2
    header_keywords: Tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    projection_resolution: int = 10
    projection_gap: float = 2.0
    projection_padding: float = 2.0
    char_width_estimate: float = 0.4
    strategy: str = "auto"
    dynamic_fallback: bool = True

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy '{self.strategy}' (expected one of {', '.join(STRATEGIES)})"
            )
        if self.projection_resolution <= 0:
            raise ValueError("projection_resolution must be positive")
        if self.header_bucket <= 0:
            raise ValueError("header_bucket must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> "ExtractionConfig":
        """Build config from SIRF_<FIELD> environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            **overrides: Explicit values, applied after the environment

        Raises:
            ValueError: If a variable cannot be converted to the field type
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            default = f.default

            if isinstance(default, bool):
                values[f.name] = _parse_bool(key, raw)
            elif isinstance(default, int):
                try:
                    values[f.name] = int(raw)
                except ValueError as exc:
                    raise ValueError(f"Environment variable {key} must be an integer") from exc
            elif isinstance(default, float):
                try:
                    values[f.name] = float(raw)
                except ValueError as exc:
                    raise ValueError(f"Environment variable {key} must be a number") from exc
            elif isinstance(default, tuple):
                values[f.name] = tuple(
                    item.strip().lower() for item in raw.split(",") if item.strip()
                )
            else:
                values[f.name] = raw

        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "ExtractionConfig":
        """Copy of this config with the given fields replaced (self is untouched)."""
        return replace(self, **overrides)


@dataclass
class ProcessorConfig:
    """Configuration for DocumentProcessor.

    Attributes:
        state_dir: Directory for state persistence (optional)
        auto_save: Automatically save extracted fragments to state
        points_per_unit: PDF points per form unit when reading PDFs directly
            (16.0 maps a 612pt Letter page to 38.25 units)
        log_level: Logging level (default: INFO)
    """
    state_dir: Optional[Path] = None
    auto_save: bool = True
    points_per_unit: float = 16.0
    log_level: str = "INFO"

"""Text fragment model - one positioned piece of extracted text."""

import math
from dataclasses import dataclass
from typing import List, Optional


class InvalidInput(ValueError):
    """Raised when a caller hands over fragment geometry that breaks the contract."""


@dataclass(frozen=True)
class TextFragment:
    """Positioned text fragment in page-coordinate units.

    Attributes:
        x: Left edge of the fragment
        y: Vertical position (grows downwards)
        text: Decoded text
        width: Rendered width, None when the extractor did not report one
    """
    x: float
    y: float
    text: str
    width: Optional[float] = None

    def __post_init__(self):
        """Reject coordinates that would silently corrupt downstream geometry."""
        for name in ("x", "y"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInput(f"Fragment {name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidInput(f"Fragment {name} must be finite, got {value!r}")
        if not isinstance(self.text, str):
            raise InvalidInput(f"Fragment text must be a string, got {type(self.text).__name__}")
        if self.width is not None:
            if isinstance(self.width, bool) or not isinstance(self.width, (int, float)):
                raise InvalidInput(f"Fragment width must be a number, got {self.width!r}")
            if not math.isfinite(self.width) or self.width < 0:
                raise InvalidInput(f"Fragment width must be finite and >= 0, got {self.width!r}")

    def span_width(self, char_width: float = 0.4) -> float:
        """Return reported width, or estimate it from the character count."""
        if self.width is not None:
            return float(self.width)
        return len(self.text) * char_width


# A page is an ordered sequence of fragments in extractor enumeration order.
Page = List[TextFragment]

"""Normalization of extractor-native text fragments into TextFragment."""

from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import unquote

from ..schemas.fragment import InvalidInput, Page, TextFragment


def decode_text(raw: Optional[str]) -> str:
    """Decode percent-encoded text as emitted by pdf2json.

    Examples:
        >>> decode_text("Request%20Date")
        'Request Date'
        >>> decode_text("Qty")
        'Qty'
        >>> decode_text(None)
        ''
    """
    if raw is None:
        return ""
    return unquote(str(raw))


def _number(raw: Mapping[str, Any], key: str) -> float:
    if key not in raw or raw[key] is None:
        raise InvalidInput(f"Fragment is missing required coordinate '{key}': {dict(raw)!r}")
    value = raw[key]
    if isinstance(value, bool):
        raise InvalidInput(f"Fragment coordinate '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Fragment coordinate '{key}' must be a number, got {value!r}") from exc


def _runs_text(runs: Any) -> str:
    if not isinstance(runs, list) or not runs:
        raise InvalidInput("Fragment text runs 'R' must be a non-empty list")
    first = runs[0]
    if not isinstance(first, Mapping) or "T" not in first:
        raise InvalidInput("Fragment text run is missing 'T'")
    return decode_text(first["T"])


def normalize_fragment(raw: Any) -> TextFragment:
    """Convert one native fragment into a TextFragment.

    Accepted shapes:
    - TextFragment (returned as is)
    - pdf2json text: {"x", "y", "w"?, "R": [{"T": "<percent-encoded>"}]}
    - plain mapping: {"x", "y", "text", "width"? | "w"?}

    Raises:
        InvalidInput: If x, y or text is missing or not usable
    """
    if isinstance(raw, TextFragment):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidInput(f"Unsupported fragment type: {type(raw).__name__}")

    x = _number(raw, "x")
    y = _number(raw, "y")

    if "text" in raw and raw["text"] is not None:
        text = str(raw["text"])
    elif "R" in raw:
        text = _runs_text(raw["R"])
    else:
        raise InvalidInput(f"Fragment has no text: {dict(raw)!r}")

    width: Optional[float] = None
    for key in ("width", "w"):
        if raw.get(key) is not None:
            width = _number(raw, key)
            break

    return TextFragment(x=x, y=y, text=text, width=width)


def normalize_page(raw_fragments: Optional[Iterable[Any]]) -> Page:
    """Normalize a page worth of fragments, keeping enumeration order."""
    if raw_fragments is None:
        return []
    return [normalize_fragment(f) for f in raw_fragments]


def pages_from_pdf2json(pdf_data: Optional[Mapping[str, Any]]) -> List[Page]:
    """Normalize a pdf2json document payload ({"Pages": [{"Texts": [...]}]}).

    Older pdf2json releases nest pages under "formImage"; both are accepted.
    A missing or empty payload yields no pages.
    """
    if not pdf_data:
        return []
    pages = pdf_data.get("Pages")
    if pages is None and isinstance(pdf_data.get("formImage"), Mapping):
        pages = pdf_data["formImage"].get("Pages")
    if not pages:
        return []
    return [normalize_page(page.get("Texts") if isinstance(page, Mapping) else page) for page in pages]

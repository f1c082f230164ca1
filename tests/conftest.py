"""Shared fixtures: a synthetic two-page SIRF document in form units."""

import logging
from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import quote

import pytest
from dotenv import load_dotenv

from sirf_table_reader.schemas.fragment import Page, TextFragment

load_dotenv()

logging.getLogger("sirf_table_reader").setLevel(logging.DEBUG)


def _page_one() -> Page:
    return [
        # Metadata block
        TextFragment(2, 4, "Request Date"),
        TextFragment(8, 4, "2024-01-01"),
        TextFragment(16, 4, "Need by Date"),
        TextFragment(22, 4, "2024-01-15"),
        TextFragment(30, 4, "Req. No."),
        TextFragment(34, 4, "SIRF-001"),
        TextFragment(2, 5.5, "Project Code"),
        TextFragment(8, 5.5, "PRJ-42"),
        TextFragment(16, 5.5, "Project Name:"),
        TextFragment(22, 5.5, "Tower Upgrade"),
        TextFragment(2, 7, "Site ID"),
        TextFragment(8, 7, "S-100"),
        TextFragment(16, 7, "Site Name:"),
        TextFragment(22, 7, "North Hill"),
        TextFragment(2, 8.5, "Requesting Dept."),
        TextFragment(8, 8.5, "Operations"),
        TextFragment(16, 8.5, "REG:"),
        TextFragment(19, 8.5, "Central"),
        TextFragment(26, 8.5, "Project Mgr."),
        TextFragment(32, 8.5, "J. Doe"),
        # Item table header
        TextFragment(2, 11, "S.No"),
        TextFragment(5, 11, "Item Code"),
        TextFragment(11, 11, "Description"),
        TextFragment(24, 11, "UOM"),
        TextFragment(28, 11, "Qty Requested"),
        TextFragment(34, 11, "Remarks"),
        # Data rows
        TextFragment(2.2, 13.5, "1"),
        TextFragment(5.1, 13.5, "IC-001"),
        TextFragment(11, 13.5, "Steel bolt M10"),
        TextFragment(24, 13.5, "PCS"),
        TextFragment(28.5, 13.5, "20"),
        TextFragment(15, 13.8, "(galvanised)"),
        TextFragment(2.2, 14.5, "2"),
        TextFragment(5.1, 14.5, "IC-002"),
        TextFragment(11, 14.5, "Copper cable"),
        TextFragment(24, 14.5, "M"),
        TextFragment(28.5, 14.5, "150"),
        TextFragment(34, 14.5, "urgent"),
        TextFragment(1200, 14.5, "X"),
        # Footer, only in the S.No column
        TextFragment(2, 30, "Approved by"),
    ]


def _page_two() -> Page:
    return [
        TextFragment(2.2, 3, "3"),
        TextFragment(5.1, 3, "IC-003"),
        TextFragment(11, 3, "Safety gloves"),
        TextFragment(24, 3, "PAIR"),
        TextFragment(28.5, 3, "10"),
        TextFragment(2.2, 4, "4"),
        TextFragment(5.1, 4, "IC-004"),
        TextFragment(11, 4, "Hard hat"),
        TextFragment(24, 4, "PCS"),
        TextFragment(28.5, 4, "5"),
    ]


@pytest.fixture
def sirf_pages() -> List[Page]:
    """Two-page SIRF document: metadata, header and two item rows per page."""
    return [_page_one(), _page_two()]


@pytest.fixture
def sirf_pdf2json(sirf_pages: List[Page]) -> Dict[str, Any]:
    """The SIRF document in pdf2json shape (percent-encoded text runs)."""
    return {
        "Pages": [
            {
                "Texts": [
                    {"x": f.x, "y": f.y, "w": f.width, "R": [{"T": quote(f.text)}]}
                    for f in page
                ]
            }
            for page in sirf_pages
        ]
    }


@pytest.fixture
def sirf_pdf(tmp_path: Path) -> Path:
    """Create a small SIRF PDF (one form page plus a blank page).

    Text is placed in points at 16 points per form unit, so "Request Date"
    starts at x=2 units and the item table header sits on y=11 units.
    """
    import fitz

    pdf_path = tmp_path / "sirf_form.pdf"

    doc = fitz.open()
    page = doc.new_page(width=612, height=792)  # Letter size

    cells = [
        (32, 64, "Request Date"),
        (160, 64, "2024-01-01"),
        (32, 176, "S.No"),
        (80, 176, "Item Code"),
        (176, 176, "Description"),
        (384, 176, "UOM"),
        (448, 176, "Qty Requested"),
        (35, 224, "1"),
        (82, 224, "IC-001"),
        (176, 224, "Steel bolt"),
        (384, 224, "PCS"),
        (456, 224, "20"),
        (35, 248, "2"),
        (82, 248, "IC-002"),
        (176, 248, "Copper cable"),
        (384, 248, "M"),
        (456, 248, "150"),
    ]
    for x, y, text in cells:
        page.insert_text((x, y), text, fontsize=9)

    doc.new_page(width=612, height=792)

    doc.save(pdf_path)
    doc.close()

    return pdf_path


@pytest.fixture
def expected_sirf_metadata() -> Dict[str, str]:
    return {
        "Request Date": "2024-01-01",
        "Need by Date": "2024-01-15",
        "Req. No": "SIRF-001",
        "Project Code": "PRJ-42",
        "Project Name": "Tower Upgrade",
        "Site ID": "S-100",
        "Site Name": "North Hill",
        "Requesting Dept": "Operations",
        "REG": "Central",
        "Project Mgr": "J. Doe",
    }

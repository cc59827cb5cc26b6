"""
Readers for the files the core consumes.

These are the I/O collaborators: they decode a schedule file into rows of
cells and the building dataset into rows of text fields. The parsing modules
never import them, they only see the rows.

Supported schedule files:
- .csv            (csv module)
- .xlsx / .xlsm   (pandas + openpyxl, first sheet)
- .html / .htm    (BeautifulSoup, every <tr> is a row)
- .xls            (registrar "Excel" downloads are often HTML in disguise,
                   so the file is sniffed before choosing a decoder)
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd
import requests
from bs4 import BeautifulSoup

from campusroute import config
from campusroute.errors import StructuralParseError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schedule files
# ---------------------------------------------------------------------------


def _read_csv_rows(path: Path) -> list[list[Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        return [row for row in csv.reader(f)]


def _read_excel_rows(path: Path) -> list[list[Any]]:
    df = pd.read_excel(path, sheet_name=0, header=None)
    return [
        [None if pd.isna(value) else value for value in row]
        for row in df.itertuples(index=False, name=None)
    ]


def _extract_table_rows(soup: BeautifulSoup) -> list[list[str]]:
    rows: list[list[str]] = []
    for tr in soup.select("tr"):
        cells = tr.find_all(["td", "th"])
        if not cells:
            continue
        rows.append([cell.get_text(" ", strip=True) for cell in cells])
    return rows


def _read_html_rows(path: Path) -> list[list[str]]:
    html = path.read_text(encoding="utf-8", errors="replace")
    return _extract_table_rows(BeautifulSoup(html, "html.parser"))


def _looks_like_html(path: Path) -> bool:
    with path.open("rb") as f:
        head = f.read(512).lstrip().lower()
    return head.startswith(b"<")


def read_schedule_rows(path: str | Path) -> list[list[Any]]:
    """Decode a schedule file into rows of cells, choosing the decoder by suffix."""
    p = Path(path)
    suffix = p.suffix.lower()

    if suffix == ".csv":
        rows = _read_csv_rows(p)
    elif suffix in (".xlsx", ".xlsm"):
        rows = _read_excel_rows(p)
    elif suffix in (".html", ".htm"):
        rows = _read_html_rows(p)
    elif suffix == ".xls":
        rows = _read_html_rows(p) if _looks_like_html(p) else _read_excel_rows(p)
    else:
        raise StructuralParseError(f"Unsupported schedule file type: {p.name}")

    logger.debug("Read %d rows from %s", len(rows), p)
    return rows


# ---------------------------------------------------------------------------
# Building dataset
# ---------------------------------------------------------------------------


def _split_building_csv(text: str) -> list[list[str]]:
    rows: list[list[str]] = []
    for row in csv.reader(io.StringIO(text)):
        fields = [field.strip().replace('"', "") for field in row]
        if any(fields):
            rows.append(fields)
    return rows


def read_building_rows(source: str | Path) -> list[list[str]]:
    """
    Read the building CSV (code,name,pixel_x,pixel_y[,entrance_x,entrance_y...])
    from a local file or an http(s) URL.
    """
    src = str(source)
    if src.startswith(("http://", "https://")):
        resp = requests.get(src, timeout=config.HTTP_TIMEOUT_SECONDS)
        resp.raise_for_status()
        text = resp.text
    else:
        text = Path(src).read_text(encoding="utf-8-sig")

    return _split_building_csv(text)


# ---------------------------------------------------------------------------
# Reference image
# ---------------------------------------------------------------------------


def read_image_size(path: str | Path) -> tuple[int, int]:
    """(width, height) in pixels of the reference campus image."""
    from PIL import Image

    with Image.open(path) as img:
        return img.size

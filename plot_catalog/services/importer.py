"""
Spreadsheet import normalization.

Turns rows with arbitrary column headers and free-text numeric cells into
sanitized plot records. Rows that do not yield a title, a location and finite
price and area are dropped without a per-row report.
"""

from typing import Any, Dict, Iterable, List, Optional
from pathlib import Path
import io
import logging
import math
import re
import unicodedata

import pandas as pd

from plot_catalog.models.plot import PlotStatus, PlotType
from plot_catalog.utils.exceptions import BadRequestError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)


# Accepted header aliases per plot field, in priority order
HEADER_ALIASES: Dict[str, List[str]] = {
    "title": ["title", "titulo", "nombre", "terreno"],
    "location": ["location", "ubicacion", "ciudad", "lugar"],
    "price_usd": ["price_usd", "precio", "precio_usd", "price", "valor"],
    "area_m2": ["area_m2", "area", "m2", "metros2", "metros_cuadrados"],
    "status": ["status", "estado"],
    "type": ["type", "tipo"],
    "description": ["description", "descripcion", "detalle"],
    "image_url": ["image_url", "imagen", "image", "url", "foto"],
    "lat": ["lat", "latitude", "latitud"],
    "lng": ["lng", "lon", "long", "longitude", "longitud"],
}

# Labels shown in the admin form, keyed by normalized label
STATUS_LABELS = {
    "disponible": PlotStatus.AVAILABLE.value,
    "reservado": PlotStatus.RESERVED.value,
    "vendido": PlotStatus.SOLD.value,
}

TYPE_LABELS = {
    "residencial": PlotType.RESIDENTIAL.value,
    "agricola": PlotType.AGRARIAN.value,
    "comercial": PlotType.COMMERCIAL.value,
}

SUPPORTED_EXTENSIONS = [".csv", ".xlsx", ".xlsm"]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_AMOUNT = re.compile(r"[^0-9.]")
_NON_COORDINATE = re.compile(r"[^0-9.\-]")


def normalize_header(value: Any) -> str:
    """
    Canonical form of a column label.

    Lower-cases, strips accents, collapses every run of characters outside
    ``[a-z0-9]`` into one underscore and trims underscores at both ends.
    """
    text = unicodedata.normalize("NFD", str(value).lower().strip())
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return _NON_ALNUM.sub("_", text).strip("_")


def cell_text(value: Any) -> str:
    """Raw cell value as trimmed text; missing cells become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def normalize_row(row: Dict[Any, Any]) -> Dict[str, str]:
    """Re-key a row by normalized header. Later columns win on collisions."""
    normalized = {}
    for key, value in row.items():
        normalized[normalize_header(key)] = cell_text(value)
    return normalized


def pick_value(normalized_row: Dict[str, str], field: str) -> str:
    """First non-empty value among the field's aliases, or ''."""
    for alias in HEADER_ALIASES[field]:
        value = normalized_row.get(alias)
        if value:
            return value
    return ""


def _finite_or_none(text: str) -> Optional[float]:
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_amount(value: str) -> Optional[float]:
    """
    Parse a free-text price or area.

    Every character other than digits and '.' is dropped, so
    ``"US$ 1,200.50"`` becomes ``1200.5``.
    """
    return _finite_or_none(_NON_AMOUNT.sub("", value))


def parse_coordinate(value: str) -> Optional[float]:
    """Like parse_amount, but a leading minus sign is kept."""
    cleaned = _NON_COORDINATE.sub("", value)
    sign = "-" if cleaned.startswith("-") else ""
    return _finite_or_none(sign + cleaned.replace("-", ""))


def _canonical(value: str, labels: Dict[str, str], default: str) -> str:
    if not value:
        return default
    return labels.get(normalize_header(value), value.lower())


def map_row_to_plot(row: Dict[Any, Any]) -> Optional[Dict[str, Any]]:
    """
    Map one spreadsheet row onto plot fields.

    Returns:
        Sanitized plot dict, or None when the row is not importable
    """
    normalized = normalize_row(row)

    title = pick_value(normalized, "title")
    location = pick_value(normalized, "location")
    price = parse_amount(pick_value(normalized, "price_usd"))
    area = parse_amount(pick_value(normalized, "area_m2"))

    if not title or not location or price is None or area is None:
        return None

    image_url = pick_value(normalized, "image_url") or None

    return {
        "title": title,
        "location": location,
        "price_usd": price,
        "area_m2": area,
        "status": _canonical(pick_value(normalized, "status"), STATUS_LABELS, PlotStatus.AVAILABLE.value),
        "type": _canonical(pick_value(normalized, "type"), TYPE_LABELS, PlotType.RESIDENTIAL.value),
        "description": pick_value(normalized, "description") or None,
        "image_url": image_url,
        "image_urls": [image_url] if image_url else [],
        "lat": parse_coordinate(pick_value(normalized, "lat")),
        "lng": parse_coordinate(pick_value(normalized, "lng")),
    }


def normalize_rows(rows: Iterable[Dict[Any, Any]]) -> List[Dict[str, Any]]:
    """Map every row and keep only the importable ones."""
    candidates = []
    for row in rows:
        plot = map_row_to_plot(row)
        if plot is not None:
            candidates.append(plot)
    return candidates


def _read_csv(content: bytes) -> pd.DataFrame:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")

    first_line = text.split("\n", 1)[0]
    sep = ";" if first_line.count(";") > first_line.count(",") else ","

    # Rows with more cells than the header are dropped like any other bad row
    return pd.read_csv(
        io.StringIO(text),
        sep=sep,
        dtype=str,
        keep_default_na=False,
        on_bad_lines="skip"
    )


def read_spreadsheet(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """
    Parse an uploaded CSV or Excel workbook into row dicts.

    Only the first worksheet of a workbook is read. An empty file yields no
    rows.

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
        BadRequestError: If the file cannot be parsed
    """
    extension = Path(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(extension or "unknown", SUPPORTED_EXTENSIONS)

    if not content.strip():
        return []

    try:
        if extension == ".csv":
            frame = _read_csv(content)
        else:
            frame = pd.read_excel(
                io.BytesIO(content),
                engine="openpyxl",
                dtype=str,
                keep_default_na=False
            )
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        logger.warning(f"Could not parse spreadsheet {filename}: {e}")
        raise BadRequestError(f"Could not read spreadsheet: {str(e)}")

    rows = frame.to_dict(orient="records")
    logger.debug(f"Read {len(rows)} rows from {filename}")
    return rows

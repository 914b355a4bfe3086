"""
CSV ingestion for batch pricing analysis.

Turns uploaded product files into a `RawCsvTable`: the header list plus one
header -> cell mapping per data row. Quoted fields may contain commas;
escaped quotes inside a quoted field are not supported.

Usage:
    from predictgenie.utils.csv_parser import read_csv_file
    table = read_csv_file("products.csv")
    table.headers  # ("productName", "currentPrice", ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Union

from predictgenie.utils.logger import get_logger

logger = get_logger("csv_parser")

SAMPLE_CSV_FILENAME = "sample_products.csv"
SAMPLE_CSV_HEADER = "productName,currentPrice,userProductUrl,competitorUrl_1,competitorUrl_2"
SAMPLE_CSV_ROWS = (
    '"Pro Camera X1, with stand",499.99,https://yourstore.com/pro-camera,'
    "https://competitorA.com/camera-x1,https://competitorB.com/pro-cam-x1",
    "Wireless Headphones Z,$149.00,https://yourstore.com/headphones-z,"
    "https://competitorA.com/headphones-z-pro,https://competitorC.com/audio/wireless-z",
    "Smart Fitness Watch V2,229.50,https://yourstore.com/smart-watch,,",
)


class FormatError(ValueError):
    """The file is not a usable CSV (wrong type, unreadable, or no data rows)."""


@dataclass(frozen=True)
class RawCsvTable:
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, str], ...]


def split_csv_line(line: str) -> List[str]:
    """Split one data line on commas that sit outside double quotes.

    Quote characters are kept in the returned fields; `_clean_value` strips
    the surrounding pair afterwards.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def _clean_value(raw: str) -> str:
    value = raw.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_csv(text: str) -> RawCsvTable:
    """Parse CSV text into headers and row mappings.

    Raises FormatError when fewer than two non-blank lines remain.
    """
    lines = [ln.strip() for ln in text.replace("\r\n", "\n").split("\n")]
    lines = [ln for ln in lines if ln]
    if len(lines) < 2:
        raise FormatError("CSV file must contain a header row and at least one data row.")

    headers = tuple(h.strip() for h in lines[0].split(","))

    rows = []
    for line in lines[1:]:
        values = [_clean_value(v) for v in split_csv_line(line)]
        row = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ""
        rows.append(row)

    logger.debug(
        "Parsed CSV text", extra={"columns": len(headers), "rows": len(rows)}
    )
    return RawCsvTable(headers=headers, rows=tuple(rows))


def decode_csv_bytes(data: bytes, encoding: str = "utf-8-sig") -> str:
    """Decode uploaded file bytes, dropping a UTF-8 byte order mark if present."""
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise FormatError(
            f"Could not decode the file as {encoding} text. Please save it as UTF-8 CSV."
        ) from exc


def read_csv_file(path: Union[str, Path], encoding: str = "utf-8-sig") -> RawCsvTable:
    """Read a .csv file from disk and parse it."""
    p = Path(path)
    if p.suffix.lower() != ".csv":
        raise FormatError("Invalid file type. Please upload a .csv file.")
    try:
        data = p.read_bytes()
    except OSError as exc:
        logger.error("Failed to read CSV file", extra={"path": str(p), "error": str(exc)})
        raise FormatError("Failed to read the file.") from exc

    table = parse_csv(decode_csv_bytes(data, encoding))
    logger.info(
        "Loaded CSV file",
        extra={"path": str(p), "columns": len(table.headers), "rows": len(table.rows)},
    )
    return table


def sample_csv_text() -> str:
    """Return the downloadable example file (header plus three products)."""
    return "\n".join((SAMPLE_CSV_HEADER,) + SAMPLE_CSV_ROWS) + "\n"


def write_sample_csv(path: Union[str, Path]) -> Path:
    p = Path(path)
    if p.is_dir():
        p = p / SAMPLE_CSV_FILENAME
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(sample_csv_text(), encoding="utf-8")
    logger.info("Wrote sample CSV", extra={"path": str(p)})
    return p

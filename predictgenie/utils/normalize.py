"""
normalize.py

Turns mapped CSV rows into validated product records for batch analysis.

Data-quality problems never abort the batch: rows with a blank product name
are skipped silently, rows with a missing or unusable price become
`RowError` values, and everything else becomes a `ValidatedProduct`. Only
structural misuse (an incomplete mapping) raises before rows are read, and
a batch with no valid row at all raises `NoValidRowsError`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from predictgenie.utils.csv_parser import RawCsvTable
from predictgenie.utils.field_mapping import FieldMapping
from predictgenie.utils.logger import get_logger

logger = get_logger("normalize")

# First data row is line 2 of the file (line 1 is the header)
FIRST_DATA_ROW_NUMBER = 2

_NON_PRICE_CHARS = re.compile(r"[^0-9.\-]+")
_LEADING_FLOAT = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


@dataclass(frozen=True)
class ValidatedProduct:
    product_name: str
    current_price: float
    user_product_url: str = ""
    competitor_urls: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productName": self.product_name,
            "currentPrice": self.current_price,
            "userProductUrl": self.user_product_url,
            "competitorUrls": list(self.competitor_urls),
        }


@dataclass(frozen=True)
class RowError:
    row_number: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.message}"


class NoValidRowsError(ValueError):
    """Every data row was skipped or rejected."""

    def __init__(self, errors: Iterable[RowError] = ()):
        self.errors: Tuple[RowError, ...] = tuple(errors)
        if self.errors:
            detail = " ".join(str(e) for e in self.errors)
        else:
            detail = "The CSV contains no rows that could be analyzed."
        super().__init__(f"Analysis failed. {detail}")


@dataclass(frozen=True)
class NormalizationResult:
    products: Tuple[ValidatedProduct, ...]
    errors: Tuple[RowError, ...] = ()

    @property
    def warning(self) -> Optional[str]:
        """Summary shown when some rows were skipped but the batch can proceed."""
        if not self.errors:
            return None
        reasons = " ".join(str(e) for e in self.errors)
        return f"Warning: Skipped {len(self.errors)} invalid rows. Reasons: {reasons}"


def parse_price(cell: str) -> Tuple[Optional[float], Optional[str]]:
    """
    Extract a price from a free-form cell like "$1,299.00" or "19.99 USD".
    Returns (price, None) on success or (None, error message).
    """
    price_string = _NON_PRICE_CHARS.sub("", cell or "")
    if price_string == "":
        return None, "Price is missing."

    # leading float literal, so "12.5.1" reads as 12.5
    match = _LEADING_FLOAT.match(price_string)
    if not match:
        return None, f'Invalid price value "{cell}".'
    price = float(match.group(0))
    if not math.isfinite(price):
        return None, f'Invalid price value "{cell}".'
    if price < 0:
        return None, f'Price cannot be negative: "{cell}".'
    return price, None


def normalize_row(
    row: Dict[str, str],
    mapping: FieldMapping,
    competitor_columns: Iterable[str],
) -> Tuple[Optional[ValidatedProduct], Optional[str]]:
    """Normalize one row. Returns (product, None), (None, error) or (None, None) for a skipped row."""
    product_name = row.get(mapping.product_name_column, "")
    if not product_name or not product_name.strip():
        return None, None

    price, error = parse_price(row.get(mapping.price_column, ""))
    if error is not None:
        return None, error

    user_url = row.get(mapping.user_url_column, "") if mapping.user_url_column else ""
    competitor_urls = tuple(
        value
        for value in (row.get(col, "") for col in competitor_columns)
        if value and value.strip()
    )

    product = ValidatedProduct(
        product_name=product_name,
        current_price=price,  # type: ignore[arg-type]
        user_product_url=user_url,
        competitor_urls=competitor_urls,
    )
    return product, None


def normalize_rows(table: RawCsvTable, mapping: FieldMapping) -> NormalizationResult:
    """
    Validate every data row of `table` against `mapping`.

    Raises MappingIncompleteError before any row is read when the mapping is
    not ready or points at unknown columns, and NoValidRowsError when no row
    survives.
    """
    mapping.ensure_ready()
    mapping.ensure_columns_exist(table.headers)

    competitor_columns = mapping.competitor_columns_in_order(table.headers)
    products = []
    errors = []
    skipped_blank = 0

    for index, row in enumerate(table.rows):
        row_number = index + FIRST_DATA_ROW_NUMBER
        product, message = normalize_row(row, mapping, competitor_columns)
        if product is not None:
            products.append(product)
        elif message is not None:
            errors.append(RowError(row_number=row_number, message=message))
        else:
            skipped_blank += 1

    logger.info(
        "Normalized CSV rows",
        extra={
            "total_rows": len(table.rows),
            "valid": len(products),
            "invalid": len(errors),
            "blank_skipped": skipped_blank,
        },
    )

    if not products:
        raise NoValidRowsError(errors)

    if errors:
        logger.warning(
            "Skipping invalid rows",
            extra={"reasons": [str(e) for e in errors]},
        )

    return NormalizationResult(products=tuple(products), errors=tuple(errors))

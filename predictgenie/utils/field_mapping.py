"""
Column assignments chosen by the user for a parsed CSV.

Product name and current price are required; the product URL column and the
competitor URL columns are optional. Competitor columns are a set, so
toggling is idempotent and the order of selection never matters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

FIELD_LABELS = {
    "product_name_column": "Product Name",
    "price_column": "Current Price",
}


class MappingIncompleteError(ValueError):
    """A required column is not mapped, or a mapped column is not in the file."""


@dataclass
class FieldMapping:
    product_name_column: str = ""
    price_column: str = ""
    user_url_column: str = ""
    competitor_url_columns: Set[str] = field(default_factory=set)

    def set_product_name_column(self, header: str) -> None:
        self.product_name_column = header or ""

    def set_price_column(self, header: str) -> None:
        self.price_column = header or ""

    def set_user_url_column(self, header: str) -> None:
        self.user_url_column = header or ""

    def toggle_competitor_column(self, header: str) -> None:
        if header in self.competitor_url_columns:
            self.competitor_url_columns.discard(header)
        else:
            self.competitor_url_columns.add(header)

    def reset(self) -> None:
        self.product_name_column = ""
        self.price_column = ""
        self.user_url_column = ""
        self.competitor_url_columns = set()

    def is_ready(self) -> bool:
        return bool(self.product_name_column) and bool(self.price_column)

    def missing_fields(self) -> List[str]:
        return [label for attr, label in FIELD_LABELS.items() if not getattr(self, attr)]

    def ensure_ready(self) -> None:
        if not self.is_ready():
            raise MappingIncompleteError(
                "You must map columns for 'Product Name' and 'Current Price'. "
                f"Missing: {', '.join(self.missing_fields())}."
            )

    def ensure_columns_exist(self, headers: Iterable[str]) -> None:
        known = set(headers)
        mapped = [self.product_name_column, self.price_column, self.user_url_column]
        mapped.extend(sorted(self.competitor_url_columns))
        unknown = [col for col in mapped if col and col not in known]
        if unknown:
            raise MappingIncompleteError(
                f"Mapped column(s) not found in the CSV header: {', '.join(unknown)}."
            )

    def competitor_columns_in_order(self, headers: Iterable[str]) -> List[str]:
        """Selected competitor columns, ordered as they appear in the header."""
        return [h for h in headers if h in self.competitor_url_columns]

    @classmethod
    def from_columns(
        cls,
        product_name_column: str,
        price_column: str,
        user_url_column: str = "",
        competitor_url_columns: Iterable[str] = (),
    ) -> "FieldMapping":
        mapping = cls()
        mapping.set_product_name_column(product_name_column)
        mapping.set_price_column(price_column)
        mapping.set_user_url_column(user_url_column)
        mapping.competitor_url_columns = set(competitor_url_columns)
        return mapping

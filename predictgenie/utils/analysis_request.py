"""
Request shapes handed to the pricing model.

An analysis is either a single URL pair (`SingleAnalysisRequest`) or a batch
of validated CSV products (`BatchAnalysisRequest`); `kind` tells them apart.
Builders here only validate and pass data through. They never retry, cache
or talk to the model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple, Union

from predictgenie.utils.csv_parser import RawCsvTable
from predictgenie.utils.field_mapping import FieldMapping
from predictgenie.utils.normalize import NormalizationResult, ValidatedProduct, normalize_rows
from predictgenie.utils.prompt import build_batch_prompt, build_single_prompt


class InvalidRequestError(ValueError):
    """The inputs are not enough to build an analysis request."""


@dataclass(frozen=True)
class SingleAnalysisRequest:
    user_product_url: str
    competitor_urls: Tuple[str, ...]
    kind: str = "single"


@dataclass(frozen=True)
class BatchAnalysisRequest:
    products: Tuple[ValidatedProduct, ...]
    kind: str = "batch"


AnalysisRequest = Union[SingleAnalysisRequest, BatchAnalysisRequest]


def build_single_request(user_product_url: str, competitor_urls: Iterable[str]) -> SingleAnalysisRequest:
    """Keep the non-blank competitor URLs; both sides must be present."""
    competitors = tuple(url for url in competitor_urls if url and url.strip())
    if not user_product_url or not user_product_url.strip():
        raise InvalidRequestError("Please enter your product URL.")
    if not competitors:
        raise InvalidRequestError("Please enter at least one competitor URL.")
    return SingleAnalysisRequest(user_product_url=user_product_url, competitor_urls=competitors)


def build_batch_request(products: Iterable[ValidatedProduct]) -> BatchAnalysisRequest:
    items = tuple(products)
    if not items:
        raise InvalidRequestError("A batch analysis needs at least one product.")
    return BatchAnalysisRequest(products=items)


def build_request_from_csv(
    table: RawCsvTable, mapping: FieldMapping
) -> Tuple[BatchAnalysisRequest, NormalizationResult]:
    """Normalize `table` and wrap the valid rows in a batch request.

    The NormalizationResult is returned too so callers can surface its
    warning about skipped rows.
    """
    result = normalize_rows(table, mapping)
    return build_batch_request(result.products), result


def build_prompt(request: AnalysisRequest) -> str:
    if request.kind == "single":
        return build_single_prompt(request.user_product_url, request.competitor_urls)  # type: ignore[union-attr]
    if request.kind == "batch":
        return build_batch_prompt(request.products)  # type: ignore[union-attr]
    raise InvalidRequestError(f"Unknown analysis request kind: {request.kind!r}")

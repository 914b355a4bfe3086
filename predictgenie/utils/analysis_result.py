"""
Response contract between PredictGenie and the pricing model.

The model answers with camelCase JSON (see `PRODUCT_ANALYSIS_SCHEMA`); this
module turns that JSON into immutable dataclasses and defines the
`AnalysisProvider` protocol any model backend has to satisfy. Bump
`SCHEMA_VERSION` whenever the JSON shape changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

SCHEMA_VERSION = "1"

STOCK_STATUSES = ("In Stock", "Low Stock", "Out of Stock")
PRICE_TRENDS = ("up", "down", "stable")

_COMPETITOR_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "url": {"type": "string"},
        "productName": {
            "type": "string",
            "description": "A realistic, brand-name product name for the competitor's product.",
        },
        "price": {"type": "number", "description": "The competitor's current price."},
        "stockStatus": {
            "type": "string",
            "enum": list(STOCK_STATUSES),
            "description": "The current stock status of the competitor's product.",
        },
        "priceTrend": {
            "type": "string",
            "enum": list(PRICE_TRENDS),
            "description": "The recent price trend of the competitor's product.",
        },
    },
    "required": ["url", "productName", "price", "stockStatus", "priceTrend"],
    "additionalProperties": False,
}

# Strict structured-output schema: every property listed in `required`,
# optional values expressed as nullable types.
PRODUCT_ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "userProduct": {
            "type": "object",
            "properties": {
                "url": {"type": ["string", "null"]},
                "productName": {
                    "type": "string",
                    "description": "A realistic, brand-name product name derived from the URL or input data.",
                },
                "currentPrice": {
                    "type": "number",
                    "description": "A realistic current price for the user's product.",
                },
            },
            "required": ["url", "productName", "currentPrice"],
            "additionalProperties": False,
        },
        "competitors": {
            "type": "array",
            "description": "A list of competitor analyses, one for each provided competitor URL or from web search.",
            "items": _COMPETITOR_SCHEMA,
        },
        "suggestedPrice": {
            "type": "number",
            "description": "The AI-recommended optimal price for the user's product.",
        },
        "reasoning": {
            "type": "string",
            "description": "A detailed, step-by-step explanation for the suggested price, considering competitor prices, stock, and market position.",
        },
        "marketSummary": {
            "type": "string",
            "description": "A brief, one-paragraph overview of the current market landscape based on the provided competitors.",
        },
    },
    "required": ["userProduct", "competitors", "suggestedPrice", "reasoning", "marketSummary"],
    "additionalProperties": False,
}


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object for {where}, got {type(data).__name__}.")
    if key not in data or data[key] is None:
        raise ValueError(f"Missing '{key}' in {where}.")
    return data[key]


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Expected a number for {where}, got {value!r}.")
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected a number for {where}, got {value!r}.") from exc


def _choice(value: Any, allowed: Tuple[str, ...], where: str) -> str:
    text = str(value).strip()
    for option in allowed:
        if text.lower() == option.lower():
            return option
    raise ValueError(f"Unexpected {where} {value!r}; expected one of {', '.join(allowed)}.")


def _optional(parse: Callable[..., Any], value: Any, *args: Any) -> Any:
    if value is None:
        return None
    try:
        return parse(value, *args)
    except ValueError:
        return None


@dataclass(frozen=True)
class UserProduct:
    product_name: str
    current_price: float
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProduct":
        return cls(
            product_name=str(_require(data, "productName", "userProduct")),
            current_price=_number(_require(data, "currentPrice", "userProduct"), "userProduct.currentPrice"),
            url=data.get("url") or None,
        )


@dataclass(frozen=True)
class Competitor:
    url: str
    product_name: str
    price: Optional[float]
    stock_status: Optional[str]
    price_trend: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Competitor":
        return cls(
            url=str(data.get("url") or "") if isinstance(data, dict) else "",
            product_name=str(_require(data, "productName", "competitor")),
            price=_number(_require(data, "price", "competitor"), "competitor.price"),
            stock_status=_choice(_require(data, "stockStatus", "competitor"), STOCK_STATUSES, "stockStatus"),
            price_trend=_choice(_require(data, "priceTrend", "competitor"), PRICE_TRENDS, "priceTrend"),
        )

    @classmethod
    def from_loose_dict(cls, data: Any) -> Optional["Competitor"]:
        """
        Best-effort parse for free-text replies. Returns None when the entry
        names neither a product nor a URL; an unreadable price or an unknown
        stock/trend value becomes None.
        """
        if not isinstance(data, dict):
            return None
        name = str(data.get("productName") or "").strip()
        url = str(data.get("url") or "").strip()
        if not name and not url:
            return None
        return cls(
            url=url,
            product_name=name or url,
            price=_optional(_number, data.get("price"), "competitor.price"),
            stock_status=_optional(_choice, data.get("stockStatus"), STOCK_STATUSES, "stockStatus"),
            price_trend=_optional(_choice, data.get("priceTrend"), PRICE_TRENDS, "priceTrend"),
        )


@dataclass(frozen=True)
class Source:
    uri: str
    title: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Source":
        # accepts both {"web": {"uri", "title"}} and a flat {"uri", "title"}
        web = data.get("web", data) if isinstance(data, dict) else {}
        return cls(uri=str(web.get("uri") or web.get("url") or ""), title=str(web.get("title") or ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"web": {"uri": self.uri, "title": self.title}}


@dataclass(frozen=True)
class ProductAnalysis:
    user_product: UserProduct
    competitors: Tuple[Competitor, ...]
    suggested_price: float
    reasoning: str
    market_summary: str
    sources: Optional[Tuple[Source, ...]] = field(default=None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = True) -> "ProductAnalysis":
        """
        Build an analysis from the model's JSON.

        `userProduct` and `suggestedPrice` are always required. With
        strict=False (free-text batch replies) competitors are parsed with
        `Competitor.from_loose_dict`: unusable entries are dropped and a bad
        price or enum value is kept as None.
        """
        user_product = UserProduct.from_dict(_require(data, "userProduct", "analysis"))
        if strict:
            raw_competitors = _require(data, "competitors", "analysis")
            if not isinstance(raw_competitors, list):
                raise ValueError("'competitors' must be an array.")
            competitors = tuple(Competitor.from_dict(c) for c in raw_competitors)
        else:
            raw_competitors = data.get("competitors")
            if not isinstance(raw_competitors, list):
                raw_competitors = []
            parsed = (Competitor.from_loose_dict(c) for c in raw_competitors)
            competitors = tuple(c for c in parsed if c is not None)
        raw_sources = data.get("sources")
        sources = tuple(Source.from_dict(s) for s in raw_sources) if raw_sources else None
        return cls(
            user_product=user_product,
            competitors=competitors,
            suggested_price=_number(_require(data, "suggestedPrice", "analysis"), "suggestedPrice"),
            reasoning=str(data.get("reasoning") or ""),
            market_summary=str(data.get("marketSummary") or ""),
            sources=sources,
        )

    def with_sources(self, sources: Optional[Tuple[Source, ...]]) -> "ProductAnalysis":
        return ProductAnalysis(
            user_product=self.user_product,
            competitors=self.competitors,
            suggested_price=self.suggested_price,
            reasoning=self.reasoning,
            market_summary=self.market_summary,
            sources=sources or None,
        )

    @property
    def price_change_percent(self) -> float:
        """Suggested vs current price in percent; 0 when the current price is 0."""
        current = self.user_product.current_price
        if current == 0:
            return 0.0
        return (self.suggested_price - current) / current * 100

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "userProduct": {
                "url": self.user_product.url,
                "productName": self.user_product.product_name,
                "currentPrice": self.user_product.current_price,
            },
            "competitors": [
                {
                    "url": c.url,
                    "productName": c.product_name,
                    "price": c.price,
                    "stockStatus": c.stock_status,
                    "priceTrend": c.price_trend,
                }
                for c in self.competitors
            ],
            "suggestedPrice": self.suggested_price,
            "reasoning": self.reasoning,
            "marketSummary": self.market_summary,
        }
        if self.sources:
            out["sources"] = [s.to_dict() for s in self.sources]
        return out


class AnalysisProvider(Protocol):
    """Anything that can turn an analysis request into product analyses."""

    schema_version: str

    def analyze(self, request: Any) -> List[ProductAnalysis]:
        ...

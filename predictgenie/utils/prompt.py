# -------------------------
# Prompt templates for the pricing model
# -------------------------
from __future__ import annotations

from typing import Iterable, Sequence

from predictgenie.utils.normalize import ValidatedProduct

SYSTEM_PROMPT = "You are PredictGenie, an expert AI pricing analyst for e-commerce businesses."

SINGLE_PRODUCT_PROMPT = """
You are PredictGenie, an expert AI pricing analyst for e-commerce businesses. Your goal is to provide actionable pricing intelligence.

Analyze the user's product and their competitors based on the following URLs. For each URL, generate a plausible, brand-specific product name and a realistic price in USD. Also, estimate stock status and recent price trends for competitors.

User's product URL: <<<USER_PRODUCT_URL>>>
Competitor URLs:
<<<COMPETITOR_URLS>>>

Based on your analysis of the competitive landscape, determine an optimal selling price for the user's product. This price should aim to maximize profitability while remaining competitive.

Provide a concise market summary and a detailed reasoning for your price suggestion. The reasoning should clearly reference competitor data points (prices, stock, etc.).

Please provide the full analysis in the requested JSON format.
"""

BATCH_PROMPT = """
You are PredictGenie, an expert AI pricing analyst for e-commerce businesses. Your goal is to provide actionable pricing intelligence for a batch of products.

Analyze the following list of products. For each product:
1.  If competitor URLs are provided, analyze them directly.
2.  If competitor URLs are NOT provided, you MUST use your web search tool to find 2-3 top online competitors for the given product name.
3.  For each competitor found or provided, generate a plausible, brand-specific product name, a realistic price in USD, and estimate their stock status ("In Stock", "Low Stock" or "Out of Stock") and recent price trend ("up", "down" or "stable").
4.  Provide a concise market summary and detailed reasoning for each product's price suggestion.

Batch Product Data:
<<<BATCH_PRODUCT_DATA>>>

Return ONLY a single JSON object inside a ```json ... ``` markdown block.
The JSON object must contain a 'results' key. The value of 'results' must be an array of analysis objects, one for each product in the input batch.
Each analysis object must contain: userProduct (object with productName, currentPrice), competitors (array of objects with url, productName, price, stockStatus, priceTrend), suggestedPrice (number), reasoning (string), and marketSummary (string).
"""


def _format_price(price: float) -> str:
    # 499.0 -> "499", 19.99 -> "19.99"
    return str(int(price)) if float(price).is_integer() else repr(float(price))


def format_product_line(product: ValidatedProduct) -> str:
    return (
        f'- Product: "{product.product_name}", '
        f"Price: {_format_price(product.current_price)}, "
        f"URL: {product.user_product_url or 'N/A'}, "
        f"Competitors: [{', '.join(product.competitor_urls)}]"
    )


def build_single_prompt(user_product_url: str, competitor_urls: Iterable[str]) -> str:
    competitor_block = "\n".join(f"- {url}" for url in competitor_urls)
    return (
        SINGLE_PRODUCT_PROMPT.replace("<<<USER_PRODUCT_URL>>>", user_product_url)
        .replace("<<<COMPETITOR_URLS>>>", competitor_block)
        .strip()
    )


def build_batch_prompt(products: Sequence[ValidatedProduct]) -> str:
    product_block = "\n".join(format_product_line(p) for p in products)
    return BATCH_PROMPT.replace("<<<BATCH_PRODUCT_DATA>>>", product_block).strip()

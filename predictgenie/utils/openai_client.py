"""
OpenAI SDK-based pricing analysis client.

Wraps the official `openai` Python SDK (OpenAI or Azure OpenAI) to send
PredictGenie prompts and turn the model's JSON into `ProductAnalysis`
objects.

Usage:
    from predictgenie.utils.openai_client import get_client
    results = get_client().analyze(request)

Each call makes exactly one request. There is no retry: failures surface as
`ExternalServiceError` with the underlying reason.
"""

from __future__ import annotations

import json
import re
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from openai import AzureOpenAI, OpenAI

from predictgenie.config.settings import Settings, require_api_key, settings
from predictgenie.utils.analysis_request import AnalysisRequest
from predictgenie.utils.analysis_result import (
    PRODUCT_ANALYSIS_SCHEMA,
    SCHEMA_VERSION,
    ProductAnalysis,
    Source,
)
from predictgenie.utils.logger import get_logger
from predictgenie.utils.normalize import ValidatedProduct
from predictgenie.utils.prompt import SYSTEM_PROMPT, build_batch_prompt, build_single_prompt

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")

EMPTY_SINGLE_RESPONSE = (
    "Received an empty response from the AI. "
    "The model might be unable to process the request with the given inputs."
)
EMPTY_BATCH_RESPONSE = "Received an empty or invalid response from the AI for batch analysis."
MISSING_RESULTS = "API response is missing the 'results' array or it is not in the correct format."


class ExternalServiceError(RuntimeError):
    """The pricing model call failed or returned something unusable."""


class AnalysisInProgressError(RuntimeError):
    """Another analysis request is still running on this client."""


def extract_json_payload(text: str) -> str:
    """
    Pull the JSON document out of a model reply that may be wrapped in prose
    or markdown fences. Returns "" for an empty reply.
    """
    txt = (text or "").strip()
    if not txt:
        return ""
    match = _FENCED_JSON.search(txt)
    if match and match.group(1).strip():
        return match.group(1).strip()
    # find JSON object substring (first { ... last })
    first = txt.find("{")
    last = txt.rfind("}")
    if first != -1 and last != -1 and last > first:
        return txt[first : last + 1]
    return txt


def extract_sources(response: Any) -> Tuple[Source, ...]:
    """Collect url_citation annotations from a Responses API result, deduplicated by URL."""
    seen = set()
    sources: List[Source] = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                url = getattr(annotation, "url", "") or ""
                if not url or url in seen:
                    continue
                seen.add(url)
                sources.append(Source(uri=url, title=getattr(annotation, "title", "") or ""))
    return tuple(sources)


def build_sdk_client(config: Optional[Settings] = None) -> Any:
    """Return an AzureOpenAI client when an Azure endpoint is configured, else OpenAI."""
    config = config or settings
    api_key = require_api_key(config)
    if config.AZURE_OPENAI_ENDPOINT:
        return AzureOpenAI(
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            api_key=api_key,
            api_version=config.AZURE_API_VERSION,
            timeout=config.OPENAI_TIMEOUT,
        )
    return OpenAI(api_key=api_key, timeout=config.OPENAI_TIMEOUT)


class PricingAnalysisClient:
    schema_version = SCHEMA_VERSION

    def __init__(
        self,
        client: Any = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        enable_web_search: Optional[bool] = None,
        config: Optional[Settings] = None,
    ):
        self._config = config or settings
        self._client = client
        self.model = model or self._config.OPENAI_MODEL
        self.temperature = (
            self._config.OPENAI_TEMPERATURE if temperature is None else temperature
        )
        self.enable_web_search = (
            self._config.ENABLE_WEB_SEARCH if enable_web_search is None else enable_web_search
        )
        self._in_flight = threading.Lock()
        self.logger = get_logger("openai_client")

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = build_sdk_client(self._config)
        return self._client

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def analyze(self, request: AnalysisRequest) -> List[ProductAnalysis]:
        """Run one analysis. Single requests come back as a one-element list."""
        if request.kind == "single":
            return [self.analyze_single(request.user_product_url, request.competitor_urls)]  # type: ignore[union-attr]
        if request.kind == "batch":
            return self.analyze_batch(request.products)  # type: ignore[union-attr]
        raise ValueError(f"Unknown analysis request kind: {request.kind!r}")

    def _acquire(self) -> None:
        if not self._in_flight.acquire(blocking=False):
            raise AnalysisInProgressError(
                "An analysis is already in progress. Please wait for it to finish."
            )

    def analyze_single(self, user_product_url: str, competitor_urls: Sequence[str]) -> ProductAnalysis:
        self._acquire()
        try:
            prompt = build_single_prompt(user_product_url, competitor_urls)
            self.logger.info(
                "Requesting single product analysis",
                extra={"model": self.model, "competitor_count": len(competitor_urls)},
            )
            try:
                resp = self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.temperature,
                    response_format={
                        "type": "json_schema",
                        "json_schema": {
                            "name": "product_analysis",
                            "schema": PRODUCT_ANALYSIS_SCHEMA,
                            "strict": True,
                        },
                    },
                )
                content = resp.choices[0].message.content if resp.choices else None
                json_text = (content or "").strip()
                if not json_text:
                    raise ValueError(EMPTY_SINGLE_RESPONSE)
                analysis = ProductAnalysis.from_dict(json.loads(json_text))
            except Exception as exc:
                self.logger.exception(
                    "Single product analysis failed", extra={"error": str(exc)}
                )
                raise ExternalServiceError(
                    f"Failed to get analysis from PredictGenie. Reason: {exc}"
                ) from exc
            self.logger.info(
                "Single product analysis complete",
                extra={"suggested_price": analysis.suggested_price},
            )
            return analysis
        finally:
            self._in_flight.release()

    def _request_batch_text(self, prompt: str) -> Tuple[str, Tuple[Source, ...]]:
        request: Dict[str, Any] = {
            "model": self.model,
            "instructions": SYSTEM_PROMPT,
            "input": prompt,
            "temperature": self.temperature,
        }
        if self.enable_web_search:
            request["tools"] = [{"type": "web_search_preview"}]
        response = self.client.responses.create(**request)
        return getattr(response, "output_text", "") or "", extract_sources(response)

    def analyze_batch(self, products: Sequence[ValidatedProduct]) -> List[ProductAnalysis]:
        self._acquire()
        try:
            prompt = build_batch_prompt(products)
            self.logger.info(
                "Requesting batch analysis",
                extra={
                    "model": self.model,
                    "products": len(products),
                    "web_search": self.enable_web_search,
                },
            )
            try:
                text, sources = self._request_batch_text(prompt)
                json_text = extract_json_payload(text)
                if not json_text:
                    raise ValueError(EMPTY_BATCH_RESPONSE)
                parsed = json.loads(json_text)
                results = parsed.get("results") if isinstance(parsed, dict) else None
                if not isinstance(results, list):
                    raise ValueError(MISSING_RESULTS)
                analyses = [
                    ProductAnalysis.from_dict(item, strict=False).with_sources(sources)
                    for item in results
                ]
            except Exception as exc:
                self.logger.exception("Batch analysis failed", extra={"error": str(exc)})
                raise ExternalServiceError(
                    f"Failed to get batch analysis from PredictGenie. Reason: {exc}"
                ) from exc
            self.logger.info(
                "Batch analysis complete",
                extra={"results": len(analyses), "sources": len(sources)},
            )
            return analyses
        finally:
            self._in_flight.release()


# Singleton client
_client: Optional[PricingAnalysisClient] = None


def get_client() -> PricingAnalysisClient:
    global _client
    if _client is None:
        _client = PricingAnalysisClient()
    return _client


def run_analysis(request: AnalysisRequest, client: Optional[PricingAnalysisClient] = None) -> List[ProductAnalysis]:
    """Send `request` through `client` (or the shared client) and return the analyses."""
    return (client or get_client()).analyze(request)

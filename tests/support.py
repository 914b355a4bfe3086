"""Fake OpenAI SDK objects and canned model replies shared by the tests."""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock


def make_analysis_dict(name: str = "Pro Camera X1", current: float = 499.99, suggested: float = 479.0) -> dict:
    return {
        "userProduct": {"url": "https://yourstore.com/pro-camera", "productName": name, "currentPrice": current},
        "competitors": [
            {
                "url": "https://competitorA.com/camera-x1",
                "productName": "Camera X1 (Competitor A)",
                "price": 469.0,
                "stockStatus": "In Stock",
                "priceTrend": "down",
            },
            {
                "url": "https://competitorB.com/pro-cam-x1",
                "productName": "Pro Cam X1",
                "price": 519.5,
                "stockStatus": "Low Stock",
                "priceTrend": "stable",
            },
        ],
        "suggestedPrice": suggested,
        "reasoning": "Competitor A undercuts by 30 USD while B is low on stock.",
        "marketSummary": "A tight market with two close substitutes.",
    }


def make_chat_client(content) -> SimpleNamespace:
    """Fake SDK client whose chat.completions.create returns `content`."""
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
    create = Mock(return_value=response)
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def make_responses_client(output_text: str, citations=()) -> SimpleNamespace:
    """Fake SDK client whose responses.create returns `output_text` plus url citations."""
    annotations = [
        SimpleNamespace(type="url_citation", url=url, title=title) for url, title in citations
    ]
    message = SimpleNamespace(
        type="message",
        content=[SimpleNamespace(type="output_text", text=output_text, annotations=annotations)],
    )
    response = SimpleNamespace(
        output_text=output_text,
        output=[SimpleNamespace(type="web_search_call"), message],
    )
    create = Mock(return_value=response)
    return SimpleNamespace(responses=SimpleNamespace(create=create))



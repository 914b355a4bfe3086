"""Small formatting helpers shared by the result views."""

from __future__ import annotations

TREND_SYMBOLS = {"up": "▲ up", "down": "▼ down", "stable": "= stable"}


def format_currency(value: float | int | None) -> str:
    if value is None:
        return "-"
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_change(percent: float | None) -> str:
    if percent is None:
        return "-"
    return f"{percent:.1f}%"


def format_trend(trend: str | None) -> str:
    if not trend:
        return "-"
    return TREND_SYMBOLS.get(trend, trend)

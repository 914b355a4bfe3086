"""Copy for headings, hints and empty states used across the dashboard."""

from __future__ import annotations

APP_TITLE = "PredictGenie"
APP_SUBTITLE = "AI-powered competitor pricing for e-commerce products."

WELCOME_TITLE = "Welcome to PredictGenie"
WELCOME_BODY = (
    "Analyze prices by URL or upload a CSV for batch analysis to get AI-powered pricing suggestions."
)

TAB_URL = "Analyze by URL"
TAB_CSV = "Analyze by CSV"

DEFAULT_USER_PRODUCT_URL = "https://www.example-store.com/products/pro-camera-x1"
DEFAULT_COMPETITOR_URLS = (
    "https://www.competitor-a.com/pro-camera-x1",
    "https://www.competitor-b.com/cameras/pro-cam-x1-model",
)

MAPPING_TITLE = "Map Your CSV Columns"
MAPPING_HINT = "Match the columns from your file to the required fields."
SELECT_PLACEHOLDER = "Select column..."
WEB_SEARCH_HINT = (
    "If no competitor URLs are mapped, PredictGenie will use web search to find them."
)
NO_FILE = "Please select a CSV file."

SUBMIT_LABEL = "Analyze Prices"
LOADING_LABEL = "Analyzing..."
FAILED_TITLE = "Analysis Failed"

# Shared pytest fixtures
from __future__ import annotations

import json
from pathlib import Path

import pytest

from predictgenie.utils.csv_parser import parse_csv, sample_csv_text
from predictgenie.utils.field_mapping import FieldMapping
from tests.support import make_analysis_dict


@pytest.fixture()
def analysis_dict() -> dict:
    return make_analysis_dict()


@pytest.fixture()
def batch_reply() -> str:
    payload = {
        "results": [
            make_analysis_dict(),
            make_analysis_dict("Wireless Headphones Z", 149.0, 155.0),
        ]
    }
    return "Here is the analysis you asked for:\n```json\n" + json.dumps(payload, indent=2) + "\n```\nLet me know!"


@pytest.fixture()
def sample_table():
    return parse_csv(sample_csv_text())


@pytest.fixture()
def sample_mapping() -> FieldMapping:
    return FieldMapping.from_columns(
        "productName",
        "currentPrice",
        "userProductUrl",
        ["competitorUrl_1", "competitorUrl_2"],
    )


@pytest.fixture()
def write_csv(tmp_path: Path):
    def _write(text: str, name: str = "products.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write

from __future__ import annotations

from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest


class FakeModels:
    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[Dict[str, object]] = []

    def generate_content(self, **kwargs: object) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeClient:
    """Stands in for ``genai.Client``; only ``models.generate_content`` is used."""

    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.models = FakeModels(text=text, error=error)


@pytest.fixture
def report_payload() -> Dict[str, object]:
    return {
        "companyName": "Acme",
        "reportingPeriod": "FY2024",
        "totalEmissions": 120,
        "unit": "tCO2e",
        "breakdown": {"scope1": 20, "scope2": 50, "scope3": 50},
        "sources": [
            {"source": "Natural gas boilers", "amount": 15, "unit": "tCO2e", "scope": 1},
            {"source": "Company vehicles", "amount": 5, "unit": "tCO2e", "scope": 1},
            {"source": "Purchased electricity", "amount": 50, "unit": "tCO2e", "scope": 2},
            {"source": "Business travel", "amount": 30, "unit": "tCO2e", "scope": 3},
            {"source": "Waste", "amount": 20, "unit": "tCO2e", "scope": 3},
        ],
        "insights": ["Electricity dominates the footprint."],
        "recommendations": ["Switch to a renewable power tariff.", "Electrify the vehicle fleet."],
    }


@pytest.fixture
def make_client():
    return FakeClient

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

DEFAULT_UNIT = "tCO2e"
SCOPES = (1, 2, 3)

REQUIRED_REPORT_FIELDS = {"companyName", "totalEmissions", "breakdown", "sources", "insights", "recommendations"}
REQUIRED_SOURCE_FIELDS = {"source", "amount", "unit", "scope"}
REQUIRED_BREAKDOWN_FIELDS = {"scope1", "scope2", "scope3"}

RESPONSE_SCHEMA: Dict[str, object] = {
    "type": "OBJECT",
    "properties": {
        "companyName": {"type": "STRING"},
        "reportingPeriod": {"type": "STRING"},
        "totalEmissions": {"type": "NUMBER"},
        "unit": {"type": "STRING", "description": "Should be tCO2e"},
        "breakdown": {
            "type": "OBJECT",
            "properties": {
                "scope1": {"type": "NUMBER"},
                "scope2": {"type": "NUMBER"},
                "scope3": {"type": "NUMBER"},
            },
            "required": ["scope1", "scope2", "scope3"],
        },
        "sources": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "source": {"type": "STRING"},
                    "amount": {"type": "NUMBER"},
                    "unit": {"type": "STRING"},
                    "scope": {"type": "NUMBER"},
                },
                "required": ["source", "amount", "unit", "scope"],
            },
        },
        "insights": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["companyName", "totalEmissions", "breakdown", "sources", "insights", "recommendations"],
}


def _require(payload: object, required: set[str], label: str) -> Mapping[str, object]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{label} must be an object, got {type(payload).__name__}.")
    missing = required - set(payload)
    if missing:
        raise ValueError(f"{label} missing fields: {', '.join(sorted(missing))}")
    return payload


def _as_number(value: object, field: str) -> float:
    # bool is an int subclass but never a valid emission figure
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{field}' must be a number, got {value!r}.")
    return float(value)


def _as_text(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Field '{field}' must be text, got {value!r}.")
    return value.strip()


def _as_text_list(value: object, field: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Field '{field}' must be a list of text.")
    return tuple(_as_text(item, field) for item in value)


@dataclass(frozen=True)
class EmissionSource:
    source: str
    amount: float
    unit: str
    scope: int

    @classmethod
    def from_dict(cls, payload: object) -> "EmissionSource":
        data = _require(payload, REQUIRED_SOURCE_FIELDS, "Emission source")
        scope_value = _as_number(data["scope"], "scope")
        if scope_value not in SCOPES:
            raise ValueError(f"Emission source scope must be 1, 2 or 3, got {data['scope']!r}.")
        return cls(
            source=_as_text(data["source"], "source"),
            amount=_as_number(data["amount"], "amount"),
            unit=_as_text(data["unit"], "unit"),
            scope=int(scope_value),
        )

    def to_dict(self) -> Dict[str, object]:
        return {"source": self.source, "amount": self.amount, "unit": self.unit, "scope": self.scope}


@dataclass(frozen=True)
class ScopeBreakdown:
    scope1: float
    scope2: float
    scope3: float

    @classmethod
    def from_dict(cls, payload: object) -> "ScopeBreakdown":
        data = _require(payload, REQUIRED_BREAKDOWN_FIELDS, "Breakdown")
        return cls(
            scope1=_as_number(data["scope1"], "scope1"),
            scope2=_as_number(data["scope2"], "scope2"),
            scope3=_as_number(data["scope3"], "scope3"),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"scope1": self.scope1, "scope2": self.scope2, "scope3": self.scope3}


@dataclass(frozen=True)
class CarbonReport:
    """Carbon emission figures extracted from a single uploaded document.

    Totals are carried exactly as the model reported them. The expectation
    that ``total_emissions`` equals the sum of the three scopes is never
    enforced here; see ``scope_gap``.
    """

    company_name: str
    reporting_period: str
    total_emissions: float
    unit: str
    breakdown: ScopeBreakdown
    sources: Tuple[EmissionSource, ...]
    insights: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    @classmethod
    def from_dict(cls, payload: object) -> "CarbonReport":
        """Build a report from the camelCase JSON object returned by the model."""
        data = _require(payload, REQUIRED_REPORT_FIELDS, "Report")

        sources = data["sources"]
        if not isinstance(sources, list):
            raise ValueError("Field 'sources' must be a list of emission sources.")

        period = data.get("reportingPeriod")
        unit = data.get("unit")
        return cls(
            company_name=_as_text(data["companyName"], "companyName"),
            reporting_period=_as_text(period, "reportingPeriod") if period is not None else "",
            total_emissions=_as_number(data["totalEmissions"], "totalEmissions"),
            unit=(_as_text(unit, "unit") if unit is not None else "") or DEFAULT_UNIT,
            breakdown=ScopeBreakdown.from_dict(data["breakdown"]),
            sources=tuple(EmissionSource.from_dict(item) for item in sources),
            insights=_as_text_list(data["insights"], "insights"),
            recommendations=_as_text_list(data["recommendations"], "recommendations"),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "companyName": self.company_name,
            "reportingPeriod": self.reporting_period,
            "totalEmissions": self.total_emissions,
            "unit": self.unit,
            "breakdown": self.breakdown.to_dict(),
            "sources": [source.to_dict() for source in self.sources],
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
        }

    @property
    def scope_total(self) -> float:
        return self.breakdown.scope1 + self.breakdown.scope2 + self.breakdown.scope3

    @property
    def scope_gap(self) -> float:
        return self.total_emissions - self.scope_total

from __future__ import annotations

import pytest

from carbontrack.report_schema import RESPONSE_SCHEMA, CarbonReport, EmissionSource


def test_from_dict_builds_immutable_report(report_payload: dict) -> None:
    report = CarbonReport.from_dict(report_payload)

    assert report.company_name == "Acme"
    assert report.total_emissions == pytest.approx(120.0)
    assert report.breakdown.scope2 == pytest.approx(50.0)
    assert [source.source for source in report.sources][:2] == ["Natural gas boilers", "Company vehicles"]
    assert report.recommendations == ("Switch to a renewable power tariff.", "Electrify the vehicle fleet.")

    with pytest.raises(AttributeError):
        report.company_name = "Other"  # type: ignore[misc]


def test_optional_fields_default(report_payload: dict) -> None:
    del report_payload["reportingPeriod"]
    del report_payload["unit"]

    report = CarbonReport.from_dict(report_payload)

    assert report.reporting_period == ""
    assert report.unit == "tCO2e"


def test_to_dict_matches_response_shape(report_payload: dict) -> None:
    report = CarbonReport.from_dict(report_payload)

    payload = report.to_dict()

    assert set(payload) == set(RESPONSE_SCHEMA["properties"])
    assert payload["breakdown"] == {"scope1": 20.0, "scope2": 50.0, "scope3": 50.0}
    assert payload["sources"][2] == {"source": "Purchased electricity", "amount": 50.0, "unit": "tCO2e", "scope": 2}


@pytest.mark.parametrize("field", ["companyName", "totalEmissions", "breakdown", "sources", "insights", "recommendations"])
def test_missing_required_field_rejected(report_payload: dict, field: str) -> None:
    del report_payload[field]

    with pytest.raises(ValueError, match=field):
        CarbonReport.from_dict(report_payload)


def test_non_object_payload_rejected() -> None:
    with pytest.raises(ValueError):
        CarbonReport.from_dict(["not", "an", "object"])


def test_source_scope_must_be_one_two_or_three() -> None:
    assert EmissionSource.from_dict({"source": "Fleet", "amount": 3, "unit": "t", "scope": 1.0}).scope == 1

    with pytest.raises(ValueError):
        EmissionSource.from_dict({"source": "Fleet", "amount": 3, "unit": "t", "scope": 4})


def test_non_numeric_total_rejected(report_payload: dict) -> None:
    report_payload["totalEmissions"] = "120 t"

    with pytest.raises(ValueError):
        CarbonReport.from_dict(report_payload)


def test_scope_gap_is_reported_not_corrected(report_payload: dict) -> None:
    report_payload["totalEmissions"] = 150

    report = CarbonReport.from_dict(report_payload)

    assert report.total_emissions == pytest.approx(150.0)
    assert report.scope_total == pytest.approx(120.0)
    assert report.scope_gap == pytest.approx(30.0)

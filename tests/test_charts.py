from __future__ import annotations

import pytest

from carbontrack.charts import build_scope_pie, build_sources_bar, format_amount, scope_frame, top_sources
from carbontrack.report_schema import CarbonReport


def _report_with_sources(count: int, payload: dict) -> CarbonReport:
    payload["sources"] = [
        {"source": f"Source {i}", "amount": float(i), "unit": "tCO2e", "scope": (i % 3) + 1}
        for i in range(count)
    ]
    return CarbonReport.from_dict(payload)


@pytest.mark.parametrize(
    "value, expected",
    [(120, "120"), (100, "100"), (1234.5, "1,234.5"), (0.12345, "0.123"), (0, "0"), (2500000, "2,500,000")],
)
def test_format_amount(value: float, expected: str) -> None:
    assert format_amount(value) == expected


def test_top_sources_sorted_and_limited(report_payload: dict) -> None:
    report = _report_with_sources(10, report_payload)
    original_order = [source.source for source in report.sources]

    df = top_sources(report)

    assert len(df) == 8
    assert df["amount"].tolist() == [9.0, 8.0, 7.0, 6.0, 5.0, 4.0, 3.0, 2.0]
    assert df.iloc[0]["scope_label"] == "Scope 1"
    assert [source.source for source in report.sources] == original_order


def test_top_sources_empty(report_payload: dict) -> None:
    report = _report_with_sources(0, report_payload)

    assert top_sources(report).empty
    assert len(build_sources_bar(report).data) == 0


def test_scope_frame_and_pie(report_payload: dict) -> None:
    report = CarbonReport.from_dict(report_payload)

    df = scope_frame(report)
    fig = build_scope_pie(report)

    assert df["scope"].tolist() == ["Scope 1", "Scope 2", "Scope 3"]
    assert list(fig.data[0].values) == [20.0, 50.0, 50.0]


def test_sources_bar_has_one_trace_per_scope(report_payload: dict) -> None:
    report = CarbonReport.from_dict(report_payload)

    fig = build_sources_bar(report)

    assert {trace.name for trace in fig.data} == {"Scope 1", "Scope 2", "Scope 3"}
    assert sum(len(trace.x) for trace in fig.data) == 5


def test_duplicate_source_names_keep_separate_bars(report_payload: dict) -> None:
    report_payload["sources"] = [
        {"source": "Electricity", "amount": 40, "unit": "tCO2e", "scope": 2},
        {"source": "Waste", "amount": 10, "unit": "tCO2e", "scope": 3},
        {"source": "Electricity", "amount": 30, "unit": "tCO2e", "scope": 2},
    ]
    report = CarbonReport.from_dict(report_payload)

    df = top_sources(report)
    fig = build_sources_bar(report)

    assert df["label"].tolist() == ["Electricity", "Electricity (2)", "Waste"]
    assert df["source"].tolist() == ["Electricity", "Electricity", "Waste"]
    assert sorted(label for trace in fig.data for label in trace.y) == ["Electricity", "Electricity (2)", "Waste"]

from __future__ import annotations

import pandas as pd
import pytest

from carbontrack.export_excel import export_report_excel
from carbontrack.report_schema import CarbonReport


def test_export_report_excel_sheets(report_payload: dict) -> None:
    report = CarbonReport.from_dict(report_payload)

    buffer = export_report_excel(report)
    sheets = pd.read_excel(buffer, sheet_name=None)

    assert list(sheets) == ["Summary", "Scope Breakdown", "Emission Sources", "Insights"]
    assert len(sheets["Emission Sources"]) == 5
    assert sheets["Scope Breakdown"]["tCO2e"].sum() == pytest.approx(120.0)
    assert sheets["Insights"]["type"].value_counts().to_dict() == {"recommendation": 2, "insight": 1}


def test_export_report_excel_without_sources(report_payload: dict) -> None:
    report_payload["sources"] = []
    report = CarbonReport.from_dict(report_payload)

    sheets = pd.read_excel(export_report_excel(report), sheet_name=None)

    assert sheets["Emission Sources"].empty
    assert list(sheets["Emission Sources"].columns) == ["source", "amount", "unit", "scope"]

from __future__ import annotations

from io import BytesIO
from typing import Dict

import pandas as pd
from openpyxl.styles import Font

from carbontrack.charts import scope_frame
from carbontrack.report_schema import CarbonReport


def _style_sheet(writer: pd.ExcelWriter, sheet_name: str) -> None:
    ws = writer.book[sheet_name]

    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if isinstance(cell.value, (int, float)):
                cell.number_format = "#,##0.000"


def report_tables(report: CarbonReport) -> Dict[str, pd.DataFrame]:
    """Tabular views of a report, keyed by sheet name."""
    summary_df = pd.DataFrame(
        [
            {"field": "Company", "value": report.company_name},
            {"field": "Reporting Period", "value": report.reporting_period},
            {"field": "Total Emissions", "value": report.total_emissions},
            {"field": "Unit", "value": report.unit},
            {"field": "Sum of Scopes", "value": report.scope_total},
        ]
    )

    scope_df = scope_frame(report).rename(columns={"value": report.unit})

    sources_df = pd.DataFrame(
        [source.to_dict() for source in report.sources],
        columns=["source", "amount", "unit", "scope"],
    )

    notes_df = pd.DataFrame(
        [{"type": "insight", "text": text} for text in report.insights]
        + [{"type": "recommendation", "text": text} for text in report.recommendations],
        columns=["type", "text"],
    )

    return {
        "Summary": summary_df,
        "Scope Breakdown": scope_df,
        "Emission Sources": sources_df,
        "Insights": notes_df,
    }


def export_report_excel(report: CarbonReport) -> BytesIO:
    """Export an extracted carbon report to an in-memory Excel workbook."""
    buffer = BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, table in report_tables(report).items():
            table.to_excel(writer, sheet_name=sheet_name, index=False)
            _style_sheet(writer, sheet_name)

    buffer.seek(0)
    return buffer

from __future__ import annotations

import json
import logging

import streamlit as st

from carbontrack.analysis_client import analyze_carbon_report, build_client
from carbontrack.charts import build_scope_pie, build_sources_bar, format_amount
from carbontrack.config import configure_logging, load_settings
from carbontrack.export_excel import export_report_excel
from carbontrack.file_reader import UPLOAD_EXTENSIONS
from carbontrack.report_schema import CarbonReport
from carbontrack.view_state import (
    ViewState,
    current_view,
    ensure_state,
    reset,
    run_analysis,
    select_file,
)

logger = logging.getLogger("carbontrack.app")

FEATURES = [
    ("Scope 1, 2, 3", "Full breakdown support"),
    ("Strategic Insights", "AI-driven reduction tips"),
    ("Audit Ready", "Compliant with GHG protocol"),
]


@st.cache_resource
def _settings():
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


@st.cache_resource
def _client():
    return build_client(_settings())


def _analyze(file_b64: str, mime_type: str) -> CarbonReport:
    return analyze_carbon_report(file_b64, mime_type, client=_client(), model=_settings().model)


def _render_header() -> None:
    st.title("🌍 CarbonTrack")
    st.caption("Decarbonizing the future, one report at a time.")


def _render_footer() -> None:
    st.divider()
    st.caption("CarbonTrack AI. Powered by Gemini.")


def _render_idle() -> None:
    st.subheader("Understand your carbon footprint")
    st.write(
        "Upload your environmental reports, utility bills, or sustainability declarations. "
        "Gemini extracts the emission data and visualizes your footprint in seconds."
    )

    uploaded_file = st.file_uploader(
        "Upload a document (PDF, JPG, PNG or CSV, max. 10MB)",
        type=UPLOAD_EXTENSIONS,
        key=f"upload-{st.session_state['uploader_key']}",
    )
    if select_file(st.session_state, uploaded_file):
        st.rerun()

    feature_cols = st.columns(len(FEATURES))
    for col, (label, desc) in zip(feature_cols, FEATURES):
        col.markdown(f"**{label}**")
        col.caption(desc)


def _render_analyzing() -> None:
    st.subheader("Analyzing Environmental Data")
    with st.spinner("Gemini is processing scopes and calculating footprints..."):
        run_analysis(st.session_state, analyze=_analyze)
    st.rerun()


def _render_error(message: str) -> None:
    st.subheader("Analysis Failed")
    st.error(message)
    st.button("Try Again", on_click=reset, args=(st.session_state,), type="primary")


def _render_dashboard(report: CarbonReport) -> None:
    head_left, head_right = st.columns([3, 1])
    head_left.header(report.company_name)
    head_left.caption(f"Reporting Period: {report.reporting_period or 'Not specified'}")
    head_right.button("Analyze Another File", on_click=reset, args=(st.session_state,))

    col_total, col_scopes, col_pie = st.columns(3)
    with col_total:
        st.metric("Total Footprint", f"{format_amount(report.total_emissions)} {report.unit}")
        st.caption("Combined direct & indirect emissions")
        if abs(report.scope_gap) > 0.01 * max(abs(report.total_emissions), 1.0):
            st.caption(
                f"Scope totals add up to {format_amount(report.scope_total)} {report.unit}, "
                "which differs from the reported total."
            )

    with col_scopes:
        st.markdown("**Scope Breakdown**")
        for label, value in [
            ("Scope 1", report.breakdown.scope1),
            ("Scope 2", report.breakdown.scope2),
            ("Scope 3", report.breakdown.scope3),
        ]:
            st.write(f"{label}: **{format_amount(value)} {report.unit}**")

    with col_pie:
        st.plotly_chart(build_scope_pie(report), use_container_width=True)

    col_bar, col_insights = st.columns(2)
    with col_bar:
        if report.sources:
            st.plotly_chart(build_sources_bar(report), use_container_width=True)
        else:
            st.info("No individual emission sources were found in the document.")

    with col_insights:
        st.markdown("### AI Strategic Insights")
        for insight in report.insights:
            st.markdown(f"⚡ {insight}")
        st.markdown("#### Key Recommendations")
        for recommendation in report.recommendations:
            st.markdown(f"- {recommendation}")

    dl_excel, dl_json = st.columns(2)
    dl_excel.download_button(
        label="Download Excel Report",
        data=export_report_excel(report).getvalue(),
        file_name="carbontrack_report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    dl_json.download_button(
        label="Download JSON",
        data=json.dumps(report.to_dict(), indent=2).encode("utf-8"),
        file_name="carbontrack_report.json",
        mime="application/json",
    )


st.set_page_config(page_title="CarbonTrack", page_icon="🌍", layout="wide")
_settings()
ensure_state(st.session_state)

_render_header()

view = current_view(st.session_state)
if view is ViewState.IDLE:
    _render_idle()
elif view is ViewState.ANALYZING:
    _render_analyzing()
elif view is ViewState.ERROR:
    _render_error(st.session_state["error"] or "")
elif st.session_state["report"] is not None:
    _render_dashboard(st.session_state["report"])
else:
    logger.warning("Result view without a report; returning to upload.")
    reset(st.session_state)
    st.rerun()

_render_footer()

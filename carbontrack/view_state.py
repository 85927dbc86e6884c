from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, MutableMapping

from carbontrack.errors import AnalysisError, FileReadError
from carbontrack.file_reader import read_upload
from carbontrack.report_schema import CarbonReport

logger = logging.getLogger(__name__)

FILE_READ_ERROR_MESSAGE = "Error reading file."
ANALYSIS_FAILED_MESSAGE = "Failed to analyze the document. Please ensure it contains carbon emission data."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

Analyzer = Callable[[str, str], CarbonReport]


class ViewState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    RESULT = "result"
    ERROR = "error"


def _defaults() -> dict:
    return {
        "view": ViewState.IDLE,
        "report": None,
        "error": None,
        "pending_upload": None,
        "uploader_key": 0,
    }


def ensure_state(state: MutableMapping) -> None:
    for key, value in _defaults().items():
        if key not in state:
            state[key] = value


def current_view(state: MutableMapping) -> ViewState:
    return ViewState(state.get("view", ViewState.IDLE))


def select_file(state: MutableMapping, upload: object) -> bool:
    """Start an analysis for ``upload``; returns False when nothing changed.

    A cancelled dialog (``None``) is a no-op. Uploads are only accepted from the
    idle view, so a second file chosen while one is being analyzed is ignored.
    """
    if upload is None:
        return False

    view = current_view(state)
    if view is not ViewState.IDLE:
        logger.warning(
            "Ignoring upload '%s' while view is %s.", getattr(upload, "name", "upload"), view.value
        )
        return False

    state["view"] = ViewState.ANALYZING
    state["error"] = None
    state["pending_upload"] = upload
    return True


def _fail(state: MutableMapping, message: str) -> ViewState:
    state["report"] = None
    state["error"] = message
    state["view"] = ViewState.ERROR
    return ViewState.ERROR


def run_analysis(state: MutableMapping, analyze: Analyzer) -> ViewState:
    """Read the pending upload, hand it to ``analyze`` and record the outcome."""
    upload = state.get("pending_upload")
    state["pending_upload"] = None

    if current_view(state) is not ViewState.ANALYZING:
        return current_view(state)

    if upload is None:
        # analyzing must always end in result or error
        logger.warning("Analyzing view without a pending upload.")
        return _fail(state, FILE_READ_ERROR_MESSAGE)

    try:
        payload = read_upload(upload)
    except FileReadError:
        logger.exception("Could not read uploaded file.")
        return _fail(state, FILE_READ_ERROR_MESSAGE)

    try:
        report = analyze(payload.data, payload.mime_type)
    except AnalysisError:
        logger.exception("Analysis of '%s' failed.", payload.name)
        return _fail(state, ANALYSIS_FAILED_MESSAGE)
    except Exception:
        logger.exception("Unexpected error while analyzing '%s'.", payload.name)
        return _fail(state, UNEXPECTED_ERROR_MESSAGE)

    logger.info("Analysis of '%s' completed for %s.", payload.name, report.company_name)
    state["report"] = report
    state["error"] = None
    state["view"] = ViewState.RESULT
    return ViewState.RESULT


def reset(state: MutableMapping) -> None:
    state["view"] = ViewState.IDLE
    state["report"] = None
    state["error"] = None
    state["pending_upload"] = None
    # fresh widget key so the uploader forgets the previous file
    state["uploader_key"] = int(state.get("uploader_key", 0)) + 1

"""
Streamlit entry point for the PredictGenie dashboard.

    streamlit run predictgenie/dashboard/app.py

Application state lives in `st.session_state.analysis`: status is one of
idle / loading / success / error. Submitting queues the request and reruns,
so the submit buttons render disabled while the model call is running.
"""

from __future__ import annotations

import streamlit as st

from predictgenie.dashboard import ui_text
from predictgenie.dashboard.components.input_form import render_csv_form, render_url_form
from predictgenie.dashboard.components.results import render_results
from predictgenie.utils.logger import get_logger
from predictgenie.utils.openai_client import (
    AnalysisInProgressError,
    ExternalServiceError,
    PricingAnalysisClient,
)

logger = get_logger("dashboard_app")


def get_analysis_client() -> PricingAnalysisClient:
    """One client per browser session, so the in-flight guard is per session."""
    if "analysis_client" not in st.session_state:
        st.session_state["analysis_client"] = PricingAnalysisClient()
    return st.session_state["analysis_client"]


def _state() -> dict:
    return st.session_state.setdefault(
        "analysis", {"status": "idle", "data": None, "error": None, "pending": None}
    )


def _queue(request) -> None:
    state = _state()
    state.update(status="loading", data=None, error=None, pending=request)
    st.rerun()


def _run_pending() -> None:
    state = _state()
    request = state.get("pending")
    if request is None:
        state["status"] = "idle"
        return
    with st.spinner(ui_text.LOADING_LABEL):
        try:
            results = get_analysis_client().analyze(request)
            state.update(status="success", data=results, error=None)
        except (ExternalServiceError, AnalysisInProgressError, RuntimeError) as exc:
            logger.error("Dashboard analysis failed", extra={"error": str(exc)})
            state.update(status="error", data=None, error=str(exc))
        finally:
            state["pending"] = None
    st.rerun()


def main() -> None:
    st.set_page_config(page_title=ui_text.APP_TITLE, layout="wide")
    st.title(ui_text.APP_TITLE)
    st.caption(ui_text.APP_SUBTITLE)

    state = _state()
    is_loading = state["status"] == "loading"

    url_tab, csv_tab = st.tabs([ui_text.TAB_URL, ui_text.TAB_CSV])
    with url_tab:
        request = render_url_form(is_loading)
        if request is not None and not is_loading:
            _queue(request)
    with csv_tab:
        request = render_csv_form(is_loading)
        if request is not None and not is_loading:
            _queue(request)

    st.divider()
    if is_loading:
        _run_pending()
    elif state["status"] == "error":
        st.error(f"**{ui_text.FAILED_TITLE}**\n\n{state['error']}")
    elif state["status"] == "success" and state["data"]:
        render_results(state["data"])
    else:
        st.subheader(ui_text.WELCOME_TITLE)
        st.write(ui_text.WELCOME_BODY)


if __name__ == "__main__":
    main()

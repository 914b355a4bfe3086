"""URL and CSV input tabs.

Both render functions return an analysis request when the user submits a
valid form, and None otherwise. Validation problems are shown inline next
to the control that caused them.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from predictgenie.dashboard import ui_text
from predictgenie.utils.analysis_request import (
    BatchAnalysisRequest,
    InvalidRequestError,
    SingleAnalysisRequest,
    build_request_from_csv,
    build_single_request,
)
from predictgenie.utils.csv_parser import (
    SAMPLE_CSV_FILENAME,
    FormatError,
    decode_csv_bytes,
    parse_csv,
    sample_csv_text,
)
from predictgenie.utils.field_mapping import FieldMapping, MappingIncompleteError
from predictgenie.utils.logger import get_logger
from predictgenie.utils.normalize import NoValidRowsError

logger = get_logger("dashboard")


def _init_state() -> None:
    state = st.session_state
    state.setdefault("competitor_urls", list(ui_text.DEFAULT_COMPETITOR_URLS))
    state.setdefault("csv_table", None)
    state.setdefault("csv_error", None)
    state.setdefault("csv_upload_id", None)
    state.setdefault("field_mapping", FieldMapping())


def _clear_widget_keys(prefix: str) -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def _remove_competitor(index: int) -> None:
    urls = st.session_state.competitor_urls
    if 0 <= index < len(urls):
        urls.pop(index)
        # inputs are keyed by position, so re-seed them from the list
        _clear_widget_keys("competitor_url_")


def _set_competitor(index: int, key: str) -> None:
    st.session_state.competitor_urls[index] = st.session_state[key]


def render_url_form(is_loading: bool) -> Optional[SingleAnalysisRequest]:
    _init_state()
    user_url = st.text_input(
        "Your Product URL",
        value=ui_text.DEFAULT_USER_PRODUCT_URL,
        placeholder="https://www.yourstore.com/product",
        key="user_product_url",
    )

    st.markdown("**Competitor Product URLs**")
    for index, url in enumerate(list(st.session_state.competitor_urls)):
        key = f"competitor_url_{index}"
        col_input, col_remove = st.columns([10, 1])
        col_input.text_input(
            f"Competitor {index + 1}",
            value=url,
            key=key,
            placeholder=f"https://www.competitor{index + 1}.com/product",
            label_visibility="collapsed",
            on_change=_set_competitor,
            args=(index, key),
        )
        col_remove.button("✕", key=f"remove_competitor_{index}", on_click=_remove_competitor, args=(index,))

    if st.button("+ Add Competitor", key="add_competitor"):
        st.session_state.competitor_urls.append("")
        st.rerun()

    label = ui_text.LOADING_LABEL if is_loading else ui_text.SUBMIT_LABEL
    if not st.button(label, key="submit_url", disabled=is_loading, type="primary", use_container_width=True):
        return None
    try:
        return build_single_request(user_url, st.session_state.competitor_urls)
    except InvalidRequestError as exc:
        st.error(str(exc))
        return None


def _load_upload(uploaded) -> None:
    """Parse a newly selected file, replacing any previous table and mapping."""
    state = st.session_state
    state.csv_table = None
    state.csv_error = None
    state.field_mapping = FieldMapping()
    _clear_widget_keys("map_")
    if uploaded is None:
        return
    if not uploaded.name.lower().endswith(".csv") and "csv" not in (uploaded.type or ""):
        state.csv_error = "Invalid file type. Please upload a .csv file."
        return
    try:
        state.csv_table = parse_csv(decode_csv_bytes(uploaded.getvalue()))
        logger.info(
            "Uploaded CSV parsed",
            extra={"file_name": uploaded.name, "rows": len(state.csv_table.rows)},
        )
    except FormatError as exc:
        state.csv_error = str(exc)


def _render_mapping(mapping: FieldMapping, headers) -> None:
    with st.container(border=True):
        st.markdown(f"**{ui_text.MAPPING_TITLE}**")
        st.caption(ui_text.MAPPING_HINT)
        options = [""] + list(headers)

        def _label(header: str) -> str:
            return header or ui_text.SELECT_PLACEHOLDER

        col1, col2, col3 = st.columns(3)
        name = col1.selectbox("Product Name *", options, format_func=_label, key="map_product_name")
        price = col2.selectbox("Current Price *", options, format_func=_label, key="map_price")
        user_url = col3.selectbox("Your Product URL (Optional)", options, format_func=_label, key="map_user_url")
        mapping.set_product_name_column(name)
        mapping.set_price_column(price)
        mapping.set_user_url_column(user_url)

        st.markdown("Competitor URLs (Optional)")
        columns = st.columns(4)
        for index, header in enumerate(headers):
            columns[index % 4].checkbox(
                header,
                value=header in mapping.competitor_url_columns,
                key=f"map_competitor_{header}",
                on_change=mapping.toggle_competitor_column,
                args=(header,),
            )
        st.caption(ui_text.WEB_SEARCH_HINT)


def _show_csv_message(message: Optional[str]) -> None:
    if not message:
        return
    if message.startswith("Warning:"):
        st.warning(message)
    else:
        st.error(message)


def render_csv_form(is_loading: bool) -> Optional[BatchAnalysisRequest]:
    _init_state()
    state = st.session_state

    uploaded = st.file_uploader("Upload Products CSV", type=["csv"], key="csv_upload")
    upload_id = None if uploaded is None else (uploaded.name, uploaded.size)
    if upload_id != state.csv_upload_id:
        state.csv_upload_id = upload_id
        _load_upload(uploaded)

    table = state.csv_table
    if table is not None:
        _render_mapping(state.field_mapping, table.headers)

    st.download_button(
        "Download Sample CSV",
        data=sample_csv_text(),
        file_name=SAMPLE_CSV_FILENAME,
        mime="text/csv",
    )

    label = ui_text.LOADING_LABEL if is_loading else ui_text.SUBMIT_LABEL
    submitted = st.button(label, key="submit_csv", disabled=is_loading, type="primary", use_container_width=True)
    request = None
    if submitted:
        if uploaded is None:
            state.csv_error = ui_text.NO_FILE
        elif table is not None:
            try:
                request, result = build_request_from_csv(table, state.field_mapping)
                state.csv_error = result.warning
            except (MappingIncompleteError, NoValidRowsError, InvalidRequestError) as exc:
                state.csv_error = str(exc)
    _show_csv_message(state.csv_error)
    return request

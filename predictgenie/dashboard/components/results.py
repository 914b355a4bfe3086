"""Rendering of single-product and batch pricing results."""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from predictgenie.dashboard.formatting import format_change, format_currency, format_trend
from predictgenie.utils.analysis_result import ProductAnalysis


def competitor_frame(analysis: ProductAnalysis) -> pd.DataFrame:
    rows = [
        {
            "Competitor Product": c.product_name,
            "Price": format_currency(c.price),
            "Stock": c.stock_status or "-",
            "Trend": format_trend(c.price_trend),
            "URL": c.url,
        }
        for c in analysis.competitors
    ]
    return pd.DataFrame(rows, columns=["Competitor Product", "Price", "Stock", "Trend", "URL"])


def batch_frame(results: Sequence[ProductAnalysis]) -> pd.DataFrame:
    rows = [
        {
            "Product": item.user_product.product_name,
            "Your Price": format_currency(item.user_product.current_price),
            "Suggested Price": format_currency(item.suggested_price),
            "Change": format_change(item.price_change_percent),
        }
        for item in results
    ]
    return pd.DataFrame(rows, columns=["Product", "Your Price", "Suggested Price", "Change"])


def _render_competitors(analysis: ProductAnalysis) -> None:
    frame = competitor_frame(analysis)
    if frame.empty:
        st.info("No competitor data was returned for this product.")
        return
    st.dataframe(
        frame,
        use_container_width=True,
        hide_index=True,
        column_config={"URL": st.column_config.LinkColumn("URL")},
    )


def _render_sources(analysis: ProductAnalysis) -> None:
    if not analysis.sources:
        return
    st.markdown("**Sources**")
    for source in analysis.sources:
        st.markdown(f"- [{source.title or source.uri}]({source.uri})")


def render_single(analysis: ProductAnalysis) -> None:
    with st.container(border=True):
        st.subheader("PredictGenie Suggestion")
        st.metric(
            "Suggested Price",
            format_currency(analysis.suggested_price),
            delta=format_change(analysis.price_change_percent),
        )
        st.markdown("**Reasoning:**")
        st.write(analysis.reasoning)

    col1, col2 = st.columns([1, 2])
    with col1.container(border=True):
        st.markdown("**Your Product**")
        st.caption(analysis.user_product.product_name)
        st.metric("Current Price", format_currency(analysis.user_product.current_price))
        if analysis.user_product.url:
            st.caption(analysis.user_product.url)
    with col2.container(border=True):
        st.markdown("**Market Summary**")
        st.write(analysis.market_summary)

    st.subheader("Competitor Analysis")
    _render_competitors(analysis)
    _render_sources(analysis)


def render_batch(results: Sequence[ProductAnalysis]) -> None:
    st.subheader("Batch Analysis Results")
    st.dataframe(batch_frame(results), use_container_width=True, hide_index=True)

    for item in results:
        with st.expander(f"Details: {item.user_product.product_name}"):
            left, right = st.columns(2)
            with left:
                st.markdown("**Reasoning**")
                st.write(item.reasoning)
                st.markdown("**Market Summary**")
                st.write(item.market_summary)
            with right:
                st.markdown("**Competitors**")
                _render_competitors(item)
            _render_sources(item)


def render_results(results: Sequence[ProductAnalysis]) -> None:
    if len(results) == 1:
        render_single(results[0])
    else:
        render_batch(results)

"""Streamlit dashboard for single and batch pricing analysis."""

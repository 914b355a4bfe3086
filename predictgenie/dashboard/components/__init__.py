"""Reusable Streamlit building blocks for the dashboard pages."""

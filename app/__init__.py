"""Streamlit front end for SiteLedger."""

from .main import main

__all__ = ["main"]

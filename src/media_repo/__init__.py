"""Minimal music & video repository with API-key protected uploads."""

__version__ = "0.1.0"

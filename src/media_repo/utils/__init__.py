"""Utility helpers shared across the media repository."""

"""Saved-query catalog persistence."""

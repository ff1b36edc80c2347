"""Execution lifecycle."""

"""Execution history persistence."""

"""Shared utilities (logging setup)."""

"""Utility modules: escaping and shared constants."""

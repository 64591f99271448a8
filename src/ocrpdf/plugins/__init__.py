"""Plugins wrapping the external command-line tools."""

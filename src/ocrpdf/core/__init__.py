"""Core models, errors and process utilities for ocrpdf."""

"""Text substitution filters applied to recognized text."""

from ocrpdf.filters.rules import RuleList, build_filters, compose

__all__ = ["RuleList", "build_filters", "compose"]

"""Accessibility issue aggregator and contrast analysis engine.

Runs several accessibility audit engines against a page, merges their
findings into one deduplicated WCAG-organized report, and checks text
contrast with WCAG 2.1 ratios or APCA.
"""

__version__ = "0.1.0"

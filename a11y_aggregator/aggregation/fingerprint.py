"""Issue fingerprinting for cross-engine deduplication."""

import hashlib
import re

from ..catalog.rules import canonical_defect, defect_criterion
from ..models import AccessibilityIssue

_WHITESPACE = re.compile(r"\s+")
_COMBINATOR = re.compile(r"\s*([>+~])\s*")
_DOCUMENT_ROOT = re.compile(r"^html\s*>\s*body(\s*>\s*|$)", re.IGNORECASE)


def normalize_selector(selector: str) -> str:
    """Normalize a CSS selector so equivalent spellings compare equal.

    Whitespace is collapsed, combinators get single spaces on both sides and
    a leading ``html > body >`` chain is dropped, since some engines report
    full paths and others start below body.
    """
    normalized = _WHITESPACE.sub(" ", selector.strip())
    normalized = _COMBINATOR.sub(r" \1 ", normalized)
    normalized = _DOCUMENT_ROOT.sub("", normalized)
    return normalized.strip()


def location_key(issue: AccessibilityIssue) -> str:
    location = issue.location
    if location.selector and location.selector.strip():
        return normalize_selector(location.selector)
    if location.file:
        return f"{location.file}:{location.line if location.line is not None else ''}"
    if location.xpath:
        return location.xpath.strip()
    return ""


def defect_class(issue: AccessibilityIssue) -> str:
    return canonical_defect(issue.tool, issue.rule_id)


def fingerprint(issue: AccessibilityIssue) -> str:
    """Identity of the underlying defect, independent of the reporting engine."""
    defect = defect_class(issue)
    criterion = issue.wcag.criterion if issue.wcag else (defect_criterion(defect) or "")
    combined = "|".join([defect, location_key(issue), criterion])
    return hashlib.sha256(combined.encode()).hexdigest()[:16]

"""Deduplication, WCAG grouping and summary construction."""

from typing import Iterable, Optional, Sequence

from ..catalog.wcag import criterion_sort_key
from ..models import AccessibilityIssue, Severity, ToolSource, WCAGPrinciple
from .fingerprint import fingerprint

# Preferred source when two duplicates are equally rich
TOOL_PRIORITY: dict[ToolSource, int] = {
    ToolSource.AXE_CORE: 0,
    ToolSource.PA11Y: 1,
    ToolSource.LIGHTHOUSE: 2,
    ToolSource.CONTRAST_ANALYZER: 3,
    ToolSource.ESLINT_VUEJS_A11Y: 4,
}


def richness(issue: AccessibilityIssue) -> tuple[int, int]:
    """How much an issue tells the reader: WCAG mapping first, then extras."""
    extras = sum(
        1
        for present in (
            issue.contrast_data is not None,
            bool(issue.human_context),
            bool(issue.suggested_actions),
            bool(issue.affected_users),
        )
        if present
    )
    return (1 if issue.wcag else 0, extras)


def _is_passing_record(issue: AccessibilityIssue) -> bool:
    return issue.contrast_data is not None and issue.contrast_data.passes


def _preference_key(issue: AccessibilityIssue) -> tuple:
    # Violations always outrank passing contrast records
    has_wcag, extras = richness(issue)
    return (
        _is_passing_record(issue),
        -has_wcag,
        -extras,
        TOOL_PRIORITY.get(issue.tool, len(TOOL_PRIORITY)),
        issue.id,
    )


def deduplicate(issues: Iterable[AccessibilityIssue]) -> list[AccessibilityIssue]:
    """Collapse issues that share a fingerprint into their richest member.

    An actual violation is always kept over a passing contrast record.
    Survivors keep the relative order they had in the input.
    """
    issues = list(issues)
    best: dict[str, tuple[int, AccessibilityIssue]] = {}

    for index, issue in enumerate(issues):
        key = fingerprint(issue)
        current = best.get(key)
        if current is None or _preference_key(issue) < _preference_key(current[1]):
            best[key] = (index, issue)

    kept = {index for index, _ in best.values()}
    return [issue for index, issue in enumerate(issues) if index in kept]


def group_by_wcag(issues: Iterable[AccessibilityIssue]) -> dict[str, list[AccessibilityIssue]]:
    grouped: dict[str, list[AccessibilityIssue]] = {}
    for issue in issues:
        if issue.wcag:
            grouped.setdefault(issue.wcag.criterion, []).append(issue)
    return {key: grouped[key] for key in sorted(grouped, key=criterion_sort_key)}


def build_summary(
    issues: Sequence[AccessibilityIssue],
    tools: Optional[Iterable[ToolSource]] = None,
) -> dict:
    """Counts for a combined result.

    ``byTool`` lists every requested tool even when it reported nothing.
    ``byTextSize`` only appears when some issue carries contrast data.
    """
    by_severity = {s.value: 0 for s in Severity}
    by_principle = {p.value: 0 for p in WCAGPrinciple}
    by_tool = {tool.value: 0 for tool in tools or ()}
    by_text_size = {"normalText": 0, "largeText": 0}
    has_contrast = False

    for issue in issues:
        by_severity[issue.severity.value] += 1
        if issue.wcag:
            by_principle[issue.wcag.principle.value] += 1
        by_tool[issue.tool.value] = by_tool.get(issue.tool.value, 0) + 1
        if issue.contrast_data:
            has_contrast = True
            by_text_size["largeText" if issue.contrast_data.is_large_text else "normalText"] += 1

    summary = {
        "total": len(issues),
        "bySeverity": by_severity,
        "byPrinciple": by_principle,
        "byTool": by_tool,
    }
    if has_contrast:
        summary["byTextSize"] = by_text_size
    return summary

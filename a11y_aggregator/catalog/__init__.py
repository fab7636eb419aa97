"""Static reference data: WCAG criteria, Lighthouse audits, rule equivalence."""

from .rules import DEFECT_CLASSES, RULE_EQUIVALENCE, DefectClass, canonical_defect, defect_criterion, normalize_rule_id
from .wcag import (
    LIGHTHOUSE_AUDIT_WCAG_MAP,
    WCAG_CRITERIA,
    WCAGCriterion,
    criterion_sort_key,
    get_criteria_by_level,
    get_criteria_by_principle,
    get_criterion,
    reference_for,
    reference_for_lighthouse_audit,
)

__all__ = [
    "DEFECT_CLASSES",
    "RULE_EQUIVALENCE",
    "DefectClass",
    "canonical_defect",
    "defect_criterion",
    "normalize_rule_id",
    "LIGHTHOUSE_AUDIT_WCAG_MAP",
    "WCAG_CRITERIA",
    "WCAGCriterion",
    "criterion_sort_key",
    "get_criteria_by_level",
    "get_criteria_by_principle",
    "get_criterion",
    "reference_for",
    "reference_for_lighthouse_audit",
]

"""WCAG 2.1 success criteria and the Lighthouse audit-to-criterion map.

Read-only reference data. Engines use it to attach a ``WCAGReference`` to
issues that arrive without one.
"""

from dataclasses import dataclass
from typing import Optional

from ..models import WCAGLevel, WCAGPrinciple, WCAGReference


@dataclass(frozen=True)
class WCAGCriterion:
    """A WCAG success criterion."""
    id: str
    title: str
    level: WCAGLevel
    principle: WCAGPrinciple

    def to_reference(self) -> WCAGReference:
        return WCAGReference(criterion=self.id, level=self.level, principle=self.principle, version="2.1")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "level": self.level.value,
            "principle": self.principle.value,
        }


_P = WCAGPrinciple.PERCEIVABLE
_O = WCAGPrinciple.OPERABLE
_U = WCAGPrinciple.UNDERSTANDABLE
_R = WCAGPrinciple.ROBUST
_A, _AA, _AAA = WCAGLevel.A, WCAGLevel.AA, WCAGLevel.AAA

_CRITERIA_ROWS = [
    ("1.1.1", "Non-text Content", _A, _P),
    ("1.2.1", "Audio-only and Video-only (Prerecorded)", _A, _P),
    ("1.2.2", "Captions (Prerecorded)", _A, _P),
    ("1.2.3", "Audio Description or Media Alternative (Prerecorded)", _A, _P),
    ("1.2.4", "Captions (Live)", _AA, _P),
    ("1.2.5", "Audio Description (Prerecorded)", _AA, _P),
    ("1.3.1", "Info and Relationships", _A, _P),
    ("1.3.2", "Meaningful Sequence", _A, _P),
    ("1.3.3", "Sensory Characteristics", _A, _P),
    ("1.3.4", "Orientation", _AA, _P),
    ("1.3.5", "Identify Input Purpose", _AA, _P),
    ("1.4.1", "Use of Color", _A, _P),
    ("1.4.2", "Audio Control", _A, _P),
    ("1.4.3", "Contrast (Minimum)", _AA, _P),
    ("1.4.4", "Resize Text", _AA, _P),
    ("1.4.5", "Images of Text", _AA, _P),
    ("1.4.6", "Contrast (Enhanced)", _AAA, _P),
    ("1.4.10", "Reflow", _AA, _P),
    ("1.4.11", "Non-text Contrast", _AA, _P),
    ("1.4.12", "Text Spacing", _AA, _P),
    ("1.4.13", "Content on Hover or Focus", _AA, _P),
    ("2.1.1", "Keyboard", _A, _O),
    ("2.1.2", "No Keyboard Trap", _A, _O),
    ("2.1.4", "Character Key Shortcuts", _A, _O),
    ("2.2.1", "Timing Adjustable", _A, _O),
    ("2.2.2", "Pause, Stop, Hide", _A, _O),
    ("2.3.1", "Three Flashes or Below Threshold", _A, _O),
    ("2.4.1", "Bypass Blocks", _A, _O),
    ("2.4.2", "Page Titled", _A, _O),
    ("2.4.3", "Focus Order", _A, _O),
    ("2.4.4", "Link Purpose (In Context)", _A, _O),
    ("2.4.5", "Multiple Ways", _AA, _O),
    ("2.4.6", "Headings and Labels", _AA, _O),
    ("2.4.7", "Focus Visible", _AA, _O),
    ("2.5.1", "Pointer Gestures", _A, _O),
    ("2.5.2", "Pointer Cancellation", _A, _O),
    ("2.5.3", "Label in Name", _A, _O),
    ("2.5.4", "Motion Actuation", _A, _O),
    ("2.5.5", "Target Size", _AAA, _O),
    ("3.1.1", "Language of Page", _A, _U),
    ("3.1.2", "Language of Parts", _AA, _U),
    ("3.2.1", "On Focus", _A, _U),
    ("3.2.2", "On Input", _A, _U),
    ("3.2.3", "Consistent Navigation", _AA, _U),
    ("3.2.4", "Consistent Identification", _AA, _U),
    ("3.3.1", "Error Identification", _A, _U),
    ("3.3.2", "Labels or Instructions", _A, _U),
    ("3.3.3", "Error Suggestion", _AA, _U),
    ("3.3.4", "Error Prevention (Legal, Financial, Data)", _AA, _U),
    ("4.1.1", "Parsing", _A, _R),
    ("4.1.2", "Name, Role, Value", _A, _R),
    ("4.1.3", "Status Messages", _AA, _R),
]

WCAG_CRITERIA: dict[str, WCAGCriterion] = {
    row[0]: WCAGCriterion(*row) for row in _CRITERIA_ROWS
}

# Lighthouse accessibility audits (axe-core backed) and the criterion each checks
LIGHTHOUSE_AUDIT_WCAG_MAP: dict[str, str] = {
    "color-contrast": "1.4.3",
    "image-alt": "1.1.1",
    "input-image-alt": "1.1.1",
    "area-alt": "1.1.1",
    "object-alt": "1.1.1",
    "document-title": "2.4.2",
    "html-has-lang": "3.1.1",
    "html-lang-valid": "3.1.1",
    "valid-lang": "3.1.2",
    "meta-viewport": "1.4.4",
    "meta-refresh": "2.2.1",
    "bypass": "2.4.1",
    "link-name": "2.4.4",
    "button-name": "4.1.2",
    "frame-title": "4.1.2",
    "label": "1.3.1",
    "form-field-multiple-labels": "3.3.2",
    "list": "1.3.1",
    "listitem": "1.3.1",
    "definition-list": "1.3.1",
    "dlitem": "1.3.1",
    "td-headers-attr": "1.3.1",
    "th-has-data-cells": "1.3.1",
    "heading-order": "1.3.1",
    "tabindex": "2.4.3",
    "accesskeys": "2.1.1",
    "duplicate-id-active": "4.1.1",
    "duplicate-id-aria": "4.1.1",
    "aria-allowed-attr": "4.1.2",
    "aria-required-attr": "4.1.2",
    "aria-required-children": "1.3.1",
    "aria-required-parent": "1.3.1",
    "aria-roles": "4.1.2",
    "aria-valid-attr": "4.1.2",
    "aria-valid-attr-value": "4.1.2",
    "aria-hidden-body": "4.1.2",
    "aria-hidden-focus": "4.1.2",
    "font-size": "1.4.4",
    "tap-targets": "2.5.5",
    "video-caption": "1.2.2",
    "video-description": "1.2.5",
}


def get_criterion(criterion_id: str) -> Optional[WCAGCriterion]:
    return WCAG_CRITERIA.get(criterion_id)


def get_criteria_by_level(level: WCAGLevel) -> list[WCAGCriterion]:
    return [c for c in WCAG_CRITERIA.values() if c.level == level]


def get_criteria_by_principle(principle: WCAGPrinciple) -> list[WCAGCriterion]:
    return [c for c in WCAG_CRITERIA.values() if c.principle == principle]


def reference_for(criterion_id: str | None) -> Optional[WCAGReference]:
    """Build a WCAG reference for a known criterion id."""
    if not criterion_id:
        return None
    criterion = WCAG_CRITERIA.get(criterion_id)
    return criterion.to_reference() if criterion else None


def reference_for_lighthouse_audit(audit_id: str) -> Optional[WCAGReference]:
    return reference_for(LIGHTHOUSE_AUDIT_WCAG_MAP.get(audit_id))


def criterion_sort_key(criterion_id: str) -> tuple:
    """Order "1.4.10" after "1.4.3"; non-numeric ids sort last."""
    try:
        return (0, tuple(int(part) for part in criterion_id.split(".")))
    except ValueError:
        return (1, criterion_id)

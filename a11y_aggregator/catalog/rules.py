"""Cross-engine rule equivalence.

Each engine names the same defect differently: axe-core says ``image-alt``,
pa11y says ``WCAG2AA.Principle1.Guideline1_1.1_1_1.H37``, eslint says
``vuejs-accessibility/alt-text``. This table maps ``(tool, rule)`` to a
shared defect class so the fingerprint can recognize them as one issue.
"""

from dataclasses import dataclass
from typing import Optional

from ..models import ToolSource


@dataclass(frozen=True)
class DefectClass:
    """A tool-independent kind of accessibility defect."""
    name: str
    criterion: Optional[str] = None  # default WCAG criterion for the class


DEFECT_CLASSES: dict[str, DefectClass] = {
    d.name: d
    for d in [
        DefectClass("image-alt", "1.1.1"),
        DefectClass("input-image-alt", "1.1.1"),
        DefectClass("area-alt", "1.1.1"),
        DefectClass("object-alt", "1.1.1"),
        DefectClass("video-caption", "1.2.2"),
        DefectClass("form-label", "1.3.1"),
        DefectClass("empty-heading", "1.3.1"),
        DefectClass("heading-order", "1.3.1"),
        DefectClass("list-structure", "1.3.1"),
        DefectClass("table-headers", "1.3.1"),
        DefectClass("color-contrast", "1.4.3"),
        DefectClass("color-contrast-enhanced", "1.4.6"),
        DefectClass("meta-viewport", "1.4.4"),
        DefectClass("keyboard-access", "2.1.1"),
        DefectClass("access-key", "2.1.1"),
        DefectClass("meta-refresh", "2.2.1"),
        DefectClass("moving-content", "2.2.2"),
        DefectClass("bypass-blocks", "2.4.1"),
        DefectClass("document-title", "2.4.2"),
        DefectClass("positive-tabindex", "2.4.3"),
        DefectClass("link-name", "2.4.4"),
        DefectClass("html-lang", "3.1.1"),
        DefectClass("html-lang-valid", "3.1.1"),
        DefectClass("valid-lang", "3.1.2"),
        DefectClass("duplicate-id", "4.1.1"),
        DefectClass("button-name", "4.1.2"),
        DefectClass("frame-title", "4.1.2"),
        DefectClass("aria-valid-attr", "4.1.2"),
        DefectClass("aria-roles", "4.1.2"),
        DefectClass("aria-required-attr", "4.1.2"),
        DefectClass("aria-hidden-focus", "4.1.2"),
    ]
}

# axe-core rule ids; Lighthouse runs axe-core and reuses the same ids
_AXE_RULES = {
    "image-alt": "image-alt",
    "role-img-alt": "image-alt",
    "svg-img-alt": "image-alt",
    "input-image-alt": "input-image-alt",
    "area-alt": "area-alt",
    "object-alt": "object-alt",
    "video-caption": "video-caption",
    "label": "form-label",
    "select-name": "form-label",
    "empty-heading": "empty-heading",
    "heading-order": "heading-order",
    "list": "list-structure",
    "listitem": "list-structure",
    "definition-list": "list-structure",
    "dlitem": "list-structure",
    "td-headers-attr": "table-headers",
    "th-has-data-cells": "table-headers",
    "color-contrast": "color-contrast",
    "color-contrast-enhanced": "color-contrast-enhanced",
    "meta-viewport": "meta-viewport",
    "accesskeys": "access-key",
    "meta-refresh": "meta-refresh",
    "blink": "moving-content",
    "marquee": "moving-content",
    "bypass": "bypass-blocks",
    "document-title": "document-title",
    "tabindex": "positive-tabindex",
    "link-name": "link-name",
    "html-has-lang": "html-lang",
    "html-lang-valid": "html-lang-valid",
    "valid-lang": "valid-lang",
    "duplicate-id": "duplicate-id",
    "duplicate-id-active": "duplicate-id",
    "duplicate-id-aria": "duplicate-id",
    "button-name": "button-name",
    "frame-title": "frame-title",
    "aria-valid-attr": "aria-valid-attr",
    "aria-valid-attr-value": "aria-valid-attr",
    "aria-roles": "aria-roles",
    "aria-required-attr": "aria-required-attr",
    "aria-hidden-focus": "aria-hidden-focus",
}

# HTML_CodeSniffer technique suffixes as reported by pa11y
_PA11Y_TECHNIQUES = {
    "H37": "image-alt",
    "H36": "input-image-alt",
    "H24": "area-alt",
    "H53": "object-alt",
    "H30.2": "link-name",
    "H91.A.NoContent": "link-name",
    "H91.A.EmptyNoId": "link-name",
    "H91.A.Empty": "link-name",
    "H91.Button.Name": "button-name",
    "H91.InputText.Name": "form-label",
    "H91.InputEmail.Name": "form-label",
    "H91.InputPassword.Name": "form-label",
    "H91.InputCheckbox.Name": "form-label",
    "H91.InputRadio.Name": "form-label",
    "H91.Select.Name": "form-label",
    "H91.Textarea.Name": "form-label",
    "H44.NonExistent": "form-label",
    "H42.2": "empty-heading",
    "G141": "heading-order",
    "H48": "list-structure",
    "H43": "table-headers",
    "G18": "color-contrast",
    "G145": "color-contrast",
    "G17": "color-contrast-enhanced",
    "G18.Fail": "color-contrast",
    "G145.Fail": "color-contrast",
    "G17.Fail": "color-contrast-enhanced",
    "H25.1.NoTitleEl": "document-title",
    "H25.1.EmptyTitle": "document-title",
    "H57.2": "html-lang",
    "H57.3.Lang": "html-lang-valid",
    "H58.1.Lang": "valid-lang",
    "F77": "duplicate-id",
    "H64.1": "frame-title",
    "G1,G123,G124": "bypass-blocks",
    "F41.2": "meta-refresh",
}

# eslint-plugin-vuejs-accessibility rule names (plugin prefix removed)
_ESLINT_RULES = {
    "alt-text": "image-alt",
    "anchor-has-content": "link-name",
    "form-control-has-label": "form-label",
    "label-has-for": "form-label",
    "heading-has-content": "empty-heading",
    "iframe-has-title": "frame-title",
    "media-has-caption": "video-caption",
    "tabindex-no-positive": "positive-tabindex",
    "aria-props": "aria-valid-attr",
    "aria-role": "aria-roles",
    "role-has-required-aria-props": "aria-required-attr",
    "click-events-have-key-events": "keyboard-access",
    "mouse-events-have-key-events": "keyboard-access",
    "no-access-key": "access-key",
    "no-distracting-elements": "moving-content",
}

RULE_EQUIVALENCE: dict[ToolSource, dict[str, str]] = {
    ToolSource.AXE_CORE: _AXE_RULES,
    ToolSource.LIGHTHOUSE: _AXE_RULES,
    ToolSource.CONTRAST_ANALYZER: {
        "color-contrast": "color-contrast",
        "color-contrast-enhanced": "color-contrast-enhanced",
    },
    ToolSource.PA11Y: _PA11Y_TECHNIQUES,
    ToolSource.ESLINT_VUEJS_A11Y: _ESLINT_RULES,
}


def normalize_rule_id(tool: ToolSource, rule_id: str) -> str:
    """Reduce an engine-specific rule id to the key used in its table.

    pa11y codes keep only the technique part after the criterion segment;
    eslint ids drop their plugin prefix.
    """
    rule = rule_id.strip()
    if tool == ToolSource.PA11Y:
        parts = rule.split(".")
        if parts[0].upper().startswith("WCAG2") and len(parts) > 4:
            return ".".join(parts[4:])
        return rule
    if tool == ToolSource.ESLINT_VUEJS_A11Y:
        return rule.rsplit("/", 1)[-1].lower()
    return rule.lower()


def canonical_defect(tool: ToolSource, rule_id: str) -> str:
    """Defect class name for an engine rule.

    pa11y techniques are matched longest-prefix first (``G18.Fail`` then
    ``G18``). Rules missing from the table fall back to their normalized id.
    """
    key = normalize_rule_id(tool, rule_id)
    table = RULE_EQUIVALENCE.get(tool, {})

    if tool == ToolSource.PA11Y:
        parts = key.split(".")
        while parts:
            candidate = ".".join(parts)
            if candidate in table:
                return table[candidate]
            parts.pop()
        return key.lower()

    return table.get(key, key)


def defect_criterion(defect_name: str) -> Optional[str]:
    defect = DEFECT_CLASSES.get(defect_name)
    return defect.criterion if defect else None

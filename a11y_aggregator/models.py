"""Core data model shared by engines, the contrast analyzer and the aggregator.

Issues are created once per engine run and never mutated afterwards, so every
model here is a frozen dataclass. ``to_dict``/``from_dict`` speak the camelCase
JSON the audit engines emit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Iterable, Optional


class ToolSource(str, Enum):
    """Audit engines that can contribute issues."""
    AXE_CORE = "axe-core"
    PA11Y = "pa11y"
    LIGHTHOUSE = "lighthouse"
    CONTRAST_ANALYZER = "contrast-analyzer"
    ESLINT_VUEJS_A11Y = "eslint-vuejs-a11y"


class Severity(str, Enum):
    """Accessibility issue impact levels."""
    CRITICAL = "critical"    # Blocks access entirely
    SERIOUS = "serious"      # Causes major difficulty
    MODERATE = "moderate"    # Causes some difficulty
    MINOR = "minor"          # Causes minor inconvenience


class WCAGLevel(str, Enum):
    """WCAG conformance levels."""
    A = "A"
    AA = "AA"
    AAA = "AAA"


class WCAGPrinciple(str, Enum):
    """WCAG principles (POUR)."""
    PERCEIVABLE = "perceivable"
    OPERABLE = "operable"
    UNDERSTANDABLE = "understandable"
    ROBUST = "robust"


class ContrastAlgorithm(str, Enum):
    """Contrast metrics the contrast engine can evaluate."""
    WCAG21 = "WCAG21"
    APCA = "APCA"


class TargetType(str, Enum):
    """What an engine is pointed at."""
    URL = "url"
    HTML = "html"


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class WCAGReference:
    """Success criterion an issue violates."""
    criterion: str  # e.g., "1.1.1", "1.4.3"
    level: WCAGLevel
    principle: WCAGPrinciple
    version: Optional[str] = None

    def to_dict(self) -> dict:
        return _drop_none({
            "criterion": self.criterion,
            "level": self.level.value,
            "principle": self.principle.value,
            "version": self.version,
        })

    @classmethod
    def from_dict(cls, data: dict) -> WCAGReference:
        return cls(
            criterion=str(data["criterion"]),
            level=WCAGLevel(data["level"]),
            principle=WCAGPrinciple(data["principle"]),
            version=data.get("version"),
        )


@dataclass(frozen=True)
class IssueLocation:
    """Where an engine found the issue."""
    selector: Optional[str] = None
    xpath: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    snippet: Optional[str] = None

    def to_dict(self) -> dict:
        return _drop_none({
            "selector": self.selector,
            "xpath": self.xpath,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "snippet": self.snippet,
        })

    @classmethod
    def from_dict(cls, data: dict | None) -> IssueLocation:
        data = data or {}
        return cls(
            selector=data.get("selector"),
            xpath=data.get("xpath"),
            file=data.get("file"),
            line=data.get("line"),
            column=data.get("column"),
            snippet=data.get("snippet"),
        )


@dataclass(frozen=True)
class SuggestedFix:
    """A compliant replacement foreground and the contrast it achieves."""
    foreground: str
    value: float


@dataclass(frozen=True)
class ContrastData:
    """Contrast measurements attached to a contrast-bearing issue.

    ``current``/``required`` hold a WCAG ratio or an APCA Lc depending on
    ``algorithm``; serialization picks the matching key names.
    """
    foreground: str
    background: str
    current: float
    required: float
    is_large_text: bool
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    suggested_fix: Optional[SuggestedFix] = None
    algorithm: ContrastAlgorithm = ContrastAlgorithm.WCAG21

    @property
    def passes(self) -> bool:
        return abs(self.current) >= self.required

    def to_dict(self) -> dict:
        suffix = "Lc" if self.algorithm == ContrastAlgorithm.APCA else "Ratio"
        data = {
            "foreground": self.foreground,
            "background": self.background,
            f"current{suffix}": self.current,
            f"required{suffix}": self.required,
            "isLargeText": self.is_large_text,
            "fontSize": self.font_size,
            "fontWeight": self.font_weight,
        }
        if self.suggested_fix:
            data["suggestedFix"] = {
                "foreground": self.suggested_fix.foreground,
                f"new{suffix}": self.suggested_fix.value,
            }
        return _drop_none(data)

    @classmethod
    def from_dict(cls, data: dict) -> ContrastData:
        apca = "currentLc" in data
        suffix = "Lc" if apca else "Ratio"
        fix = data.get("suggestedFix")
        return cls(
            foreground=data["foreground"],
            background=data["background"],
            current=float(data[f"current{suffix}"]),
            required=float(data[f"required{suffix}"]),
            is_large_text=bool(data.get("isLargeText", False)),
            font_size=data.get("fontSize"),
            font_weight=data.get("fontWeight"),
            suggested_fix=SuggestedFix(fix["foreground"], float(fix[f"new{suffix}"])) if fix else None,
            algorithm=ContrastAlgorithm.APCA if apca else ContrastAlgorithm.WCAG21,
        )


@dataclass(frozen=True)
class AccessibilityIssue:
    """An accessibility violation reported by one engine.

    ``id`` is only unique within the reporting engine; cross-engine identity
    is the fingerprint computed by the aggregator.
    """
    id: str
    tool: ToolSource
    rule_id: str
    severity: Severity
    location: IssueLocation
    message: str
    wcag: Optional[WCAGReference] = None
    contrast_data: Optional[ContrastData] = None
    human_context: Optional[str] = None
    suggested_actions: tuple[str, ...] = ()
    affected_users: tuple[str, ...] = ()  # ("blind", "low-vision", ...)
    confidence: Optional[float] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "tool": self.tool.value,
            "ruleId": self.rule_id,
            "severity": self.severity.value,
            "wcag": self.wcag.to_dict() if self.wcag else None,
            "location": self.location.to_dict(),
            "message": self.message,
            "contrastData": self.contrast_data.to_dict() if self.contrast_data else None,
            "humanContext": self.human_context,
            "suggestedActions": list(self.suggested_actions) or None,
            "affectedUsers": list(self.affected_users) or None,
            "confidence": self.confidence,
        }
        return _drop_none(data)

    @classmethod
    def from_dict(cls, data: dict, tool: ToolSource | None = None) -> AccessibilityIssue:
        return cls(
            id=str(data["id"]),
            tool=ToolSource(data.get("tool") or tool),
            rule_id=str(data.get("ruleId") or data["id"]),
            severity=Severity(data["severity"]),
            location=IssueLocation.from_dict(data.get("location")),
            message=data.get("message", ""),
            wcag=WCAGReference.from_dict(data["wcag"]) if data.get("wcag") else None,
            contrast_data=ContrastData.from_dict(data["contrastData"]) if data.get("contrastData") else None,
            human_context=data.get("humanContext"),
            suggested_actions=tuple(data.get("suggestedActions") or ()),
            affected_users=tuple(data.get("affectedUsers") or ()),
            confidence=data.get("confidence"),
        )


@dataclass(frozen=True)
class Viewport:
    width: int = 1280
    height: int = 720


@dataclass(frozen=True)
class AnalysisTarget:
    """A page (by URL) or an HTML document handed to the engines."""
    type: TargetType
    value: str
    wait_for_selector: Optional[str] = None
    timeout_ms: Optional[int] = None
    viewport: Optional[Viewport] = None

    @property
    def is_url(self) -> bool:
        return self.type == TargetType.URL

    def to_dict(self) -> dict:
        return _drop_none({
            "type": self.type.value,
            "value": self.value,
            "waitForSelector": self.wait_for_selector,
            "timeout": self.timeout_ms,
            "viewport": {"width": self.viewport.width, "height": self.viewport.height} if self.viewport else None,
        })


@dataclass(frozen=True)
class AnalysisOptions:
    """Options resolved once per aggregation and passed to every engine."""
    wcag_level: WCAGLevel = WCAGLevel.AA
    rules: Optional[tuple[str, ...]] = None
    exclude_rules: Optional[tuple[str, ...]] = None
    include_warnings: bool = False
    ignore_https_errors: bool = False
    contrast_algorithm: ContrastAlgorithm = ContrastAlgorithm.WCAG21
    suggest_fixes: bool = True
    include_passing_elements: bool = False

    def to_dict(self) -> dict:
        return _drop_none({
            "wcagLevel": self.wcag_level.value,
            "rules": list(self.rules) if self.rules else None,
            "excludeRules": list(self.exclude_rules) if self.exclude_rules else None,
            "includeWarnings": self.include_warnings,
            "ignoreHTTPSErrors": self.ignore_https_errors,
        })


def summarize(issues: Iterable[AccessibilityIssue]) -> dict:
    """Count issues by severity and by WCAG principle."""
    by_severity = {s.value: 0 for s in Severity}
    by_principle = {p.value: 0 for p in WCAGPrinciple}
    total = 0
    for issue in issues:
        total += 1
        by_severity[issue.severity.value] += 1
        if issue.wcag:
            by_principle[issue.wcag.principle.value] += 1
    return {"total": total, "bySeverity": by_severity, "byPrinciple": by_principle}


@dataclass(frozen=True)
class AnalysisResult:
    """One engine's envelope around its issue list."""
    success: bool
    tool: ToolSource
    target: str
    issues: tuple[AccessibilityIssue, ...] = ()
    summary: dict = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_now_iso)
    duration_ms: int = 0
    metadata: Optional[dict] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return _drop_none({
            "success": self.success,
            "timestamp": self.timestamp,
            "duration": self.duration_ms,
            "target": self.target,
            "tool": self.tool.value,
            "issues": [i.to_dict() for i in self.issues],
            "summary": self.summary or summarize(self.issues),
            "metadata": self.metadata,
            "error": self.error,
        })

    @classmethod
    def from_dict(cls, data: dict, tool: ToolSource | None = None) -> AnalysisResult:
        source = ToolSource(data.get("tool") or tool)
        issues = tuple(AccessibilityIssue.from_dict(i, tool=source) for i in data.get("issues", []))
        return cls(
            success=bool(data.get("success", True)),
            tool=source,
            target=data.get("target", ""),
            issues=issues,
            summary=data.get("summary") or summarize(issues),
            timestamp=data.get("timestamp") or utc_now_iso(),
            duration_ms=int(data.get("duration") or 0),
            metadata=data.get("metadata"),
            error=data.get("error"),
        )


@dataclass
class CombinedAnalysisResult:
    """Merged output of one aggregation call."""
    success: bool
    target: str
    tools_used: list[ToolSource]
    issues: list[AccessibilityIssue]
    issues_by_wcag: dict[str, list[AccessibilityIssue]]
    summary: dict
    individual_results: list[AnalysisResult]
    deduplicated_count: int = 0
    timestamp: str = field(default_factory=utc_now_iso)
    duration_ms: int = 0
    error: Optional[str] = None

    @property
    def original_count(self) -> int:
        return sum(len(r.issues) for r in self.individual_results)

    def to_dict(self) -> dict:
        return _drop_none({
            "success": self.success,
            "timestamp": self.timestamp,
            "duration": self.duration_ms,
            "target": self.target,
            "toolsUsed": [t.value for t in self.tools_used],
            "issues": [i.to_dict() for i in self.issues],
            "issuesByWCAG": {
                criterion: [i.to_dict() for i in grouped]
                for criterion, grouped in self.issues_by_wcag.items()
            },
            "summary": self.summary,
            "individualResults": [r.to_dict() for r in self.individual_results],
            "deduplicatedCount": self.deduplicated_count,
            "error": self.error,
        })

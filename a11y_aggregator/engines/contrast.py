"""Contrast analyzer engine.

Turns computed-style color samples into contrast issues. The samples come
from a ``ColorSampler`` (normally the audit worker's ``/styles`` endpoint),
so this engine never touches a browser itself.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from ..contrast import (
    RGB,
    WCAG_THRESHOLDS,
    apca_contrast,
    contrast_ratio,
    find_fixed_color,
    find_fixed_color_for_apca,
    is_large_text,
    meets_apca,
    parse_color,
    required_apca_lightness,
    required_ratio,
    rgb_to_hex,
)
from ..models import (
    AccessibilityIssue,
    AnalysisOptions,
    AnalysisResult,
    AnalysisTarget,
    ContrastAlgorithm,
    ContrastData,
    IssueLocation,
    Severity,
    SuggestedFix,
    ToolSource,
    WCAGLevel,
    WCAGPrinciple,
    WCAGReference,
    summarize,
)
from .base import AuditEngine

AFFECTED_USERS = ("low-vision", "color-blind", "elderly")

# Passing samples use their own rule so they never merge with a violation
PASSING_RULE_ID = "color-contrast-pass"


@dataclass(frozen=True)
class ColorSample:
    """Computed text and background colors of one rendered element."""
    selector: str
    foreground: str
    background: str
    font_size: float = 16.0
    font_weight: int = 400
    snippet: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ColorSample":
        return cls(
            selector=data["selector"],
            foreground=data["foreground"],
            background=data["background"],
            font_size=float(data.get("fontSize") or 16.0),
            font_weight=int(data.get("fontWeight") or 400),
            snippet=data.get("snippet"),
        )


class ColorSampler(Protocol):
    async def fetch_color_samples(self, target: AnalysisTarget) -> list[ColorSample]: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class _Measurement:
    current: float
    required: float
    passes: bool
    relaxed_passes: bool


class ContrastAuditEngine(AuditEngine):
    """Evaluates text contrast with the WCAG 2.1 ratio or APCA."""

    tool = ToolSource.CONTRAST_ANALYZER

    def __init__(
        self,
        sampler: ColorSampler,
        ignore_https_errors: bool = False,
        timeout_seconds: float = 30.0,
        algorithm: ContrastAlgorithm = ContrastAlgorithm.WCAG21,
        suggest_fixes: bool = True,
        include_passing_elements: bool = False,
    ):
        super().__init__(ignore_https_errors=ignore_https_errors, timeout_seconds=timeout_seconds)
        self.sampler = sampler
        self.algorithm = algorithm
        self.suggest_fixes = suggest_fixes
        self.include_passing_elements = include_passing_elements

    def default_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            ignore_https_errors=self.ignore_https_errors,
            contrast_algorithm=self.algorithm,
            suggest_fixes=self.suggest_fixes,
            include_passing_elements=self.include_passing_elements,
        )

    async def dispose(self) -> None:
        await self.sampler.close()

    async def _run(self, target: AnalysisTarget, options: AnalysisOptions) -> AnalysisResult:
        samples = await self.sampler.fetch_color_samples(target)
        return self.evaluate_samples(samples, target, options)

    def evaluate_samples(
        self,
        samples: list[ColorSample],
        target: AnalysisTarget,
        options: Optional[AnalysisOptions] = None,
    ) -> AnalysisResult:
        """Build the engine result for a batch of color samples."""
        options = options or self.default_options()
        algorithm = options.contrast_algorithm
        suggest = options.suggest_fixes
        include_passing = options.include_passing_elements

        issues: list[AccessibilityIssue] = []
        passing = failing = skipped = 0
        by_text_size = {"normalText": 0, "largeText": 0}

        for index, sample in enumerate(samples):
            fg = parse_color(sample.foreground)
            bg = parse_color(sample.background)
            if fg is None or bg is None:
                skipped += 1
                self.log.debug("Skipping unparseable color sample", selector=sample.selector)
                continue

            large = is_large_text(sample.font_size, sample.font_weight)
            by_text_size["largeText" if large else "normalText"] += 1
            measurement = self._measure(fg, bg, large, options.wcag_level, algorithm)

            if measurement.passes:
                passing += 1
                if not include_passing:
                    continue
            else:
                failing += 1

            fix = None
            if suggest and not measurement.passes:
                fix = self._suggest_fix(fg, bg, measurement.required, algorithm)

            issues.append(self._build_issue(
                index, sample, large, measurement, fix, options.wcag_level, algorithm,
            ))

        self.log.debug(
            "Contrast samples evaluated",
            analyzed=passing + failing,
            failing=failing,
            skipped=skipped,
        )

        summary = summarize(issues)
        summary.update({
            "total": passing + failing,
            "passing": passing,
            "failing": failing,
            "byTextSize": by_text_size,
        })
        return AnalysisResult(
            success=True,
            tool=self.tool,
            target=target.value if target.is_url else "html",
            issues=tuple(issues),
            summary=summary,
            metadata={
                "algorithm": algorithm.value,
                "wcagLevel": options.wcag_level.value,
                "analyzedSamples": passing + failing,
                "skippedSamples": skipped,
            },
        )

    def _measure(
        self,
        fg: RGB,
        bg: RGB,
        large: bool,
        level: WCAGLevel,
        algorithm: ContrastAlgorithm,
    ) -> _Measurement:
        if algorithm == ContrastAlgorithm.APCA:
            lc = apca_contrast(fg, bg)
            return _Measurement(
                current=round(lc, 1),
                required=required_apca_lightness(large),
                passes=meets_apca(lc, "large" if large else "body"),
                relaxed_passes=meets_apca(lc, "nonText"),
            )

        ratio = contrast_ratio(fg, bg)
        required = required_ratio(level, large)
        return _Measurement(
            current=round(ratio, 2),
            required=required,
            passes=ratio >= required,
            relaxed_passes=ratio >= WCAG_THRESHOLDS["AA_LARGE"],
        )

    def _suggest_fix(self, fg: RGB, bg: RGB, required: float, algorithm: ContrastAlgorithm) -> SuggestedFix:
        if algorithm == ContrastAlgorithm.APCA:
            found = find_fixed_color_for_apca(fg, bg, required)
            return SuggestedFix(foreground=rgb_to_hex(found.color), value=round(found.value, 1))
        found = find_fixed_color(fg, bg, required)
        return SuggestedFix(foreground=rgb_to_hex(found.color), value=round(found.value, 2))

    def _build_issue(
        self,
        index: int,
        sample: ColorSample,
        large: bool,
        measurement: _Measurement,
        fix: Optional[SuggestedFix],
        level: WCAGLevel,
        algorithm: ContrastAlgorithm,
    ) -> AccessibilityIssue:
        enhanced = level == WCAGLevel.AAA
        if algorithm == ContrastAlgorithm.APCA:
            current, required = f"Lc {measurement.current}", f"Lc {measurement.required}"
        else:
            current, required = f"{measurement.current}:1", f"{measurement.required}:1"
        text_kind = "large text" if large else "normal text"

        if measurement.passes:
            severity = Severity.MINOR
            message = f"Contrast {current} meets the required {required} for {text_kind}"
            human_context = None
            actions: tuple[str, ...] = ()
            affected: tuple[str, ...] = ()
        else:
            severity = Severity.MODERATE if measurement.relaxed_passes else Severity.SERIOUS
            message = f"Insufficient contrast {current} for {text_kind}; {required} required"
            human_context = (
                f"Text colored {sample.foreground} on {sample.background} is hard to read "
                f"for people with low vision or color vision deficiencies."
            )
            actions = (f"Change the text color to {fix.foreground}",) if fix else ()
            actions += ("Adjust the foreground or background color to increase contrast",)
            affected = AFFECTED_USERS

        return AccessibilityIssue(
            id=f"contrast-{index}",
            tool=self.tool,
            rule_id=PASSING_RULE_ID if measurement.passes else "color-contrast",
            severity=severity,
            location=IssueLocation(selector=sample.selector, snippet=sample.snippet),
            message=message,
            wcag=WCAGReference(
                criterion="1.4.6" if enhanced else "1.4.3",
                level=WCAGLevel.AAA if enhanced else WCAGLevel.AA,
                principle=WCAGPrinciple.PERCEIVABLE,
                version="2.1",
            ),
            contrast_data=ContrastData(
                foreground=sample.foreground,
                background=sample.background,
                current=measurement.current,
                required=measurement.required,
                is_large_text=large,
                font_size=sample.font_size,
                font_weight=sample.font_weight,
                suggested_fix=fix,
                algorithm=algorithm,
            ),
            human_context=human_context,
            suggested_actions=actions,
            affected_users=affected,
        )

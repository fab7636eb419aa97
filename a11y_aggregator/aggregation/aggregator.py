"""Multi-engine aggregation.

Runs the requested engines concurrently, isolates their failures and merges
what came back into one deduplicated, WCAG-grouped result.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..config import Settings, get_settings
from ..engines.base import URL_ONLY_MESSAGE, engine_label, supports_target
from ..engines.session import EngineSession
from ..models import (
    AnalysisOptions,
    AnalysisResult,
    AnalysisTarget,
    CombinedAnalysisResult,
    ContrastAlgorithm,
    TargetType,
    ToolSource,
    Viewport,
    WCAGLevel,
)
from ..utils.logging import LogContext, log_operation
from .dedup import build_summary, deduplicate, group_by_wcag

logger = structlog.get_logger()

MAX_WAIT_FOR_TIMEOUT_MS = 60000


class ViewportModel(BaseModel):
    width: int = Field(1280, gt=0)
    height: int = Field(720, gt=0)


class BrowserOptions(BaseModel):
    """Browser settings forwarded to browser-backed engines."""
    model_config = ConfigDict(populate_by_name=True)

    wait_for_selector: Optional[str] = Field(None, alias="waitForSelector")
    wait_for_timeout: Optional[int] = Field(None, alias="waitForTimeout", ge=0, le=MAX_WAIT_FOR_TIMEOUT_MS)
    viewport: Optional[ViewportModel] = None
    ignore_https_errors: bool = Field(False, alias="ignoreHTTPSErrors")


class AggregationOptions(BaseModel):
    """Per-request options; unset values fall back to ``Settings``."""
    model_config = ConfigDict(populate_by_name=True)

    wcag_level: Optional[WCAGLevel] = Field(None, alias="wcagLevel")
    deduplicate_results: Optional[bool] = Field(None, alias="deduplicateResults")
    contrast_algorithm: Optional[ContrastAlgorithm] = Field(None, alias="contrastAlgorithm")
    rules: Optional[list[str]] = None
    exclude_rules: Optional[list[str]] = Field(None, alias="excludeRules")
    include_warnings: bool = Field(False, alias="includeWarnings")
    browser: BrowserOptions = Field(default_factory=BrowserOptions)


class ResolvedRequest(NamedTuple):
    target: AnalysisTarget
    options: AnalysisOptions
    tools: list[ToolSource]
    deduplicate: bool


class CombinedAnalysisRequest(BaseModel):
    """Input of one aggregation: a URL or an HTML document plus engine selection."""
    url: Optional[str] = Field(None, min_length=1)
    html: Optional[str] = Field(None, min_length=1)
    tools: Optional[list[ToolSource]] = Field(None, min_length=1)
    options: AggregationOptions = Field(default_factory=AggregationOptions)

    @model_validator(mode="after")
    def validate_target(self) -> "CombinedAnalysisRequest":
        """Exactly one of url and html must be provided."""
        if (self.url is None) == (self.html is None):
            raise ValueError("Provide exactly one of 'url' or 'html'")
        return self

    def resolve(self, settings: Optional[Settings] = None) -> ResolvedRequest:
        """Fill every unset option from settings, once, at the entry point."""
        settings = settings or get_settings()
        browser = self.options.browser

        target = AnalysisTarget(
            type=TargetType.URL if self.url is not None else TargetType.HTML,
            value=self.url if self.url is not None else self.html,
            wait_for_selector=browser.wait_for_selector,
            timeout_ms=browser.wait_for_timeout,
            viewport=Viewport(browser.viewport.width, browser.viewport.height) if browser.viewport else None,
        )
        options = AnalysisOptions(
            wcag_level=self.options.wcag_level or settings.default_wcag_level,
            rules=tuple(self.options.rules) if self.options.rules else None,
            exclude_rules=tuple(self.options.exclude_rules) if self.options.exclude_rules else None,
            include_warnings=self.options.include_warnings,
            ignore_https_errors=browser.ignore_https_errors,
            contrast_algorithm=self.options.contrast_algorithm or settings.contrast_algorithm,
            suggest_fixes=settings.suggest_fixes,
            include_passing_elements=settings.include_passing_elements,
        )
        # Duplicates in the request would run an engine twice
        tools = list(dict.fromkeys(self.tools or settings.default_tools))
        deduplicate_results = self.options.deduplicate_results
        if deduplicate_results is None:
            deduplicate_results = settings.deduplicate_results

        return ResolvedRequest(target, options, tools, deduplicate_results)


@dataclass(frozen=True)
class EngineOutcome:
    """What one fan-out task produced: a result, an error, or both."""
    tool: ToolSource
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


def merge_results(
    results: Sequence[AnalysisResult],
    tools: Iterable[ToolSource],
    deduplicate_results: bool = True,
    errors: Optional[dict[ToolSource, str]] = None,
    target: str = "",
) -> CombinedAnalysisResult:
    """Combine engine results into one report.

    Issues are concatenated in the order of ``tools``. An envelope with
    ``success=False`` counts as that engine's error, but its issues are still
    merged. ``errors`` carries failures of engines that produced no result.
    """
    tools = list(tools)
    errors = errors or {}
    order = {tool: index for index, tool in enumerate(tools)}
    ordered = sorted(results, key=lambda r: order.get(r.tool, len(order)))

    messages: list[str] = []
    by_tool = {r.tool: r for r in ordered}
    for tool in tools + [t for t in errors if t not in order]:
        if tool in errors:
            messages.append(f"{engine_label(tool)}: {errors[tool]}")
        elif tool in by_tool and not by_tool[tool].success:
            messages.append(f"{engine_label(tool)}: {by_tool[tool].error or 'Analysis failed'}")

    all_issues = [issue for r in ordered for issue in r.issues]
    issues = deduplicate(all_issues) if deduplicate_results else all_issues

    return CombinedAnalysisResult(
        success=not messages,
        target=target,
        tools_used=[r.tool for r in ordered],
        issues=issues,
        issues_by_wcag=group_by_wcag(issues),
        summary=build_summary(issues, tools),
        individual_results=list(ordered),
        deduplicated_count=len(all_issues) - len(issues),
        error="; ".join(messages) if messages else None,
    )


class Aggregator:
    """
    Fans a request out to audit engines and merges the results.

    Usage:
        async with EngineSession() as session:
            aggregator = Aggregator(session)
            result = await aggregator.analyze(CombinedAnalysisRequest(url="https://example.com"))
    """

    def __init__(self, session: EngineSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or session.settings
        self.log = logger.bind(component="aggregator")

    async def analyze(self, request: CombinedAnalysisRequest) -> CombinedAnalysisResult:
        """Run every requested engine and merge their output. Never raises."""
        start = time.monotonic()
        aggregation_id = str(uuid.uuid4())[:8]

        with LogContext(aggregation_id=aggregation_id):
            target, options, tools, deduplicate_results = request.resolve(self.settings)
            self.log.info(
                "Starting combined analysis",
                tools=[t.value for t in tools],
                target_type=target.type.value,
                ignore_https_errors=options.ignore_https_errors,
            )

            if len(tools) == 1:
                outcomes = [await self._run_engine(tools[0], target, options)]
            else:
                outcomes = await asyncio.gather(
                    *(self._run_engine(tool, target, options) for tool in tools)
                )

            try:
                with log_operation("merge_results", self.log, deduplicate=deduplicate_results) as op:
                    combined = merge_results(
                        [o.result for o in outcomes if o.result is not None],
                        tools,
                        deduplicate_results,
                        errors={o.tool: o.error for o in outcomes if o.error is not None},
                        target=target.value,
                    )
                    op["deduplicated"] = combined.deduplicated_count
            except Exception as e:
                combined = CombinedAnalysisResult(
                    success=False,
                    target=target.value,
                    tools_used=[],
                    issues=[],
                    issues_by_wcag={},
                    summary=build_summary([], tools),
                    individual_results=[o.result for o in outcomes if o.result is not None],
                    error=f"Aggregator: {e}",
                )

            combined.duration_ms = int((time.monotonic() - start) * 1000)
            self.log.info(
                "Combined analysis completed",
                total_issues=combined.original_count,
                deduplicated_issues=len(combined.issues),
                tools_run=len(combined.tools_used),
                errors=sum(1 for o in outcomes if o.error is not None),
                duration_ms=combined.duration_ms,
            )
            return combined

    async def _run_engine(
        self,
        tool: ToolSource,
        target: AnalysisTarget,
        options: AnalysisOptions,
    ) -> EngineOutcome:
        label = engine_label(tool)

        if not supports_target(tool, target):
            self.log.warning("Engine skipped: target type not supported", tool=tool.value)
            return EngineOutcome(tool, error=URL_ONLY_MESSAGE)

        try:
            engine = await self.session.acquire(tool, options.ignore_https_errors)
            result = await engine.analyze(target, options)
        except Exception as e:
            self.log.error(f"{label} analysis failed", tool=tool.value, error=str(e))
            return EngineOutcome(tool, error=str(e) or type(e).__name__)

        self.log.debug(f"{label} analysis completed", issue_count=len(result.issues))
        return EngineOutcome(tool, result=result)

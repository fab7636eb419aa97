"""Base class and errors shared by all audit engines."""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import replace

import structlog

from ..models import AnalysisOptions, AnalysisResult, AnalysisTarget, ToolSource

logger = structlog.get_logger()


class EngineError(Exception):
    """Base exception for audit engine errors."""
    pass


class EngineTimeoutError(EngineError):
    """Engine run exceeded its timeout."""
    pass


class EngineUnavailableError(EngineError):
    """Engine backend is unreachable or has no capacity."""
    pass


class UnsupportedTargetError(EngineError):
    """Engine cannot analyze this kind of target."""
    pass


# Short names used in aggregated error strings
ENGINE_LABELS: dict[ToolSource, str] = {
    ToolSource.AXE_CORE: "Axe",
    ToolSource.PA11Y: "Pa11y",
    ToolSource.LIGHTHOUSE: "Lighthouse",
    ToolSource.CONTRAST_ANALYZER: "Contrast",
    ToolSource.ESLINT_VUEJS_A11Y: "ESLint",
}

URL_ONLY_TOOLS = frozenset({ToolSource.LIGHTHOUSE})

URL_ONLY_MESSAGE = "Only URL targets are supported. Provide a url instead of html."


def engine_label(tool: ToolSource) -> str:
    return ENGINE_LABELS.get(tool, tool.value)


def supports_target(tool: ToolSource, target: AnalysisTarget) -> bool:
    return target.is_url or tool not in URL_ONLY_TOOLS


class AuditEngine(ABC):
    """Abstract base class for audit engines.

    An engine is acquired once, may serve many ``analyze`` calls and is
    disposed by its owner (normally an ``EngineSession``). Each run is bounded
    by the engine's own timeout.
    """

    tool: ToolSource

    def __init__(self, ignore_https_errors: bool = False, timeout_seconds: float = 30.0):
        self.ignore_https_errors = ignore_https_errors
        self.timeout_seconds = timeout_seconds
        self.log = logger.bind(component="engine", tool=self.tool.value)

    @property
    def label(self) -> str:
        return engine_label(self.tool)

    def supports_target(self, target: AnalysisTarget) -> bool:
        return supports_target(self.tool, target)

    def default_options(self) -> AnalysisOptions:
        return AnalysisOptions(ignore_https_errors=self.ignore_https_errors)

    async def acquire(self) -> None:
        """Prepare backing resources. Called before first use."""
        pass

    async def dispose(self) -> None:
        """Release backing resources."""
        pass

    async def analyze(self, target: AnalysisTarget, options: AnalysisOptions | None = None) -> AnalysisResult:
        """Run the engine against a target.

        Raises:
            UnsupportedTargetError: The engine cannot handle the target type
            EngineTimeoutError: The run did not finish within ``timeout_seconds``
            EngineError: Any other engine failure
        """
        if not self.supports_target(target):
            raise UnsupportedTargetError(URL_ONLY_MESSAGE)

        options = options or self.default_options()
        start = time.monotonic()

        try:
            result = await asyncio.wait_for(self._run(target, options), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise EngineTimeoutError(f"Analysis timed out after {self.timeout_seconds}s") from None

        duration_ms = int((time.monotonic() - start) * 1000)
        self.log.debug(
            "Engine run completed",
            success=result.success,
            issues=len(result.issues),
            duration_ms=duration_ms,
        )
        if not result.duration_ms:
            result = replace(result, duration_ms=duration_ms)
        return result

    @abstractmethod
    async def _run(self, target: AnalysisTarget, options: AnalysisOptions) -> AnalysisResult:
        """Engine-specific analysis."""
        pass

"""Shared fixtures for accessibility aggregator tests."""

import asyncio
import os

import pytest

from a11y_aggregator.engines.base import AuditEngine
from a11y_aggregator.models import (
    AccessibilityIssue,
    AnalysisResult,
    IssueLocation,
    Severity,
    ToolSource,
    WCAGLevel,
    WCAGPrinciple,
    WCAGReference,
)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "smoke: mark test as smoke test (fast, critical path - included in CI)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring a running audit worker"
    )
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end aggregation test"
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's shell settings out of the tests."""
    for key in list(os.environ):
        if key.startswith("A11Y_"):
            monkeypatch.delenv(key)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("A11Y_AUDIT_WORKER_URL", "http://audit-worker.test")
    monkeypatch.setenv("A11Y_LOG_LEVEL", "DEBUG")


@pytest.fixture
def settings(mock_env_vars):
    """Settings built from the test environment."""
    from a11y_aggregator.config import Settings

    return Settings(_env_file=None)


def make_issue(
    issue_id: str = "issue-1",
    tool: ToolSource = ToolSource.AXE_CORE,
    rule_id: str = "image-alt",
    selector: str | None = "img.hero",
    criterion: str | None = "1.1.1",
    severity: Severity = Severity.CRITICAL,
    principle: WCAGPrinciple = WCAGPrinciple.PERCEIVABLE,
    **kwargs,
) -> AccessibilityIssue:
    """Build an issue with sensible defaults for tests."""
    wcag = WCAGReference(criterion=criterion, level=WCAGLevel.A, principle=principle) if criterion else None
    return AccessibilityIssue(
        id=issue_id,
        tool=tool,
        rule_id=rule_id,
        severity=severity,
        location=IssueLocation(selector=selector),
        message=kwargs.pop("message", f"{rule_id} violation"),
        wcag=wcag,
        **kwargs,
    )


@pytest.fixture
def issue_factory():
    """Factory fixture for AccessibilityIssue."""
    return make_issue


class FakeEngine(AuditEngine):
    """In-memory engine returning a canned result or raising an error."""

    def __init__(
        self,
        tool: ToolSource,
        issues: tuple = (),
        error: Exception | None = None,
        success: bool = True,
        result_error: str | None = None,
        ignore_https_errors: bool = False,
        delay: float = 0.0,
    ):
        self.tool = tool
        super().__init__(ignore_https_errors=ignore_https_errors, timeout_seconds=5.0)
        self.issues = tuple(issues)
        self.error = error
        self.success = success
        self.result_error = result_error
        self.delay = delay
        self.calls = 0
        self.acquired = False
        self.disposed = False

    async def acquire(self) -> None:
        self.acquired = True

    async def dispose(self) -> None:
        self.disposed = True

    async def _run(self, target, options) -> AnalysisResult:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.disposed:
            raise RuntimeError("client has been closed")
        if self.error is not None:
            raise self.error
        return AnalysisResult(
            success=self.success,
            tool=self.tool,
            target=target.value,
            issues=self.issues,
            error=self.result_error,
        )


@pytest.fixture
def fake_engine_factory():
    """Build a factories dict for EngineSession from prepared FakeEngines."""

    def build(*engines: FakeEngine):
        by_tool = {engine.tool: engine for engine in engines}

        def factory_for(tool):
            def factory(ignore_https_errors: bool):
                engine = by_tool[tool]
                engine.ignore_https_errors = ignore_https_errors
                return engine
            return factory

        return {tool: factory_for(tool) for tool in by_tool}

    return build


@pytest.fixture
def fake_engine_cls():
    """The FakeEngine class, for tests that build engines themselves."""
    return FakeEngine

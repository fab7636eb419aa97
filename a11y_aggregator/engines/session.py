"""Engine session: owns engine handles for the lifetime of a caller.

Engines are created on first use and reused by later calls, so a browser
session in the audit worker is not rebuilt for every aggregation. The caller
owns the session and disposes it.

Usage:
    async with EngineSession() as session:
        aggregator = Aggregator(session)
        result = await aggregator.analyze(request)
"""

import asyncio
from typing import Callable, Optional

import structlog

from ..config import Settings, get_settings
from ..models import ToolSource
from .base import AuditEngine
from .contrast import ContrastAuditEngine
from .remote import AuditWorkerClient, RemoteAuditEngine

logger = structlog.get_logger()

# Builds an engine for the given ignore_https_errors flag
EngineFactory = Callable[[bool], AuditEngine]

EngineKey = tuple[ToolSource, bool]


def _worker_client(settings: Settings, tool: ToolSource) -> AuditWorkerClient:
    token = settings.audit_worker_token.get_secret_value() if settings.audit_worker_token else None
    return AuditWorkerClient(
        base_url=settings.audit_worker_url,
        token=token,
        timeout_seconds=settings.timeout_for(tool),
    )


def default_engine_factories(settings: Settings) -> dict[ToolSource, EngineFactory]:
    """Factories for every engine, each talking to the configured audit worker."""

    def remote(tool: ToolSource) -> EngineFactory:
        def build(ignore_https_errors: bool) -> AuditEngine:
            return RemoteAuditEngine(
                tool,
                _worker_client(settings, tool),
                ignore_https_errors=ignore_https_errors,
                timeout_seconds=settings.timeout_for(tool),
            )
        return build

    def contrast(ignore_https_errors: bool) -> AuditEngine:
        return ContrastAuditEngine(
            _worker_client(settings, ToolSource.CONTRAST_ANALYZER),
            ignore_https_errors=ignore_https_errors,
            timeout_seconds=settings.contrast_timeout_seconds,
            algorithm=settings.contrast_algorithm,
            suggest_fixes=settings.suggest_fixes,
            include_passing_elements=settings.include_passing_elements,
        )

    factories: dict[ToolSource, EngineFactory] = {
        tool: remote(tool)
        for tool in (ToolSource.AXE_CORE, ToolSource.PA11Y, ToolSource.LIGHTHOUSE, ToolSource.ESLINT_VUEJS_A11Y)
    }
    factories[ToolSource.CONTRAST_ANALYZER] = contrast
    return factories


class EngineSession:
    """Lazily creates, caches and disposes audit engines.

    Engines are cached per ``(tool, ignore_https_errors)``. Both HTTPS variants
    of a tool can be live at once and neither is disposed before ``dispose()``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        factories: Optional[dict[ToolSource, EngineFactory]] = None,
    ):
        self.settings = settings or get_settings()
        self.factories = factories if factories is not None else default_engine_factories(self.settings)
        self._engines: dict[EngineKey, AuditEngine] = {}
        self._locks: dict[EngineKey, asyncio.Lock] = {}
        self.log = logger.bind(component="engine_session")

    async def __aenter__(self) -> "EngineSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()

    @property
    def active_tools(self) -> list[ToolSource]:
        return list(dict.fromkeys(tool for tool, _ in self._engines))

    def _lock_for(self, key: EngineKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def acquire(self, tool: ToolSource, ignore_https_errors: bool = False) -> AuditEngine:
        """Return a live engine for ``tool`` built with ``ignore_https_errors``.

        Only callers asking for the same tool and flag wait on each other.

        Raises:
            KeyError: No factory is registered for ``tool``
        """
        key = (tool, ignore_https_errors)
        engine = self._engines.get(key)
        if engine is not None:
            return engine

        factory = self.factories.get(tool)
        if factory is None:
            raise KeyError(f"No engine registered for {tool.value}")

        async with self._lock_for(key):
            engine = self._engines.get(key)
            if engine is None:
                engine = factory(ignore_https_errors)
                await engine.acquire()
                self._engines[key] = engine
                self.log.debug("Engine acquired", tool=tool.value, ignore_https_errors=ignore_https_errors)
            return engine

    async def dispose(self) -> None:
        """Dispose every cached engine concurrently. Errors are logged, not raised."""
        engines = list(self._engines.items())
        self._engines.clear()
        self._locks.clear()

        if engines:
            await asyncio.gather(*(self._dispose_engine(tool, engine) for (tool, _), engine in engines))

    async def _dispose_engine(self, tool: ToolSource, engine: AuditEngine) -> None:
        try:
            await engine.dispose()
        except Exception as e:
            self.log.error("Engine dispose failed", tool=tool.value, error=str(e))

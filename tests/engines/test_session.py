"""Tests for EngineSession."""

import asyncio

import pytest

from a11y_aggregator.engines.session import EngineSession, default_engine_factories
from a11y_aggregator.engines.contrast import ContrastAuditEngine
from a11y_aggregator.engines.remote import RemoteAuditEngine
from a11y_aggregator.models import ToolSource


class _Recorder:
    """Factory that builds a fresh engine per call and remembers them."""

    def __init__(self, engine_cls, tool, fail_dispose=False):
        self.engine_cls = engine_cls
        self.tool = tool
        self.fail_dispose = fail_dispose
        self.built = []

    def __call__(self, ignore_https_errors):
        engine = self.engine_cls(self.tool, ignore_https_errors=ignore_https_errors)
        if self.fail_dispose:
            async def broken_dispose():
                raise RuntimeError("dispose failed")
            engine.dispose = broken_dispose
        self.built.append(engine)
        return engine


class TestEngineSession:
    """Tests for EngineSession lifecycle."""

    @pytest.mark.asyncio
    async def test_acquire_reuses_engine(self, settings, fake_engine_cls):
        """Test repeated acquires return the same engine."""
        axe = _Recorder(fake_engine_cls, ToolSource.AXE_CORE)
        session = EngineSession(settings, factories={ToolSource.AXE_CORE: axe})

        first = await session.acquire(ToolSource.AXE_CORE)
        second = await session.acquire(ToolSource.AXE_CORE)

        assert first is second
        assert len(axe.built) == 1
        assert first.acquired is True

    @pytest.mark.asyncio
    async def test_https_variants_coexist(self, settings, fake_engine_cls):
        """Test each ignore_https_errors flag gets its own engine and neither is disposed early."""
        axe = _Recorder(fake_engine_cls, ToolSource.AXE_CORE)
        session = EngineSession(settings, factories={ToolSource.AXE_CORE: axe})

        strict = await session.acquire(ToolSource.AXE_CORE, ignore_https_errors=False)
        relaxed = await session.acquire(ToolSource.AXE_CORE, ignore_https_errors=True)

        assert strict is not relaxed
        assert strict.disposed is False
        assert strict.ignore_https_errors is False
        assert relaxed.ignore_https_errors is True
        assert await session.acquire(ToolSource.AXE_CORE, ignore_https_errors=False) is strict
        assert len(axe.built) == 2
        assert session.active_tools == [ToolSource.AXE_CORE]

        await session.dispose()

        assert strict.disposed and relaxed.disposed

    @pytest.mark.asyncio
    async def test_slow_acquire_does_not_block_other_tools(self, settings, fake_engine_cls):
        """Test a tool still starting up does not hold back other tools."""
        gate = asyncio.Event()

        class GatedEngine(fake_engine_cls):
            async def acquire(self):
                await gate.wait()
                await super().acquire()

        axe = _Recorder(GatedEngine, ToolSource.AXE_CORE)
        pa11y = _Recorder(fake_engine_cls, ToolSource.PA11Y)
        session = EngineSession(settings, factories={ToolSource.AXE_CORE: axe, ToolSource.PA11Y: pa11y})

        pending = asyncio.create_task(session.acquire(ToolSource.AXE_CORE))
        await asyncio.sleep(0)
        ready = await asyncio.wait_for(session.acquire(ToolSource.PA11Y), timeout=1)

        assert ready.acquired is True
        assert not pending.done()

        gate.set()
        assert (await pending).acquired is True
        await session.dispose()

    @pytest.mark.asyncio
    async def test_concurrent_acquire_builds_once(self, settings, fake_engine_cls):
        """Test concurrent acquires of the same tool share one engine."""
        axe = _Recorder(fake_engine_cls, ToolSource.AXE_CORE)
        session = EngineSession(settings, factories={ToolSource.AXE_CORE: axe})

        first, second = await asyncio.gather(
            session.acquire(ToolSource.AXE_CORE),
            session.acquire(ToolSource.AXE_CORE),
        )

        assert first is second
        assert len(axe.built) == 1

    @pytest.mark.asyncio
    async def test_dispose_all(self, settings, fake_engine_cls):
        """Test dispose releases every engine and clears the cache."""
        axe = _Recorder(fake_engine_cls, ToolSource.AXE_CORE)
        pa11y = _Recorder(fake_engine_cls, ToolSource.PA11Y)

        async with EngineSession(settings, factories={ToolSource.AXE_CORE: axe, ToolSource.PA11Y: pa11y}) as session:
            await session.acquire(ToolSource.AXE_CORE)
            await session.acquire(ToolSource.PA11Y)
            assert set(session.active_tools) == {ToolSource.AXE_CORE, ToolSource.PA11Y}

        assert axe.built[0].disposed is True
        assert pa11y.built[0].disposed is True
        assert session.active_tools == []

    @pytest.mark.asyncio
    async def test_dispose_errors_are_logged_not_raised(self, settings, fake_engine_cls):
        """Test one failing dispose does not stop the others."""
        broken = _Recorder(fake_engine_cls, ToolSource.AXE_CORE, fail_dispose=True)
        pa11y = _Recorder(fake_engine_cls, ToolSource.PA11Y)
        session = EngineSession(settings, factories={ToolSource.AXE_CORE: broken, ToolSource.PA11Y: pa11y})
        await session.acquire(ToolSource.AXE_CORE)
        await session.acquire(ToolSource.PA11Y)

        await session.dispose()

        assert pa11y.built[0].disposed is True

    @pytest.mark.asyncio
    async def test_unknown_tool(self, settings):
        """Test acquiring an unregistered tool raises KeyError."""
        session = EngineSession(settings, factories={})

        with pytest.raises(KeyError):
            await session.acquire(ToolSource.LIGHTHOUSE)


class TestDefaultFactories:
    """Tests for the default engine factories."""

    def test_builds_remote_and_contrast_engines(self, settings):
        """Test every tool has a factory wired to the configured worker."""
        factories = default_engine_factories(settings)

        assert set(factories) == set(ToolSource)

        lighthouse = factories[ToolSource.LIGHTHOUSE](True)
        assert isinstance(lighthouse, RemoteAuditEngine)
        assert lighthouse.ignore_https_errors is True
        assert lighthouse.timeout_seconds == 60.0
        assert lighthouse.client.base_url == "http://audit-worker.test"

        contrast = factories[ToolSource.CONTRAST_ANALYZER](False)
        assert isinstance(contrast, ContrastAuditEngine)
        assert contrast.timeout_seconds == 30.0

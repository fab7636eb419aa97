"""HTTP client for the audit worker and the engines backed by it.

The audit worker hosts the browser-driven engines (axe-core, pa11y,
lighthouse) and returns already-normalized ``AnalysisResult`` JSON.

Endpoints:
    POST /analyze/{tool}   {target, options} -> AnalysisResult
    POST /styles           {target} -> {samples: [ColorSample]}
    GET  /health
"""

from dataclasses import replace
from typing import Optional

import httpx
import structlog

from ..catalog.wcag import reference_for_lighthouse_audit
from ..models import AnalysisOptions, AnalysisResult, AnalysisTarget, ToolSource, summarize
from .base import AuditEngine, EngineError, EngineTimeoutError, EngineUnavailableError
from .contrast import ColorSample

logger = structlog.get_logger()


class AuditWorkerClient:
    """
    Async client for the audit worker.

    Usage:
        async with AuditWorkerClient("http://localhost:8080") as client:
            data = await client.request("POST", "/analyze/axe-core", {...})
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AuditWorkerClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            )

    async def connect(self) -> None:
        await self._ensure_client()

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, endpoint: str, data: dict | None = None) -> dict:
        """
        Make a single request to the audit worker.

        Raises:
            EngineTimeoutError: The request timed out
            EngineUnavailableError: The worker is unreachable or returned 503
            EngineError: Any other HTTP or decoding failure
        """
        await self._ensure_client()

        try:
            if method.upper() == "GET":
                response = await self._client.get(endpoint)
            else:
                response = await self._client.post(endpoint, json=data or {})
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            logger.warning("Audit worker request timeout", endpoint=endpoint)
            raise EngineTimeoutError(f"Request timed out: {e}") from e

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Audit worker HTTP error",
                endpoint=endpoint,
                status_code=e.response.status_code,
            )
            if e.response.status_code == 503:
                raise EngineUnavailableError("Audit worker unavailable") from e
            raise EngineError(f"HTTP error {e.response.status_code}: {e.response.text}") from e

        except httpx.RequestError as e:
            logger.warning("Audit worker request failed", endpoint=endpoint, error=str(e))
            raise EngineUnavailableError(f"Request failed: {e}") from e

        except ValueError as e:
            raise EngineError(f"Invalid JSON from audit worker: {e}") from e

    async def health(self) -> bool:
        try:
            data = await self.request("GET", "/health")
        except EngineError:
            return False
        return data.get("status", "ok") in ("ok", "healthy")

    async def fetch_color_samples(self, target: AnalysisTarget) -> list[ColorSample]:
        """Computed foreground/background colors for the target's text elements."""
        data = await self.request("POST", "/styles", {"target": target.to_dict()})
        return [ColorSample.from_dict(sample) for sample in data.get("samples", [])]


class RemoteAuditEngine(AuditEngine):
    """An engine that runs inside the audit worker."""

    def __init__(
        self,
        tool: ToolSource,
        client: AuditWorkerClient,
        ignore_https_errors: bool = False,
        timeout_seconds: float = 30.0,
    ):
        self.tool = tool
        super().__init__(ignore_https_errors=ignore_https_errors, timeout_seconds=timeout_seconds)
        self.client = client

    async def acquire(self) -> None:
        await self.client.connect()

    async def dispose(self) -> None:
        await self.client.close()

    async def is_available(self) -> bool:
        return await self.client.health()

    async def _run(self, target: AnalysisTarget, options: AnalysisOptions) -> AnalysisResult:
        payload = {"target": target.to_dict(), "options": options.to_dict()}
        data = await self.client.request("POST", f"/analyze/{self.tool.value}", payload)
        result = AnalysisResult.from_dict(data, tool=self.tool)

        if self.tool == ToolSource.LIGHTHOUSE:
            result = self._attach_lighthouse_wcag(result)
        return result

    def _attach_lighthouse_wcag(self, result: AnalysisResult) -> AnalysisResult:
        """Fill in WCAG references for Lighthouse audits that arrive without one."""
        if all(issue.wcag for issue in result.issues):
            return result

        issues = tuple(
            issue if issue.wcag else replace(issue, wcag=reference_for_lighthouse_audit(issue.rule_id))
            for issue in result.issues
        )
        return replace(result, issues=issues, summary=summarize(issues))

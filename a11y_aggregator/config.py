"""Configuration management for the accessibility aggregator."""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ContrastAlgorithm, ToolSource, WCAGLevel


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="A11Y_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Audit worker (hosts the browser-backed engines)
    audit_worker_url: str = Field("http://localhost:8080", description="Base URL of the audit worker")
    audit_worker_token: Optional[SecretStr] = Field(None, description="Bearer token for the audit worker")

    # Per-engine timeouts, owned by each engine's contract
    axe_timeout_seconds: float = Field(30.0, description="Timeout for an axe-core run")
    pa11y_timeout_seconds: float = Field(30.0, description="Timeout for a pa11y run")
    lighthouse_timeout_seconds: float = Field(60.0, description="Timeout for a lighthouse run")
    contrast_timeout_seconds: float = Field(30.0, description="Timeout for collecting color samples")
    eslint_timeout_seconds: float = Field(30.0, description="Timeout for an eslint a11y run")

    # Aggregation defaults
    default_tools: list[ToolSource] = Field(
        default_factory=lambda: [ToolSource.AXE_CORE, ToolSource.PA11Y],
        description="Engines to run when a request names none",
    )
    deduplicate_results: bool = Field(True, description="Merge issues reported by several engines")
    default_wcag_level: WCAGLevel = Field(WCAGLevel.AA, description="WCAG conformance level to check")

    # Contrast engine
    contrast_algorithm: ContrastAlgorithm = Field(ContrastAlgorithm.WCAG21, description="Contrast metric")
    suggest_fixes: bool = Field(True, description="Suggest compliant foreground colors for failures")
    include_passing_elements: bool = Field(False, description="Report passing samples as minor issues")

    # Logging
    log_level: str = Field("INFO", description="Root log level")
    log_json: bool = Field(False, description="Render logs as JSON")

    def timeout_for(self, tool: ToolSource) -> float:
        """Timeout in seconds for a single run of the given engine."""
        return {
            ToolSource.AXE_CORE: self.axe_timeout_seconds,
            ToolSource.PA11Y: self.pa11y_timeout_seconds,
            ToolSource.LIGHTHOUSE: self.lighthouse_timeout_seconds,
            ToolSource.CONTRAST_ANALYZER: self.contrast_timeout_seconds,
            ToolSource.ESLINT_VUEJS_A11Y: self.eslint_timeout_seconds,
        }[tool]


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()

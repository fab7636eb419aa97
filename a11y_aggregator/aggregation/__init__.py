"""Cross-engine fingerprinting, deduplication and aggregation."""

from .aggregator import (
    AggregationOptions,
    Aggregator,
    BrowserOptions,
    CombinedAnalysisRequest,
    EngineOutcome,
    ResolvedRequest,
    merge_results,
)
from .dedup import TOOL_PRIORITY, build_summary, deduplicate, group_by_wcag, richness
from .fingerprint import defect_class, fingerprint, location_key, normalize_selector

__all__ = [
    "AggregationOptions",
    "Aggregator",
    "BrowserOptions",
    "CombinedAnalysisRequest",
    "EngineOutcome",
    "ResolvedRequest",
    "merge_results",
    "TOOL_PRIORITY",
    "build_summary",
    "deduplicate",
    "group_by_wcag",
    "richness",
    "defect_class",
    "fingerprint",
    "location_key",
    "normalize_selector",
]

"""Audit engines and the session that owns them."""

from .base import (
    ENGINE_LABELS,
    AuditEngine,
    EngineError,
    EngineTimeoutError,
    EngineUnavailableError,
    UnsupportedTargetError,
    engine_label,
    supports_target,
)
from .contrast import ColorSample, ContrastAuditEngine
from .remote import AuditWorkerClient, RemoteAuditEngine
from .session import EngineSession, default_engine_factories

__all__ = [
    "ENGINE_LABELS",
    "AuditEngine",
    "EngineError",
    "EngineTimeoutError",
    "EngineUnavailableError",
    "UnsupportedTargetError",
    "engine_label",
    "supports_target",
    "ColorSample",
    "ContrastAuditEngine",
    "AuditWorkerClient",
    "RemoteAuditEngine",
    "EngineSession",
    "default_engine_factories",
]

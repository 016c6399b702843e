"""Coordinator da agenda (estado, polling e reconciliação)."""

from app.coordinators.agenda.state import AgendaSyncState, ReadTag, SyncStatus
from app.coordinators.agenda.sync_coordinator import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    AgendaSyncCoordinator,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "AgendaSyncCoordinator",
    "AgendaSyncState",
    "ReadTag",
    "SyncStatus",
]

"""Estado da sessão de sincronização de agenda."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime  # noqa: TC003 - campos do dataclass
from enum import StrEnum

from app.constants.agenda import AgendaType
from app.domain.agenda import CalendarEvent  # noqa: TC001 - campo do dataclass


class SyncStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ReadTag:
    """Contexto em que uma leitura foi emitida; usado para descartar resultados velhos."""

    generation: int
    agenda_type: AgendaType
    date_filter: date | None


@dataclass
class AgendaSyncState:
    """Estado mutável, de posse exclusiva do coordinator."""

    agenda_type: AgendaType
    date_filter: date | None = None
    events: list[CalendarEvent] = field(default_factory=list)
    status: SyncStatus = SyncStatus.IDLE
    last_updated: datetime | None = None
    is_loading: bool = False
    is_submitting: bool = False
    error: Exception | None = None
    generation: int = 0

    def tag(self) -> ReadTag:
        return ReadTag(self.generation, self.agenda_type, self.date_filter)

    def matches(self, tag: ReadTag) -> bool:
        return tag == self.tag()

    def snapshot(self) -> AgendaSyncState:
        """Cópia rasa para leitura externa (a lista não é compartilhada)."""
        return dataclasses.replace(self, events=list(self.events))

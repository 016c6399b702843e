"""Erros tipados da sincronização de agenda."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.constants.agenda import AgendaType


class CalendarSyncError(Exception):
    """Falha de leitura da agenda."""

    def __init__(
        self,
        message: str,
        *,
        agenda_type: AgendaType,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.agenda_type = agenda_type
        self.status_code = status_code


class CalendarReadError(CalendarSyncError):
    """GET de leitura falhou (rede, status não-2xx ou JSON inválido)."""


class CalendarRefreshError(CalendarSyncError):
    """POST de atualização falhou; distinto do GET para encadear fallbacks."""


class MutationInProgressError(RuntimeError):
    """Já existe uma mutação em andamento nesta sessão."""


__all__ = [
    "CalendarReadError",
    "CalendarRefreshError",
    "CalendarSyncError",
    "MutationInProgressError",
]

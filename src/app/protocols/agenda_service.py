"""Contrato do serviço de sincronização de agenda.

O coordinator depende apenas deste protocolo, o que permite trocar o
client HTTP por um fake em memória nos testes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date

    from app.constants.agenda import AgendaType
    from app.domain.agenda import CalendarEvent, EventFormData, MutationOutcome


@runtime_checkable
class AgendaServiceProtocol(Protocol):
    """Leitura e mutação de eventos particionados por tipo de agenda."""

    async def fetch_events(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        """Lê eventos via GET; levanta CalendarReadError em falha."""
        ...

    async def refresh_events_via_post(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        """Lê eventos via POST; levanta CalendarRefreshError em falha."""
        ...

    async def add_event(self, form: EventFormData, agenda_type: AgendaType) -> MutationOutcome:
        ...

    async def edit_event(
        self,
        event_id: str,
        form: EventFormData,
        agenda_type: AgendaType,
    ) -> MutationOutcome:
        ...

    async def delete_event(self, event_id: str, agenda_type: AgendaType) -> MutationOutcome:
        ...

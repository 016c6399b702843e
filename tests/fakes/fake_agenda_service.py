"""Fakes em memória da agenda e do notifier para testes deterministas."""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

from app.constants.agenda import AgendaType
from app.domain.agenda import CalendarEvent, EventFormData, MutationOutcome
from app.domain.agenda_errors import CalendarReadError, CalendarRefreshError

BRT = timezone(timedelta(hours=-3))


def make_event(
    event_id: str,
    summary: str = "Consulta",
    *,
    day: date = date(2024, 6, 1),
    hour: int = 10,
    email: str | None = None,
) -> CalendarEvent:
    start = datetime(day.year, day.month, day.day, hour, tzinfo=BRT)
    return CalendarEvent(
        id=event_id,
        summary=summary,
        start=start,
        end=start + timedelta(hours=1),
        attendees=({"email": email},) if email else (),
    )


class FakeAgendaService:
    """Implementa o protocolo sem IO.

    Mantém um store por tipo de agenda; falhas e bloqueios são
    configuráveis por teste.
    """

    def __init__(self, events: dict[AgendaType, list[CalendarEvent]] | None = None) -> None:
        self.store: dict[AgendaType, dict[str, CalendarEvent]] = {
            agenda_type: {} for agenda_type in AgendaType
        }
        for agenda_type, items in (events or {}).items():
            for event in items:
                self.store[agenda_type][event.id] = event
        self.fail_get = False
        self.fail_post = False
        self.mutation_outcome: MutationOutcome | None = None
        self.gates: dict[AgendaType, asyncio.Event] = {}
        self.calls: list[tuple[str, AgendaType, date | None]] = []

    async def fetch_events(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        self.calls.append(("fetch", agenda_type, date_filter))
        gate = self.gates.get(agenda_type)
        if gate is not None:
            await gate.wait()
        if self.fail_get:
            raise CalendarReadError("get falhou", agenda_type=agenda_type, status_code=500)
        return self._list(agenda_type, date_filter)

    async def refresh_events_via_post(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        self.calls.append(("refresh_post", agenda_type, date_filter))
        if self.fail_post:
            raise CalendarRefreshError("post falhou", agenda_type=agenda_type, status_code=502)
        return self._list(agenda_type, date_filter)

    async def add_event(self, form: EventFormData, agenda_type: AgendaType) -> MutationOutcome:
        self.calls.append(("add", agenda_type, form.date))
        if self.mutation_outcome is not None:
            return self.mutation_outcome
        event_id = uuid4().hex[:12]
        start = datetime.fromisoformat(f"{form.date.isoformat()}T{form.start_time}").replace(tzinfo=BRT)
        end = datetime.fromisoformat(f"{form.date.isoformat()}T{form.end_time}").replace(tzinfo=BRT)
        self.store[agenda_type][event_id] = CalendarEvent(
            id=event_id,
            summary=form.summary,
            description=form.description or None,
            start=start,
            end=end,
        )
        return MutationOutcome.SUCCESS

    async def edit_event(
        self,
        event_id: str,
        form: EventFormData,
        agenda_type: AgendaType,
    ) -> MutationOutcome:
        self.calls.append(("edit", agenda_type, form.date))
        if self.mutation_outcome is not None:
            return self.mutation_outcome
        current = self.store[agenda_type].get(event_id)
        if current is None:
            return MutationOutcome.NOT_FOUND
        self.store[agenda_type][event_id] = current.model_copy(update={"summary": form.summary})
        return MutationOutcome.SUCCESS

    async def delete_event(self, event_id: str, agenda_type: AgendaType) -> MutationOutcome:
        self.calls.append(("delete", agenda_type, None))
        if self.mutation_outcome is not None:
            return self.mutation_outcome
        if self.store[agenda_type].pop(event_id, None) is None:
            return MutationOutcome.NOT_FOUND
        return MutationOutcome.SUCCESS

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    def _list(self, agenda_type: AgendaType, date_filter: date | None) -> list[CalendarEvent]:
        events = list(self.store[agenda_type].values())
        if date_filter is not None:
            events = [event for event in events if event.start.date() == date_filter]
        return events


class RecordingNotifier:
    """Guarda as notificações emitidas, em ordem."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    @property
    def errors(self) -> list[str]:
        return [text for variant, text in self.messages if variant == "error"]

    @property
    def successes(self) -> list[str]:
        return [text for variant, text in self.messages if variant == "success"]

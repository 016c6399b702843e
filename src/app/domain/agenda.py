"""Modelos de domínio da agenda.

Eventos vêm do store remoto (somente leitura aqui); o formulário é o
rascunho transitório usado em add/edit.
"""

from __future__ import annotations

import datetime as dt
import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_REGEX = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Attendee(BaseModel):
    """Participante de um evento."""

    model_config = ConfigDict(extra="ignore")

    email: str = Field(..., description="Email do participante.")
    display_name: str | None = Field(default=None, alias="displayName")
    response_status: str | None = Field(default=None, alias="responseStatus")


class CalendarEvent(BaseModel):
    """Evento como devolvido pelo webhook de leitura da agenda."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Identificador do evento no store remoto.")
    summary: str = Field(default="", description="Título do evento.")
    description: str | None = Field(default=None, description="Descrição livre.")
    start: dt.datetime = Field(..., description="Início do evento.")
    end: dt.datetime = Field(..., description="Fim do evento.")
    attendees: tuple[Attendee, ...] = Field(default=(), description="Participantes.")

    def matches(self, term: str) -> bool:
        """True se o termo aparece no título, na descrição ou no email de algum participante."""
        needle = term.strip().lower()
        if not needle:
            return True
        if needle in self.summary.lower():
            return True
        if self.description and needle in self.description.lower():
            return True
        return any(needle in attendee.email.lower() for attendee in self.attendees)


class EventFormData(BaseModel):
    """Rascunho de evento preenchido pelo usuário."""

    model_config = ConfigDict(extra="ignore")

    date: dt.date = Field(..., description="Dia do evento.")
    start_time: str = Field(..., description="Horário de início (HH:MM).")
    end_time: str = Field(..., description="Horário de fim (HH:MM).")
    summary: str = Field(..., min_length=1)
    description: str = ""
    email: str = ""

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not _TIME_REGEX.match(value):
            raise ValueError("Horário deve estar no formato HH:MM")
        return value


class MutationOutcome(StrEnum):
    """Resultado tipado de add/edit/delete.

    Avaliado como bool, só SUCCESS é verdadeiro.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    TRANSIENT_FAILURE = "transient_failure"

    def __bool__(self) -> bool:
        return self is MutationOutcome.SUCCESS


def search_events(events: list[CalendarEvent], term: str = "") -> list[CalendarEvent]:
    """Filtra por termo de busca e ordena por início."""
    return sorted((event for event in events if event.matches(term)), key=lambda e: e.start)


def events_on_day(events: list[CalendarEvent], day: dt.date) -> list[CalendarEvent]:
    """Eventos cujo início cai no dia informado (no fuso do próprio evento)."""
    return sorted((event for event in events if event.start.date() == day), key=lambda e: e.start)


__all__ = [
    "Attendee",
    "CalendarEvent",
    "EventFormData",
    "MutationOutcome",
    "events_on_day",
    "search_events",
]

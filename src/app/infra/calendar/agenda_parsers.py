"""Helpers internos de formatação e parsing para os webhooks de agenda."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.agenda import Attendee, CalendarEvent

if TYPE_CHECKING:
    from app.domain.agenda import EventFormData

logger = logging.getLogger(__name__)

_NOT_FOUND_STATUS = frozenset({404, 410})
_NOT_FOUND_MARKERS = ("not found", "notfound", "não encontrado", "nao encontrado", "não existe")
_MESSAGE_FIELDS = ("error", "message", "status", "detail")


def offset_to_timezone(offset: str) -> timezone:
    """Converte "-03:00" em tzinfo de offset fixo."""
    sign = -1 if offset.startswith("-") else 1
    hours, minutes = offset.lstrip("+-").split(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))


def day_bounds(day: date, offset: str) -> tuple[str, str]:
    """Início e fim do dia civil no offset fixo, no formato aceito pelos webhooks."""
    iso_day = day.isoformat()
    return f"{iso_day}T00:00:00.000{offset}", f"{iso_day}T23:59:59.999{offset}"


def wire_timestamp(day: date, hhmm: str, offset: str) -> str:
    return f"{day.isoformat()}T{hhmm}:00{offset}"


def build_event_payload(
    form: EventFormData,
    offset: str,
    event_id: str | None = None,
) -> dict[str, Any]:
    """Payload de add (ou de edit, quando `event_id` é informado)."""
    payload: dict[str, Any] = {"id": event_id} if event_id is not None else {}
    payload.update(
        {
            "summary": form.summary,
            "description": form.description,
            "start": wire_timestamp(form.date, form.start_time, offset),
            "end": wire_timestamp(form.date, form.end_time, offset),
            "email": form.email,
        }
    )
    return payload


def parse_events(body: Any, zone: timezone) -> list[CalendarEvent]:
    """Normaliza a resposta de leitura.

    Corpo que não é lista vira lista vazia; itens inválidos são descartados.
    """
    if not isinstance(body, list):
        if body is not None:
            logger.warning(
                "agenda_events_body_not_a_list",
                extra={"component": "agenda_parsers", "body_type": type(body).__name__},
            )
        return []

    events: list[CalendarEvent] = []
    dropped = 0
    for item in body:
        event = _parse_event(item, zone)
        if event is None:
            dropped += 1
            continue
        events.append(event)
    if dropped:
        logger.warning(
            "agenda_events_dropped",
            extra={"component": "agenda_parsers", "dropped": dropped, "kept": len(events)},
        )
    return events


def parse_event_datetime(value: Any, zone: timezone) -> datetime | None:
    """Aceita ISO string ou objeto no estilo Google ({dateTime} / {date})."""
    if isinstance(value, dict):
        value = value.get("dateTime") or value.get("date")
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=zone) if parsed.tzinfo is None else parsed


def is_not_found(status_code: int, text: str) -> bool:
    """Detecta "alvo não existe mais" pelo status ou por marcador no corpo."""
    if status_code in _NOT_FOUND_STATUS:
        return True
    if not text:
        return False
    if 200 <= status_code < 300:
        return _json_message_has_marker(text)
    lowered = text.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


def _json_message_has_marker(text: str) -> bool:
    # Em 2xx só olhamos campos de mensagem; o texto livre do evento pode conter qualquer coisa.
    try:
        body = json.loads(text)
    except ValueError:
        return False
    if not isinstance(body, dict):
        return False
    for field in _MESSAGE_FIELDS:
        value = body.get(field)
        if isinstance(value, str) and any(m in value.lower() for m in _NOT_FOUND_MARKERS):
            return True
    return False


def _parse_event(item: Any, zone: timezone) -> CalendarEvent | None:
    if not isinstance(item, dict):
        return None
    start = parse_event_datetime(item.get("start"), zone)
    end = parse_event_datetime(item.get("end"), zone)
    if start is None or end is None:
        return None
    try:
        return CalendarEvent(
            id=str(item.get("id") or ""),
            summary=str(item.get("summary") or ""),
            description=item.get("description") if isinstance(item.get("description"), str) else None,
            start=start,
            end=end,
            attendees=_parse_attendees(item.get("attendees")),
        )
    except ValidationError:
        return None


def _parse_attendees(raw: Any) -> tuple[Attendee, ...]:
    # Participante inválido é descartado sozinho; o evento continua.
    if not isinstance(raw, list):
        return ()
    attendees: list[Attendee] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        email = item.get("email")
        if not isinstance(email, str) or not email.strip():
            continue
        try:
            attendees.append(Attendee.model_validate({**item, "email": email.strip()}))
        except ValidationError:
            continue
    return tuple(attendees)

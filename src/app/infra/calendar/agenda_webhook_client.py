"""Client HTTP da agenda sobre os webhooks por tipo de agenda.

Leitura via GET (ou POST como caminho alternativo) e mutações via POST.
Mutações são disparadas uma única vez e devolvem MutationOutcome;
leituras levantam erros tipados. Nenhuma exceção de rede escapa crua.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.constants.agenda import AgendaOperation, AgendaType
from app.domain.agenda import MutationOutcome
from app.domain.agenda_errors import CalendarReadError, CalendarRefreshError
from app.infra.calendar.agenda_parsers import (
    build_event_payload,
    day_bounds,
    is_not_found,
    offset_to_timezone,
    parse_events,
)
from app.observability import get_correlation_id
from app.protocols.agenda_service import AgendaServiceProtocol

if TYPE_CHECKING:
    from datetime import date

    from app.domain.agenda import CalendarEvent, EventFormData
    from app.services.endpoint_resolver import EndpointResolver

logger = logging.getLogger(__name__)

_COMPONENT = "agenda_webhook_client"
_MAX_LOGGED_BODY = 1000


class AgendaWebhookClient(AgendaServiceProtocol):
    """Implementação HTTP do protocolo de agenda."""

    def __init__(
        self,
        resolver: EndpointResolver,
        *,
        http_client: httpx.AsyncClient | None = None,
        utc_offset: str = "-03:00",
        timeout_seconds: float = 15.0,
    ) -> None:
        self._resolver = resolver
        self._http_client = http_client
        self._offset = utc_offset
        self._zone = offset_to_timezone(utc_offset)
        self._timeout = timeout_seconds

    async def fetch_events(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        url = self._resolver.resolve(AgendaOperation.BASE, agenda_type)
        params: dict[str, str] | None = None
        if date_filter is not None:
            start, end = day_bounds(date_filter, self._offset)
            params = {"start": start, "end": end}

        try:
            response = await self._send("GET", url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._log_read_failure("fetch_events", agenda_type, error_type=type(exc).__name__)
            raise CalendarReadError(
                f"Falha de rede ao ler agenda {agenda_type}", agenda_type=agenda_type
            ) from exc

        if not response.is_success:
            self._log_read_failure("fetch_events", agenda_type, status_code=response.status_code)
            raise CalendarReadError(
                f"HTTP {response.status_code} ao ler agenda {agenda_type}",
                agenda_type=agenda_type,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            self._log_read_failure("fetch_events", agenda_type, error_type="invalid_json")
            raise CalendarReadError(
                f"Resposta inválida ao ler agenda {agenda_type}",
                agenda_type=agenda_type,
                status_code=response.status_code,
            ) from exc

        events = parse_events(body, self._zone)
        logger.debug(
            "agenda_events_fetched",
            extra={
                "component": _COMPONENT,
                "agenda_type": str(agenda_type),
                "event_count": len(events),
                "filtered": date_filter is not None,
            },
        )
        return events

    async def refresh_events_via_post(
        self,
        agenda_type: AgendaType,
        date_filter: date | None = None,
    ) -> list[CalendarEvent]:
        url = self._resolver.resolve(AgendaOperation.BASE, agenda_type)
        payload: dict[str, str] = {}
        if date_filter is not None:
            payload["start"], payload["end"] = day_bounds(date_filter, self._offset)

        try:
            response = await self._send("POST", url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._log_read_failure("refresh_events_via_post", agenda_type, error_type=type(exc).__name__)
            raise CalendarRefreshError(
                f"Falha de rede ao atualizar agenda {agenda_type}", agenda_type=agenda_type
            ) from exc

        if not response.is_success:
            self._log_read_failure(
                "refresh_events_via_post", agenda_type, status_code=response.status_code
            )
            raise CalendarRefreshError(
                f"HTTP {response.status_code} ao atualizar agenda {agenda_type}",
                agenda_type=agenda_type,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            self._log_read_failure("refresh_events_via_post", agenda_type, error_type="invalid_json")
            raise CalendarRefreshError(
                f"Resposta inválida ao atualizar agenda {agenda_type}",
                agenda_type=agenda_type,
                status_code=response.status_code,
            ) from exc
        return parse_events(body, self._zone)

    async def add_event(self, form: EventFormData, agenda_type: AgendaType) -> MutationOutcome:
        url = self._resolver.resolve(AgendaOperation.ADD, agenda_type)
        payload = build_event_payload(form, self._offset)
        return await self._mutate("add_event", url, payload, agenda_type)

    async def edit_event(
        self,
        event_id: str,
        form: EventFormData,
        agenda_type: AgendaType,
    ) -> MutationOutcome:
        url = self._resolver.resolve(AgendaOperation.EDIT, agenda_type)
        payload = build_event_payload(form, self._offset, event_id=event_id)
        return await self._mutate("edit_event", url, payload, agenda_type)

    async def delete_event(self, event_id: str, agenda_type: AgendaType) -> MutationOutcome:
        url = self._resolver.resolve(AgendaOperation.DELETE, agenda_type)
        return await self._mutate("delete_event", url, {"id": event_id}, agenda_type)

    async def _mutate(
        self,
        action: str,
        url: str,
        payload: dict[str, Any],
        agenda_type: AgendaType,
    ) -> MutationOutcome:
        extra: dict[str, Any] = {
            "component": _COMPONENT,
            "action": action,
            "agenda_type": str(agenda_type),
            "correlation_id": get_correlation_id(),
        }
        try:
            response = await self._send("POST", url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(
                "agenda_mutation_transport_error",
                extra={**extra, "result": "transient_failure", "error_type": type(exc).__name__},
            )
            return MutationOutcome.TRANSIENT_FAILURE

        body_text = response.text
        extra["status_code"] = response.status_code
        if is_not_found(response.status_code, body_text):
            # Para edit/delete o alvo já não existe: o chamador reconcilia com uma leitura.
            log = logger.warning if action == "add_event" else logger.info
            log(
                "agenda_mutation_target_not_found",
                extra={**extra, "result": "not_found", "response_text": _truncate(body_text)},
            )
            return MutationOutcome.NOT_FOUND

        if not response.is_success:
            logger.error(
                "agenda_mutation_http_error",
                extra={**extra, "result": "transient_failure", "response_text": _truncate(body_text)},
            )
            return MutationOutcome.TRANSIENT_FAILURE

        logger.info("agenda_mutation_applied", extra={**extra, "result": "success"})
        return MutationOutcome.SUCCESS

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.request(method, url, timeout=self._timeout, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, timeout=self._timeout, **kwargs)

    def _log_read_failure(
        self,
        action: str,
        agenda_type: AgendaType,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
    ) -> None:
        logger.warning(
            "agenda_read_failed",
            extra={
                "component": _COMPONENT,
                "action": action,
                "agenda_type": str(agenda_type),
                "status_code": status_code,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )


def _truncate(text: str) -> str:
    return text if len(text) <= _MAX_LOGGED_BODY else text[:_MAX_LOGGED_BODY] + "..."


__all__ = ["AgendaWebhookClient"]

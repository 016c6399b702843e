"""Testes do AgendaWebhookClient com transporte HTTP falso."""

from __future__ import annotations

import json
from datetime import date
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from app.constants.agenda import AgendaType
from app.constants.endpoints import build_default_endpoints
from app.domain.agenda import EventFormData, MutationOutcome
from app.domain.agenda_errors import CalendarReadError, CalendarRefreshError, CalendarSyncError
from app.infra.calendar import AgendaWebhookClient
from app.infra.stores.endpoint_override_store import MemoryEndpointOverrideStore
from app.services.endpoint_resolver import EndpointResolver

BASE = "https://hooks.example.com/webhook"

EVENT_JSON = {
    "id": "evt-1",
    "summary": "Consulta",
    "start": "2024-06-01T10:00:00-03:00",
    "end": "2024-06-01T11:00:00-03:00",
}


def _client(handler, base: str = BASE) -> tuple[AgendaWebhookClient, httpx.AsyncClient]:
    resolver = EndpointResolver(defaults=build_default_endpoints(base), store=MemoryEndpointOverrideStore())
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AgendaWebhookClient(resolver, http_client=http_client), http_client


def _form() -> EventFormData:
    return EventFormData(
        date=date(2024, 6, 1),
        start_time="10:00",
        end_time="11:00",
        summary="Consulta",
        description="",
        email="cliente@example.com",
    )


class TestFetchEvents:
    """Testes da leitura via GET."""

    @pytest.mark.asyncio
    async def test_date_filter_becomes_day_bounds(self) -> None:
        """Deve enviar start/end cobrindo o dia civil em -03:00."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[EVENT_JSON])

        client, http_client = _client(handler)
        async with http_client:
            events = await client.fetch_events(AgendaType.MENTORIA_CI, date(2024, 6, 1))

        assert [event.id for event in events] == ["evt-1"]
        request = seen[0]
        assert request.method == "GET"
        assert urlsplit(str(request.url)).path == "/webhook/agenda/mentoria-ci"
        query = parse_qs(urlsplit(str(request.url)).query)
        assert query["start"] == ["2024-06-01T00:00:00.000-03:00"]
        assert query["end"] == ["2024-06-01T23:59:59.999-03:00"]

    @pytest.mark.asyncio
    async def test_without_filter_sends_no_query(self) -> None:
        """Deve omitir a query quando não há filtro."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        client, http_client = _client(handler)
        async with http_client:
            await client.fetch_events(AgendaType.VENDA_CI)

        assert seen[0].url.query == b""
        assert seen[0].url.path == "/webhook/agenda/venda-ci"

    @pytest.mark.asyncio
    async def test_non_list_body_is_empty_agenda(self) -> None:
        """Deve devolver lista vazia para corpo que não é lista."""
        client, http_client = _client(lambda request: httpx.Response(200, json={"message": "sem eventos"}))
        async with http_client:
            assert await client.fetch_events(AgendaType.MENTORIA_CI) == []

    @pytest.mark.asyncio
    async def test_http_error_raises_read_error(self) -> None:
        """Deve levantar CalendarReadError em status não-2xx."""
        client, http_client = _client(lambda request: httpx.Response(502))
        async with http_client:
            with pytest.raises(CalendarReadError) as exc_info:
                await client.fetch_events(AgendaType.MENTORIA_CI)
        assert exc_info.value.status_code == 502
        assert exc_info.value.agenda_type == AgendaType.MENTORIA_CI

    @pytest.mark.asyncio
    async def test_transport_error_raises_read_error(self) -> None:
        """Deve converter erro de rede em CalendarReadError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        client, http_client = _client(handler)
        async with http_client:
            with pytest.raises(CalendarReadError):
                await client.fetch_events(AgendaType.MENTORIA_CI)

    @pytest.mark.asyncio
    async def test_invalid_json_raises_read_error(self) -> None:
        """Deve levantar CalendarReadError para corpo não-JSON."""
        client, http_client = _client(lambda request: httpx.Response(200, text="<html>"))
        async with http_client:
            with pytest.raises(CalendarReadError):
                await client.fetch_events(AgendaType.MENTORIA_CI)


class TestRefreshViaPost:
    """Testes da leitura alternativa via POST."""

    @pytest.mark.asyncio
    async def test_posts_bounds_and_parses(self) -> None:
        """Deve postar {start, end} e interpretar a lista."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[EVENT_JSON])

        client, http_client = _client(handler)
        async with http_client:
            events = await client.refresh_events_via_post(AgendaType.VENDA_CI, date(2024, 6, 1))

        assert len(events) == 1
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {
            "start": "2024-06-01T00:00:00.000-03:00",
            "end": "2024-06-01T23:59:59.999-03:00",
        }

    @pytest.mark.asyncio
    async def test_unfiltered_posts_empty_object(self) -> None:
        """Deve postar objeto vazio sem filtro."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        client, http_client = _client(handler)
        async with http_client:
            await client.refresh_events_via_post(AgendaType.MENTORIA_CI)

        assert json.loads(seen[0].content) == {}

    @pytest.mark.asyncio
    async def test_failure_raises_refresh_error(self) -> None:
        """Deve levantar CalendarRefreshError, distinto do erro de leitura."""
        client, http_client = _client(lambda request: httpx.Response(500))
        async with http_client:
            with pytest.raises(CalendarRefreshError) as exc_info:
                await client.refresh_events_via_post(AgendaType.MENTORIA_CI)
        assert not isinstance(exc_info.value, CalendarReadError)
        assert isinstance(exc_info.value, CalendarSyncError)


class TestMutations:
    """Testes de add/edit/delete."""

    @pytest.mark.asyncio
    async def test_add_posts_exact_payload(self) -> None:
        """Deve postar o payload de add no endpoint qualificado."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "new"})

        client, http_client = _client(handler)
        async with http_client:
            outcome = await client.add_event(_form(), AgendaType.MENTORIA_CI)

        assert outcome is MutationOutcome.SUCCESS
        assert bool(outcome) is True
        assert str(seen[0].url) == f"{BASE}/agenda/adicionar/mentoria-ci"
        assert json.loads(seen[0].content) == {
            "summary": "Consulta",
            "description": "",
            "start": "2024-06-01T10:00:00-03:00",
            "end": "2024-06-01T11:00:00-03:00",
            "email": "cliente@example.com",
        }

    @pytest.mark.asyncio
    async def test_edit_404_is_not_found(self) -> None:
        """Deve mapear 404 de edição para NOT_FOUND."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(404, text="Not Found")

        client, http_client = _client(handler)
        async with http_client:
            outcome = await client.edit_event("evt-1", _form(), AgendaType.VENDA_CI)

        assert outcome is MutationOutcome.NOT_FOUND
        assert bool(outcome) is False
        assert str(seen[0].url) == f"{BASE}/agenda/alterar/venda-ci"
        assert json.loads(seen[0].content)["id"] == "evt-1"

    @pytest.mark.asyncio
    async def test_delete_marker_in_body_is_not_found(self) -> None:
        """Deve reconhecer marcador de não encontrado no corpo."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message": "Event not found"})

        client, http_client = _client(handler)
        async with http_client:
            outcome = await client.delete_event("evt-9", AgendaType.MENTORIA_CI)

        assert outcome is MutationOutcome.NOT_FOUND
        assert json.loads(seen[0].content) == {"id": "evt-9"}
        assert str(seen[0].url) == f"{BASE}/agenda/excluir/mentoria-ci"

    @pytest.mark.asyncio
    async def test_server_error_is_transient_failure(self) -> None:
        """Deve devolver TRANSIENT_FAILURE para 5xx sem marcador."""
        client, http_client = _client(lambda request: httpx.Response(500, text="boom"))
        async with http_client:
            outcome = await client.delete_event("evt-1", AgendaType.MENTORIA_CI)
        assert outcome is MutationOutcome.TRANSIENT_FAILURE

    @pytest.mark.asyncio
    async def test_transport_error_never_escapes(self) -> None:
        """Deve absorver erro de rede em mutação."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ReadTimeout("slow", request=request)

        client, http_client = _client(handler)
        async with http_client:
            outcome = await client.add_event(_form(), AgendaType.MENTORIA_CI)

        assert outcome is MutationOutcome.TRANSIENT_FAILURE
        assert calls == 1


class TestMalformedUrl:
    """Testes com URL que o httpx não consegue interpretar."""

    BAD_BASE = "https://n8n.example:porta/webhook"

    def _unreachable(self, request: httpx.Request) -> httpx.Response:
        raise AssertionError("nenhuma requisição deveria sair")

    @pytest.mark.asyncio
    async def test_fetch_raises_read_error(self) -> None:
        """Deve converter URL inválida em CalendarReadError."""
        client, http_client = _client(self._unreachable, base=self.BAD_BASE)
        async with http_client:
            with pytest.raises(CalendarReadError):
                await client.fetch_events(AgendaType.MENTORIA_CI)

    @pytest.mark.asyncio
    async def test_refresh_raises_refresh_error(self) -> None:
        """Deve converter URL inválida em CalendarRefreshError."""
        client, http_client = _client(self._unreachable, base=self.BAD_BASE)
        async with http_client:
            with pytest.raises(CalendarRefreshError):
                await client.refresh_events_via_post(AgendaType.MENTORIA_CI)

    @pytest.mark.asyncio
    async def test_mutation_returns_transient_failure(self) -> None:
        """Deve devolver TRANSIENT_FAILURE sem levantar."""
        client, http_client = _client(self._unreachable, base=self.BAD_BASE)
        async with http_client:
            outcome = await client.delete_event("evt-1", AgendaType.VENDA_CI)
        assert outcome is MutationOutcome.TRANSIENT_FAILURE

"""Coordinator da agenda: carga, polling e reconciliação após mutações.

Mantém a lista autoritativa de eventos para o par (tipo de agenda,
filtro de data). Toda leitura é marcada com o contexto em que foi
emitida; se o contexto mudou até a resposta chegar, o resultado é
descartado. A lista local nunca é editada: após cada mutação ela é
substituída por uma leitura nova do store remoto.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.constants.agenda import DEFAULT_AGENDA_TYPE, AgendaType
from app.coordinators.agenda.state import AgendaSyncState, ReadTag, SyncStatus
from app.domain.agenda import MutationOutcome, search_events
from app.domain.agenda_errors import CalendarSyncError, MutationInProgressError
from app.observability import correlation_scope
from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import date

    from app.domain.agenda import CalendarEvent, EventFormData
    from app.protocols.agenda_service import AgendaServiceProtocol
    from app.protocols.notifier import NotifierProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "agenda_sync"
DEFAULT_POLL_INTERVAL_SECONDS = 30.0

MSG_LOAD_FAILED = "Não conseguimos carregar os eventos. Tente novamente em alguns instantes."
MSG_REFRESH_OK = "Eventos atualizados com sucesso!"
MSG_REFRESH_FAILED = "Não conseguimos atualizar os eventos, tente novamente."
MSG_ADD_OK = "Evento adicionado com sucesso!"
MSG_ADD_FAILED = "Falha ao adicionar evento. Tente novamente."
MSG_EDIT_OK = "Evento atualizado com sucesso!"
MSG_EDIT_FAILED = "Falha ao atualizar evento. Tente novamente."
MSG_EDIT_NOT_FOUND = "Falha ao atualizar evento. O evento pode não existir mais."
MSG_DELETE_OK = "Evento excluído com sucesso!"
MSG_DELETE_FAILED = "Falha ao excluir evento. Tente novamente."
MSG_DELETE_NOT_FOUND = "Falha ao excluir evento. O evento pode não existir mais."


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AgendaSyncCoordinator:
    """Dono do estado de sincronização de uma sessão do painel."""

    def __init__(
        self,
        service: AgendaServiceProtocol,
        notifier: NotifierProtocol,
        *,
        agenda_type: AgendaType = DEFAULT_AGENDA_TYPE,
        date_filter: date | None = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._service = service
        self._notifier = notifier
        self._poll_interval = poll_interval_seconds
        self._clock = clock
        self._state = AgendaSyncState(agenda_type=AgendaType(agenda_type), date_filter=date_filter)
        self._poll_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Leitura do estado
    # ------------------------------------------------------------------

    @property
    def state(self) -> AgendaSyncState:
        return self._state.snapshot()

    @property
    def events(self) -> list[CalendarEvent]:
        return list(self._state.events)

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def visible_events(self, search_term: str = "") -> list[CalendarEvent]:
        """Eventos filtrados pelo termo de busca, ordenados por início."""
        return search_events(self._state.events, search_term)

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Carga inicial e início do polling."""
        self._restart_polling()
        await self.load()

    async def close(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def change_agenda_type(self, agenda_type: AgendaType) -> None:
        """Troca de agenda: limpa tudo antes de ler a nova."""
        new_type = AgendaType(agenda_type)
        if new_type == self._state.agenda_type:
            return
        logger.info(
            "agenda_type_changed",
            extra={
                "component": _COMPONENT,
                "from_agenda_type": str(self._state.agenda_type),
                "agenda_type": str(new_type),
            },
        )
        state = self._state
        state.agenda_type = new_type
        state.generation += 1
        state.events = []
        state.error = None
        state.is_loading = True
        state.status = SyncStatus.LOADING
        self._restart_polling()
        await self.load()

    async def change_date_filter(self, date_filter: date | None) -> None:
        if date_filter == self._state.date_filter:
            return
        self._state.date_filter = date_filter
        self._state.generation += 1
        self._restart_polling()
        await self.load()

    # ------------------------------------------------------------------
    # Leituras
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Lê via GET; com cache vazio tenta um único POST como alternativa.

        Returns:
            True se a lista foi atualizada com dados desta leitura.
        """
        tag = self._state.tag()
        self._mark_loading()
        with correlation_scope():
            try:
                events = await self._service.fetch_events(tag.agenda_type, tag.date_filter)
            except CalendarSyncError as exc:
                return await self._handle_load_failure(tag, exc)
            return self._apply(tag, events)

    async def refresh(self) -> bool:
        """Atualização pedida pelo usuário (sempre GET)."""
        return await self.load()

    async def refresh_via_post(self) -> bool:
        """Atualização explícita via POST, com notificação do resultado."""
        tag = self._state.tag()
        self._mark_loading()
        with correlation_scope():
            try:
                events = await self._service.refresh_events_via_post(
                    tag.agenda_type, tag.date_filter
                )
            except CalendarSyncError as exc:
                if self._discard_if_stale(tag, "refresh_via_post"):
                    return False
                self._mark_failed(exc)
                self._notifier.error(MSG_REFRESH_FAILED)
                return False
            applied = self._apply(tag, events)
            if applied:
                self._notifier.success(MSG_REFRESH_OK)
            return applied

    async def poll_once(self) -> bool:
        """Leitura silenciosa: falha só vai para o log."""
        tag = self._state.tag()
        with correlation_scope():
            try:
                events = await self._service.fetch_events(tag.agenda_type, tag.date_filter)
            except CalendarSyncError as exc:
                logger.warning(
                    "agenda_poll_failed",
                    extra={
                        "component": _COMPONENT,
                        "agenda_type": str(tag.agenda_type),
                        "error_type": type(exc).__name__,
                        "status_code": exc.status_code,
                    },
                )
                return False
            return self._apply(tag, events)

    async def _handle_load_failure(self, tag: ReadTag, exc: CalendarSyncError) -> bool:
        if self._discard_if_stale(tag, "load"):
            return False
        logger.warning(
            "agenda_load_failed",
            extra={
                "component": _COMPONENT,
                "agenda_type": str(tag.agenda_type),
                "error_type": type(exc).__name__,
                "status_code": exc.status_code,
            },
        )
        if self._state.events:
            # Mantém a lista anterior visível; o próximo poll corrige.
            self._mark_failed(exc)
            return False

        log_fallback(logger, _COMPONENT, reason="get_failed", agenda_type=str(tag.agenda_type))
        try:
            events = await self._service.refresh_events_via_post(tag.agenda_type, tag.date_filter)
        except CalendarSyncError as fallback_exc:
            if self._discard_if_stale(tag, "load_fallback"):
                return False
            logger.error(
                "agenda_load_fallback_failed",
                extra={
                    "component": _COMPONENT,
                    "agenda_type": str(tag.agenda_type),
                    "error_type": type(fallback_exc).__name__,
                    "status_code": fallback_exc.status_code,
                },
            )
            self._mark_failed(fallback_exc)
            self._notifier.error(MSG_LOAD_FAILED)
            return False
        return self._apply(tag, events)

    def _apply(self, tag: ReadTag, events: list[CalendarEvent]) -> bool:
        if self._discard_if_stale(tag, "apply"):
            return False
        state = self._state
        state.events = list(events)
        state.last_updated = self._clock()
        state.error = None
        state.is_loading = False
        state.status = SyncStatus.LOADED
        logger.info(
            "agenda_events_loaded",
            extra={
                "component": _COMPONENT,
                "agenda_type": str(tag.agenda_type),
                "event_count": len(events),
            },
        )
        return True

    def _discard_if_stale(self, tag: ReadTag, stage: str) -> bool:
        if self._state.matches(tag):
            return False
        logger.info(
            "stale_read_discarded",
            extra={
                "component": _COMPONENT,
                "stage": stage,
                "issued_agenda_type": str(tag.agenda_type),
                "agenda_type": str(self._state.agenda_type),
            },
        )
        return True

    def _mark_loading(self) -> None:
        self._state.is_loading = True
        self._state.status = SyncStatus.LOADING

    def _mark_failed(self, exc: Exception) -> None:
        self._state.error = exc
        self._state.is_loading = False
        self._state.status = SyncStatus.FAILED

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _restart_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
        self._poll_task = asyncio.create_task(
            self._poll_loop(self._state.tag()),
            name=f"agenda-poll-{self._state.agenda_type}",
        )

    async def _poll_loop(self, tag: ReadTag) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            if not self._state.matches(tag):
                return
            logger.debug(
                "agenda_poll_tick",
                extra={"component": _COMPONENT, "agenda_type": str(tag.agenda_type)},
            )
            await self.poll_once()

    # ------------------------------------------------------------------
    # Mutações
    # ------------------------------------------------------------------

    async def add_event(self, form: EventFormData) -> MutationOutcome:
        agenda_type = self._state.agenda_type
        return await self._run_mutation(
            "add_event",
            lambda: self._service.add_event(form, agenda_type),
            resync_on_failure=False,
            success_message=MSG_ADD_OK,
            failure_message=MSG_ADD_FAILED,
            not_found_message=MSG_ADD_FAILED,
        )

    async def edit_event(self, event_id: str, form: EventFormData) -> MutationOutcome:
        agenda_type = self._state.agenda_type
        return await self._run_mutation(
            "edit_event",
            lambda: self._service.edit_event(event_id, form, agenda_type),
            resync_on_failure=True,
            success_message=MSG_EDIT_OK,
            failure_message=MSG_EDIT_FAILED,
            not_found_message=MSG_EDIT_NOT_FOUND,
        )

    async def delete_event(self, event_id: str) -> MutationOutcome:
        agenda_type = self._state.agenda_type
        return await self._run_mutation(
            "delete_event",
            lambda: self._service.delete_event(event_id, agenda_type),
            resync_on_failure=True,
            success_message=MSG_DELETE_OK,
            failure_message=MSG_DELETE_FAILED,
            not_found_message=MSG_DELETE_NOT_FOUND,
        )

    async def _run_mutation(
        self,
        action: str,
        call: Callable[[], Awaitable[MutationOutcome]],
        *,
        resync_on_failure: bool,
        success_message: str,
        failure_message: str,
        not_found_message: str,
    ) -> MutationOutcome:
        if self._state.is_submitting:
            raise MutationInProgressError(f"{action} recusado: mutação em andamento")
        self._state.is_submitting = True
        try:
            with correlation_scope():
                outcome = await call()
                logger.info(
                    "agenda_mutation_finished",
                    extra={
                        "component": _COMPONENT,
                        "action": action,
                        "result": str(outcome),
                        "agenda_type": str(self._state.agenda_type),
                    },
                )
                if outcome:
                    await self.load()
                    self._notifier.success(success_message)
                    return outcome
                if resync_on_failure:
                    await self.load()
                if outcome is MutationOutcome.NOT_FOUND:
                    self._notifier.error(not_found_message)
                else:
                    self._notifier.error(failure_message)
                return outcome
        finally:
            self._state.is_submitting = False


__all__ = ["DEFAULT_POLL_INTERVAL_SECONDS", "AgendaSyncCoordinator"]

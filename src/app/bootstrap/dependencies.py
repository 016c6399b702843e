"""Factories das dependências da agenda e das integrações de saída.

Tudo é construído uma vez no startup e injetado; os componentes não leem
env nem arquivos por conta própria.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from app.coordinators.agenda import AgendaSyncCoordinator
from app.infra.calendar import AgendaWebhookClient
from app.infra.http import WebhookDispatcher, WebhookOptions
from app.infra.stores import JsonFileEndpointOverrideStore, MemoryEndpointOverrideStore
from app.services.backoffice_webhooks import BackofficeWebhooks
from app.services.endpoint_resolver import EndpointResolver
from config.settings import get_agenda_settings, get_webhook_settings

if TYPE_CHECKING:
    from app.protocols.endpoint_override_store import EndpointOverrideStoreProtocol
    from app.protocols.notifier import NotifierProtocol
    from config.settings import AgendaSettings, WebhookSettings

logger = logging.getLogger(__name__)


def create_override_store(settings: WebhookSettings) -> EndpointOverrideStoreProtocol:
    """Cria o store de overrides conforme ENDPOINT_OVERRIDES_BACKEND.

    - "file" (padrão): arquivo JSON em WEBHOOK_OVERRIDES_PATH
    - "memory": apenas dev/test
    """
    backend = os.getenv("ENDPOINT_OVERRIDES_BACKEND", "file").lower()

    if backend == "file":
        logger.info(
            "override_store_created",
            extra={"backend": "file", "path": settings.webhook_overrides_path},
        )
        return JsonFileEndpointOverrideStore(settings.webhook_overrides_path)

    if backend == "memory":
        environment = os.getenv("ENVIRONMENT", "development")
        if environment not in ("development", "test"):
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        return MemoryEndpointOverrideStore()

    msg = f"ENDPOINT_OVERRIDES_BACKEND inválido: {backend}"
    raise ValueError(msg)


@dataclass
class AgendaRuntime:
    """Grafo de objetos montado no startup."""

    resolver: EndpointResolver
    dispatcher: WebhookDispatcher
    agenda_client: AgendaWebhookClient
    webhooks: BackofficeWebhooks
    http_client: httpx.AsyncClient
    agenda_settings: AgendaSettings

    async def aclose(self) -> None:
        await self.http_client.aclose()


def build_agenda_runtime(
    *,
    webhook_settings: WebhookSettings | None = None,
    agenda_settings: AgendaSettings | None = None,
    store: EndpointOverrideStoreProtocol | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AgendaRuntime:
    """Monta resolver, dispatcher, client da agenda e fachada de webhooks."""
    webhooks_cfg = webhook_settings or get_webhook_settings()
    agenda_cfg = agenda_settings or get_agenda_settings()
    client = http_client or httpx.AsyncClient()

    resolver = EndpointResolver.from_settings(
        webhooks_cfg,
        store if store is not None else create_override_store(webhooks_cfg),
    )
    options = WebhookOptions.from_settings(webhooks_cfg)
    dispatcher = WebhookDispatcher(options, http_client=client)
    agenda_client = AgendaWebhookClient(
        resolver,
        http_client=client,
        utc_offset=agenda_cfg.agenda_utc_offset,
        timeout_seconds=webhooks_cfg.agenda_request_timeout_seconds,
    )
    return AgendaRuntime(
        resolver=resolver,
        dispatcher=dispatcher,
        agenda_client=agenda_client,
        webhooks=BackofficeWebhooks(resolver, dispatcher),
        http_client=client,
        agenda_settings=agenda_cfg,
    )


def create_agenda_coordinator(
    runtime: AgendaRuntime,
    notifier: NotifierProtocol,
) -> AgendaSyncCoordinator:
    settings = runtime.agenda_settings
    return AgendaSyncCoordinator(
        runtime.agenda_client,
        notifier,
        agenda_type=settings.default_agenda_type,
        poll_interval_seconds=settings.agenda_poll_interval_seconds,
    )

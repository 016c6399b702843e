"""Contrato de entrega de webhooks com retry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.infra.http.webhook_dispatcher import WebhookOptions


class WebhookDispatcherProtocol(Protocol):
    """Entrega JSON via POST; nunca levanta exceção para falhas de entrega."""

    async def deliver(
        self,
        url: str,
        payload: Any,
        options: WebhookOptions | None = None,
        *,
        operation: str | None = None,
    ) -> bool: ...

    async def deliver_multipart(
        self,
        url: str,
        *,
        files: dict[str, tuple[str, bytes, str]],
        data: dict[str, str] | None = None,
        options: WebhookOptions | None = None,
        operation: str | None = None,
        log_payload: Any = None,
    ) -> bool: ...

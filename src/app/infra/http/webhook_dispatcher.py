"""Entrega de webhooks JSON com retry linear e timeout por tentativa.

Receptores (controle do bot, agenda, RAG) ficam lentos ou indisponíveis
de vez em quando; o dispatcher tenta algumas vezes com espera fixa e
devolve só sucesso/falha. Nenhuma falha de entrega vira exceção.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

from app.observability import get_correlation_id
from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol

if TYPE_CHECKING:
    from config.settings import WebhookSettings

logger = logging.getLogger(__name__)

_COMPONENT = "webhook_dispatcher"
_MAX_LOGGED_BODY = 1000


@dataclass(frozen=True)
class WebhookOptions:
    """Política de retry de uma entrega."""

    retries: int = 3
    retry_delay_ms: int = 1000
    timeout_ms: int = 10000

    def __post_init__(self) -> None:
        if self.retries < 1:
            raise ValueError("retries deve ser >= 1")
        if self.retry_delay_ms < 0:
            raise ValueError("retry_delay_ms deve ser >= 0")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms deve ser > 0")

    @classmethod
    def from_settings(cls, settings: WebhookSettings) -> WebhookOptions:
        return cls(
            retries=settings.webhook_retries,
            retry_delay_ms=settings.webhook_retry_delay_ms,
            timeout_ms=settings.webhook_timeout_ms,
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000


@dataclass
class _AttemptResult:
    ok: bool
    status_code: int | None = None
    error: str | None = None
    retryable: bool = True
    extra: dict[str, Any] = field(default_factory=dict)


def log_webhook_result(
    operation: str,
    success: bool,
    payload: Any = None,
    error: str | None = None,
) -> None:
    """Resumo final da entrega, para monitoramento.

    Sem efeito no fluxo; carrega timestamp e cópia serializada do payload.
    """
    extra: dict[str, Any] = {
        "component": _COMPONENT,
        "operation": operation,
        "success": success,
        "timestamp": datetime.now(UTC).isoformat(),
        "correlation_id": get_correlation_id(),
    }
    if payload is not None:
        extra["data"] = _serialize_for_log(payload)
    if error:
        extra["error"] = error
    if success:
        logger.info("webhook_delivery_succeeded", extra=extra)
    else:
        logger.error("webhook_delivery_failed", extra=extra)


class WebhookDispatcher(WebhookDispatcherProtocol):
    """POST com até `retries` tentativas, em JSON ou multipart.

    Um `httpx.AsyncClient` pode ser injetado (testes, pool compartilhado);
    sem ele, cada entrega abre e fecha o próprio client.
    """

    def __init__(
        self,
        options: WebhookOptions | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._options = options or WebhookOptions()
        self._http_client = http_client
        self._extra_headers = dict(default_headers or {})
        self._headers = {"Content-Type": "application/json", **self._extra_headers}

    @property
    def options(self) -> WebhookOptions:
        return self._options

    async def deliver(
        self,
        url: str,
        payload: Any,
        options: WebhookOptions | None = None,
        *,
        operation: str | None = None,
    ) -> bool:
        """Entrega `payload` em `url`; True no primeiro 2xx, False ao esgotar tentativas."""
        opts = options or self._options
        label = operation or url
        try:
            content = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            log_webhook_result(label, False, error=f"payload_not_serializable: {exc}")
            return False

        request_kwargs = {"content": content, "headers": self._headers}
        return await self._deliver(url, request_kwargs, payload, opts, label)

    async def deliver_multipart(
        self,
        url: str,
        *,
        files: dict[str, tuple[str, bytes, str]],
        data: dict[str, str] | None = None,
        options: WebhookOptions | None = None,
        operation: str | None = None,
        log_payload: Any = None,
    ) -> bool:
        """Entrega um formulário multipart com a mesma política de retry.

        O corpo é remontado a cada tentativa; `log_payload` substitui o
        conteúdo binário no resumo final.
        """
        opts = options or self._options
        label = operation or url
        request_kwargs = {"files": files, "data": data or {}, "headers": self._extra_headers}
        return await self._deliver(url, request_kwargs, log_payload, opts, label)

    async def _deliver(
        self,
        url: str,
        request_kwargs: dict[str, Any],
        payload: Any,
        opts: WebhookOptions,
        label: str,
    ) -> bool:
        if self._http_client is not None:
            return await self._deliver_with(self._http_client, url, request_kwargs, payload, opts, label)
        async with httpx.AsyncClient() as client:
            return await self._deliver_with(client, url, request_kwargs, payload, opts, label)

    async def _deliver_with(
        self,
        client: httpx.AsyncClient,
        url: str,
        request_kwargs: dict[str, Any],
        payload: Any,
        opts: WebhookOptions,
        label: str,
    ) -> bool:
        last_error: str | None = None
        for attempt in range(1, opts.retries + 1):
            result = await self._attempt(client, url, request_kwargs, opts)
            logger.info(
                "webhook_attempt",
                extra={
                    "component": _COMPONENT,
                    "url": url,
                    "attempt": attempt,
                    "max_attempts": opts.retries,
                    "result": "ok" if result.ok else "failed",
                    "status_code": result.status_code,
                    "error": result.error,
                    **result.extra,
                },
            )
            if result.ok:
                log_webhook_result(label, True, payload)
                return True

            last_error = result.error
            if not result.retryable:
                break
            if attempt < opts.retries:
                logger.info(
                    "webhook_retry_scheduled",
                    extra={
                        "component": _COMPONENT,
                        "url": url,
                        "attempt": attempt,
                        "retry_delay_ms": opts.retry_delay_ms,
                    },
                )
                await asyncio.sleep(opts.retry_delay_seconds)

        log_webhook_result(label, False, payload, error=last_error)
        return False

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        request_kwargs: dict[str, Any],
        opts: WebhookOptions,
    ) -> _AttemptResult:
        try:
            # wait_for garante o prazo mesmo quando o transport ignora o timeout do httpx.
            response = await asyncio.wait_for(
                client.post(url, timeout=opts.timeout_seconds, **request_kwargs),
                timeout=opts.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException):
            return _AttemptResult(ok=False, error="timeout")
        except httpx.InvalidURL as exc:
            # URL malformada não melhora com nova tentativa.
            return _AttemptResult(ok=False, error=f"invalid_url: {exc}", retryable=False)
        except httpx.HTTPError as exc:
            return _AttemptResult(ok=False, error=type(exc).__name__)

        if response.is_success:
            return _AttemptResult(
                ok=True,
                status_code=response.status_code,
                extra={"response_text": _truncate(response.text)} if response.text else {},
            )
        return _AttemptResult(
            ok=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}: {response.reason_phrase}",
        )


def _truncate(text: str) -> str:
    return text if len(text) <= _MAX_LOGGED_BODY else text[:_MAX_LOGGED_BODY] + "..."


def _serialize_for_log(payload: Any) -> str:
    try:
        return _truncate(json.dumps(payload, ensure_ascii=False, default=str))
    except (TypeError, ValueError):
        return "<unserializable>"


__all__ = ["WebhookDispatcher", "WebhookOptions", "log_webhook_result"]

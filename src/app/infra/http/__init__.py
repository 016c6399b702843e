"""Infra HTTP — entrega de webhooks de saída."""

from app.infra.http.webhook_dispatcher import (
    WebhookDispatcher,
    WebhookOptions,
    log_webhook_result,
)

__all__ = ["WebhookDispatcher", "WebhookOptions", "log_webhook_result"]

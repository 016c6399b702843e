"""Settings dos webhooks de saída.

Base das URLs padrão, local do arquivo de overrides e política padrão de
retry do dispatcher.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_WEBHOOK_BASE_URL = "https://endpoint.comunidadeimobiliaria.com.br/webhook"


class WebhookSettings(BaseModel):
    """Configurações de entrega de webhooks."""

    model_config = ConfigDict(extra="ignore")

    webhook_base_url: str = Field(
        default=DEFAULT_WEBHOOK_BASE_URL,
        min_length=1,
        description="Prefixo das URLs padrão de todos os webhooks.",
    )
    webhook_overrides_path: str = Field(
        default="webhook_endpoints.json",
        description="Arquivo JSON com as URLs sobrescritas pelo usuário.",
    )
    webhook_retries: int = Field(
        default=3,
        ge=1,
        description="Número máximo de tentativas por entrega.",
    )
    webhook_retry_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Espera entre tentativas, em milissegundos.",
    )
    webhook_timeout_ms: int = Field(
        default=10000,
        gt=0,
        description="Prazo de cada tentativa, em milissegundos.",
    )
    agenda_request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout das chamadas de leitura e mutação da agenda.",
    )


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    return raw_value.strip() or None


def _load_webhooks_from_env() -> WebhookSettings:
    return WebhookSettings(
        webhook_base_url=(
            _read_optional_env("WEBHOOK_BASE_URL") or DEFAULT_WEBHOOK_BASE_URL
        ).rstrip("/"),
        webhook_overrides_path=(
            _read_optional_env("WEBHOOK_OVERRIDES_PATH") or "webhook_endpoints.json"
        ),
        webhook_retries=int(os.getenv("WEBHOOK_RETRIES", "3")),
        webhook_retry_delay_ms=int(os.getenv("WEBHOOK_RETRY_DELAY_MS", "1000")),
        webhook_timeout_ms=int(os.getenv("WEBHOOK_TIMEOUT_MS", "10000")),
        agenda_request_timeout_seconds=float(
            os.getenv("AGENDA_REQUEST_TIMEOUT_SECONDS", "15")
        ),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhooks_from_env()


__all__ = ["DEFAULT_WEBHOOK_BASE_URL", "WebhookSettings", "get_webhook_settings"]

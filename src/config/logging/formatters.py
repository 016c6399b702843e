"""Formatter JSON com campos padronizados."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "service",
    "environment",
    "correlation_id",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria o formatter JSON usado pelo handler raiz.

    Exemplo de output:
        {"asctime": "2024-06-01 10:00:00,000", "level": "INFO",
         "logger": "app.infra.http.webhook_dispatcher", "message": "webhook_attempt",
         "service": "painel_imobiliaria", "environment": "development",
         "correlation_id": "0f1c...", "attempt": 1}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)

"""Configuração centralizada de logging.

Um único handler JSON no root logger; os módulos usam
`logging.getLogger(__name__)` e passam contexto via `extra`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "painel_imobiliaria"

# Bibliotecas HTTP logam cada request em INFO; o dispatcher já registra as tentativas.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    environment: str = "development",
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o processo.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço injetado em todo registro.
        environment: Ambiente de execução injetado em todo registro.
        correlation_id_getter: Função que retorna o correlation_id do contexto.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, environment, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo (atalho para logging.getLogger)."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    **context: object,
) -> None:
    """Registra que um caminho alternativo foi acionado.

    Exemplo:
        log_fallback(logger, "agenda_sync", reason="get_failed", agenda_type="venda-ci")
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    extra.update(context)
    logger.info("Fallback applied for %s", component, extra=extra)

"""Logging estruturado JSON do painel.

Uso:
    from config.logging import configure_logging

    # Uma vez, no bootstrap
    configure_logging(level="INFO", service_name="painel_imobiliaria")

    # Em cada módulo
    logger = logging.getLogger(__name__)
    logger.info("agenda_events_loaded", extra={"agenda_type": "mentoria-ci"})

Todo registro carrega: asctime, level, logger, message, service,
environment e correlation_id.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]

"""Bootstrap da aplicação — inicialização e wiring.

Composition root: configura logging, valida settings e endpoints e monta
o grafo de dependências.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings
    from app.bootstrap.dependencies import build_agenda_runtime

    initialize_app()
    runtime = build_agenda_runtime()
    validate_runtime_settings(runtime.resolver)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings

if TYPE_CHECKING:
    from app.services.endpoint_resolver import EndpointResolver

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging estruturado conforme as settings base.

    Deve ser chamada uma vez no início do processo.
    """
    settings = get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        environment=settings.environment,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Logging em DEBUG para testes."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        environment="development",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings(resolver: EndpointResolver | None = None) -> None:
    """Valida settings e endpoints no startup.

    Endpoints sem URL são sempre fatais. Demais erros só bloqueiam o boot
    em `staging`/`production`.

    Raises:
        EndpointConfigurationError: chave de operação sem URL válida.
        RuntimeError: settings inválidas em ambiente estrito.
    """
    settings = get_base_settings()
    if resolver is not None:
        resolver.validate()

    errors = [f"base: {error}" for error in settings.validate()]
    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": settings.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": settings.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if settings.is_strict:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {settings.environment}:\n{details}")


__all__ = ["initialize_app", "initialize_test_app", "validate_runtime_settings"]

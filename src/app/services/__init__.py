"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.backoffice_webhooks import BackofficeWebhooks
from app.services.endpoint_resolver import (
    EndpointConfigurationError,
    EndpointResolver,
    UnknownEndpointError,
)
from app.services.notifications import LoggingNotifier

__all__ = [
    "BackofficeWebhooks",
    "EndpointConfigurationError",
    "EndpointResolver",
    "LoggingNotifier",
    "UnknownEndpointError",
]

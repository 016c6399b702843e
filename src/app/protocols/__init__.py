"""Protocolos e contratos do core da aplicação."""

from .agenda_service import AgendaServiceProtocol
from .endpoint_override_store import EndpointOverrideStoreProtocol
from .notifier import NotifierProtocol
from .webhook_dispatcher import WebhookDispatcherProtocol

__all__ = [
    "AgendaServiceProtocol",
    "EndpointOverrideStoreProtocol",
    "NotifierProtocol",
    "WebhookDispatcherProtocol",
]

"""Integrações de saída do painel (bot, RAG, instâncias, clientes, agente).

Todas passam pelo mesmo dispatcher com retry; cada método resolve a URL
pela chave de operação, monta o payload esperado pelo receptor e devolve
só sucesso/falha.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.constants.endpoints import EndpointKey
from app.observability import correlation_scope

if TYPE_CHECKING:
    from app.domain.client_contact import ClientContact
    from app.infra.http.webhook_dispatcher import WebhookOptions
    from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol
    from app.services.endpoint_resolver import EndpointResolver

logger = logging.getLogger(__name__)


class BackofficeWebhooks:
    """Fachada das chamadas de webhook fora da agenda."""

    def __init__(
        self,
        resolver: EndpointResolver,
        dispatcher: WebhookDispatcherProtocol,
        *,
        options: WebhookOptions | None = None,
    ) -> None:
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._options = options

    # Controle do bot --------------------------------------------------

    async def send_message(
        self,
        phone: str,
        message: str,
        pause_duration: int | None = None,
    ) -> bool:
        """Envia mensagem manual; `pause_duration` (segundos) pausa o bot, None não pausa."""
        if not message.strip():
            raise ValueError("Mensagem não pode ser vazia")
        return await self._call(
            EndpointKey.MENSAGEM,
            {"phone": phone, "message": message, "pauseDuration": pause_duration},
        )

    async def pause_bot(self, phone_number: str, duration: int | None) -> bool:
        return await self._call(
            EndpointKey.PAUSA_BOT,
            {"phoneNumber": phone_number, "duration": duration, "unit": "seconds"},
        )

    async def start_bot(self, phone_number: str) -> bool:
        return await self._call(EndpointKey.INICIA_BOT, {"phoneNumber": phone_number})

    # Base de conhecimento ---------------------------------------------

    async def upload_document(
        self,
        filename: str,
        content: bytes,
        category: str,
        content_type: str = "application/octet-stream",
    ) -> bool:
        """Envia um arquivo para ingestão na base (multipart `file` + `category`)."""
        filename, category = filename.strip(), category.strip()
        if not filename or not category:
            raise ValueError("Nome do arquivo e categoria são obrigatórios")
        url = self._resolver.resolve(EndpointKey.ENVIA_RAG)
        with correlation_scope():
            delivered = await self._dispatcher.deliver_multipart(
                url,
                files={"file": (filename, content, content_type)},
                data={"category": category},
                options=self._options,
                operation=str(EndpointKey.ENVIA_RAG),
                log_payload={"filename": filename, "category": category, "size": len(content)},
            )
        self._log_if_not_delivered(EndpointKey.ENVIA_RAG, delivered)
        return delivered

    async def delete_document(self, title: str) -> bool:
        return await self._call(EndpointKey.EXCLUIR_ARQUIVO_RAG, {"titulo": title})

    async def clear_knowledge_base(self) -> bool:
        return await self._call(EndpointKey.EXCLUIR_RAG, {})

    # Instâncias WhatsApp ----------------------------------------------

    async def create_instance(self, name: str, webhook_path: str) -> bool:
        name, webhook_path = name.strip(), webhook_path.strip()
        if not name or not webhook_path:
            raise ValueError("Nome e webhook_path são obrigatórios")
        return await self._call(
            EndpointKey.INSTANCIA_EVOLUTION,
            {"name": name, "webhookPath": webhook_path},
        )

    async def refresh_qr_code(self, instance_name: str) -> bool:
        return await self._call(EndpointKey.ATUALIZAR_QR_CODE, {"instanceName": instance_name})

    # Clientes ---------------------------------------------------------

    async def notify_client_created(self, contact: ClientContact) -> bool:
        return await self._call(EndpointKey.CRIA_USUARIO, contact.to_webhook_payload())

    async def notify_client_updated(self, client_id: str, contact: ClientContact) -> bool:
        return await self._call(
            EndpointKey.EDITA_USUARIO,
            {"id": client_id, **contact.to_webhook_payload()},
        )

    async def notify_client_deleted(self, phone: str) -> bool:
        return await self._call(EndpointKey.EXCLUI_USUARIO, {"phone": phone})

    # Agente -----------------------------------------------------------

    async def push_agent_config(self, config: dict[str, Any]) -> bool:
        return await self._call(EndpointKey.CONFIG_AGENT, config)

    async def _call(self, key: EndpointKey, payload: Any) -> bool:
        url = self._resolver.resolve(key)
        with correlation_scope():
            delivered = await self._dispatcher.deliver(
                url,
                payload,
                self._options,
                operation=str(key),
            )
        self._log_if_not_delivered(key, delivered)
        return delivered

    def _log_if_not_delivered(self, key: EndpointKey, delivered: bool) -> None:
        if not delivered:
            logger.warning(
                "backoffice_webhook_not_delivered",
                extra={"component": "backoffice_webhooks", "operation": str(key)},
            )


__all__ = ["BackofficeWebhooks"]

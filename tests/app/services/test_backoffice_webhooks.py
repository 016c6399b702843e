"""Testes da fachada BackofficeWebhooks."""

from __future__ import annotations

from typing import Any

import pytest

from app.constants.endpoints import build_default_endpoints
from app.domain.client_contact import ClientContact
from app.infra.http import WebhookOptions
from app.infra.stores.endpoint_override_store import MemoryEndpointOverrideStore
from app.services.backoffice_webhooks import BackofficeWebhooks
from app.services.endpoint_resolver import EndpointResolver

BASE = "https://hooks.example.com/webhook"


class RecordingDispatcher:
    """Dispatcher falso que guarda cada entrega."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.deliveries: list[dict[str, Any]] = []

    async def deliver(
        self,
        url: str,
        payload: Any,
        options: WebhookOptions | None = None,
        *,
        operation: str | None = None,
    ) -> bool:
        self.deliveries.append(
            {"url": url, "payload": payload, "options": options, "operation": operation}
        )
        return self.result

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
        self.deliveries.append(
            {
                "url": url,
                "files": files,
                "data": data,
                "options": options,
                "operation": operation,
                "payload": log_payload,
            }
        )
        return self.result


def _webhooks(
    dispatcher: RecordingDispatcher,
    overrides: dict[str, str] | None = None,
    options: WebhookOptions | None = None,
) -> BackofficeWebhooks:
    resolver = EndpointResolver(
        defaults=build_default_endpoints(BASE),
        store=MemoryEndpointOverrideStore(overrides),
    )
    return BackofficeWebhooks(resolver, dispatcher, options=options)


class TestBotControl:
    """Testes de controle do bot."""

    @pytest.mark.asyncio
    async def test_pause_bot_payload(self) -> None:
        """Deve enviar duração em segundos para pausaBot."""
        dispatcher = RecordingDispatcher()
        assert await _webhooks(dispatcher).pause_bot("5511999999999", 3600) is True

        [delivery] = dispatcher.deliveries
        assert delivery["url"] == f"{BASE}/pausa_bot"
        assert delivery["operation"] == "pausaBot"
        assert delivery["payload"] == {"phoneNumber": "5511999999999", "duration": 3600, "unit": "seconds"}

    @pytest.mark.asyncio
    async def test_send_message_uses_override(self) -> None:
        """Deve usar a URL sobrescrita quando existir."""
        dispatcher = RecordingDispatcher()
        webhooks = _webhooks(dispatcher, {"mensagem": "https://custom.example/msg"})

        await webhooks.send_message("5511999999999", "Olá!", pause_duration=None)

        [delivery] = dispatcher.deliveries
        assert delivery["url"] == "https://custom.example/msg"
        assert delivery["payload"] == {"phone": "5511999999999", "message": "Olá!", "pauseDuration": None}

    @pytest.mark.asyncio
    async def test_send_message_rejects_empty_text(self) -> None:
        """Deve recusar mensagem vazia sem chamar o dispatcher."""
        dispatcher = RecordingDispatcher()
        with pytest.raises(ValueError):
            await _webhooks(dispatcher).send_message("5511999999999", "   ")
        assert dispatcher.deliveries == []

    @pytest.mark.asyncio
    async def test_start_bot_failure_returns_false(self) -> None:
        """Deve propagar False quando a entrega falha."""
        dispatcher = RecordingDispatcher(result=False)
        assert await _webhooks(dispatcher).start_bot("5511999999999") is False
        assert dispatcher.deliveries[0]["payload"] == {"phoneNumber": "5511999999999"}


class TestKnowledgeBaseAndInstances:
    """Testes de RAG e instâncias."""

    @pytest.mark.asyncio
    async def test_upload_document_sends_multipart(self) -> None:
        """Deve enviar arquivo e categoria para enviaRag."""
        dispatcher = RecordingDispatcher()
        ok = await _webhooks(dispatcher).upload_document(
            " tabela-precos.pdf ", b"%PDF", "precos", content_type="application/pdf"
        )

        assert ok is True
        [delivery] = dispatcher.deliveries
        assert delivery["url"] == f"{BASE}/envia_rag"
        assert delivery["operation"] == "enviaRag"
        assert delivery["files"] == {"file": ("tabela-precos.pdf", b"%PDF", "application/pdf")}
        assert delivery["data"] == {"category": "precos"}
        assert delivery["payload"] == {"filename": "tabela-precos.pdf", "category": "precos", "size": 4}

    @pytest.mark.asyncio
    async def test_upload_document_requires_category(self) -> None:
        """Deve exigir categoria antes de enviar."""
        dispatcher = RecordingDispatcher()
        with pytest.raises(ValueError):
            await _webhooks(dispatcher).upload_document("a.pdf", b"x", " ")
        assert dispatcher.deliveries == []

    @pytest.mark.asyncio
    async def test_delete_document_and_clear(self) -> None:
        """Deve usar os payloads esperados pelos receptores de RAG."""
        dispatcher = RecordingDispatcher()
        webhooks = _webhooks(dispatcher)

        await webhooks.delete_document("tabela-precos.pdf")
        await webhooks.clear_knowledge_base()

        assert [d["operation"] for d in dispatcher.deliveries] == ["excluirArquivoRag", "excluirRag"]
        assert dispatcher.deliveries[0]["payload"] == {"titulo": "tabela-precos.pdf"}
        assert dispatcher.deliveries[1]["payload"] == {}

    @pytest.mark.asyncio
    async def test_create_instance_requires_fields(self) -> None:
        """Deve exigir nome e webhook_path."""
        dispatcher = RecordingDispatcher()
        with pytest.raises(ValueError):
            await _webhooks(dispatcher).create_instance("", "/hook")
        assert dispatcher.deliveries == []

    @pytest.mark.asyncio
    async def test_create_instance_and_qr_code(self) -> None:
        """Deve criar instância e pedir novo QR code."""
        dispatcher = RecordingDispatcher()
        webhooks = _webhooks(dispatcher)

        await webhooks.create_instance(" loja-centro ", "/evolution/loja-centro")
        await webhooks.refresh_qr_code("loja-centro")

        assert dispatcher.deliveries[0]["payload"] == {"name": "loja-centro", "webhookPath": "/evolution/loja-centro"}
        assert dispatcher.deliveries[1]["payload"] == {"instanceName": "loja-centro"}
        assert dispatcher.deliveries[1]["url"] == f"{BASE}/atualizar-qr-code"


class TestClientSync:
    """Testes da sincronização de clientes."""

    @pytest.mark.asyncio
    async def test_client_payloads_use_camel_case(self) -> None:
        """Deve serializar o cliente com aliases camelCase."""
        dispatcher = RecordingDispatcher()
        webhooks = _webhooks(dispatcher)
        contact = ClientContact(name="Ana", phone="5511988887777", cpf_cnpj="123.456.789-00")

        await webhooks.notify_client_created(contact)
        await webhooks.notify_client_updated("cli-1", contact)
        await webhooks.notify_client_deleted("5511988887777")

        created, updated, deleted = (d["payload"] for d in dispatcher.deliveries)
        assert created["cpfCnpj"] == "123.456.789-00"
        assert created["status"] == "Active"
        assert updated["id"] == "cli-1"
        assert updated["name"] == "Ana"
        assert deleted == {"phone": "5511988887777"}
        assert [d["operation"] for d in dispatcher.deliveries] == [
            "criaUsuario",
            "editaUsuario",
            "excluiUsuario",
        ]

    @pytest.mark.asyncio
    async def test_agent_config_forwards_options(self) -> None:
        """Deve repassar as opções de retry configuradas."""
        dispatcher = RecordingDispatcher()
        options = WebhookOptions(retries=1, retry_delay_ms=0)
        webhooks = _webhooks(dispatcher, options=options)

        await webhooks.push_agent_config({"tone": "formal"})

        [delivery] = dispatcher.deliveries
        assert delivery["options"] is options
        assert delivery["url"] == f"{BASE}/config_agent"

"""Chaves de operação dos webhooks e caminhos padrão.

As URLs padrão são `{base}/{caminho}`; o conjunto de chaves é fechado e
qualquer override fora dele é rejeitado.
"""

from __future__ import annotations

from enum import StrEnum

OVERRIDES_STORAGE_KEY = "webhookEndpoints"


class EndpointKey(StrEnum):
    """Operações de saída conhecidas pelo painel."""

    # Controle do bot
    MENSAGEM = "mensagem"
    PAUSA_BOT = "pausaBot"
    INICIA_BOT = "iniciaBot"
    CONFIRMA = "confirma"

    # Agenda
    AGENDA = "agenda"
    AGENDA_MENTORIA_CI = "agendaMentoriaCi"
    AGENDA_VENDA_CI = "agendaVendaCi"
    AGENDA_ADICIONAR = "agendaAdicionar"
    AGENDA_ADICIONAR_MENTORIA_CI = "agendaAdicionarMentoriaCi"
    AGENDA_ADICIONAR_VENDA_CI = "agendaAdicionarVendaCi"
    AGENDA_ALTERAR = "agendaAlterar"
    AGENDA_ALTERAR_MENTORIA_CI = "agendaAlterarMentoriaCi"
    AGENDA_ALTERAR_VENDA_CI = "agendaAlterarVendaCi"
    AGENDA_EXCLUIR = "agendaExcluir"
    AGENDA_EXCLUIR_MENTORIA_CI = "agendaExcluirMentoriaCi"
    AGENDA_EXCLUIR_VENDA_CI = "agendaExcluirVendaCi"

    # Base de conhecimento (RAG)
    ENVIA_RAG = "enviaRag"
    EXCLUIR_ARQUIVO_RAG = "excluirArquivoRag"
    EXCLUIR_RAG = "excluirRag"

    # Instâncias WhatsApp (Evolution)
    INSTANCIA_EVOLUTION = "instanciaEvolution"
    ATUALIZAR_QR_CODE = "atualizarQrCode"

    # Gestão de clientes
    CRIA_USUARIO = "criaUsuario"
    EDITA_USUARIO = "editaUsuario"
    EXCLUI_USUARIO = "excluiUsuario"

    # Agente
    CONFIG_AGENT = "configAgent"


DEFAULT_ENDPOINT_PATHS: dict[EndpointKey, str] = {
    EndpointKey.MENSAGEM: "envia_mensagem",
    EndpointKey.PAUSA_BOT: "pausa_bot",
    EndpointKey.INICIA_BOT: "inicia_bot",
    EndpointKey.CONFIRMA: "confirma",
    EndpointKey.AGENDA: "agenda",
    EndpointKey.AGENDA_MENTORIA_CI: "agenda/mentoria-ci",
    EndpointKey.AGENDA_VENDA_CI: "agenda/venda-ci",
    EndpointKey.AGENDA_ADICIONAR: "agenda/adicionar",
    EndpointKey.AGENDA_ADICIONAR_MENTORIA_CI: "agenda/adicionar/mentoria-ci",
    EndpointKey.AGENDA_ADICIONAR_VENDA_CI: "agenda/adicionar/venda-ci",
    EndpointKey.AGENDA_ALTERAR: "agenda/alterar",
    EndpointKey.AGENDA_ALTERAR_MENTORIA_CI: "agenda/alterar/mentoria-ci",
    EndpointKey.AGENDA_ALTERAR_VENDA_CI: "agenda/alterar/venda-ci",
    EndpointKey.AGENDA_EXCLUIR: "agenda/excluir",
    EndpointKey.AGENDA_EXCLUIR_MENTORIA_CI: "agenda/excluir/mentoria-ci",
    EndpointKey.AGENDA_EXCLUIR_VENDA_CI: "agenda/excluir/venda-ci",
    EndpointKey.ENVIA_RAG: "envia_rag",
    EndpointKey.EXCLUIR_ARQUIVO_RAG: "excluir-arquivo-rag",
    EndpointKey.EXCLUIR_RAG: "excluir-rag",
    EndpointKey.INSTANCIA_EVOLUTION: "instanciaevolution",
    EndpointKey.ATUALIZAR_QR_CODE: "atualizar-qr-code",
    EndpointKey.CRIA_USUARIO: "cria_usuario",
    EndpointKey.EDITA_USUARIO: "edita_usuario",
    EndpointKey.EXCLUI_USUARIO: "exclui_usuario",
    EndpointKey.CONFIG_AGENT: "config_agent",
}


def build_default_endpoints(base_url: str) -> dict[str, str]:
    """Monta o mapa imutável de URLs padrão a partir da base configurada."""
    base = base_url.rstrip("/")
    return {str(key): f"{base}/{path}" for key, path in DEFAULT_ENDPOINT_PATHS.items()}

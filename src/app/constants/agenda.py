"""Enums da agenda: tipos de agenda e famílias de endpoint."""

from __future__ import annotations

from enum import StrEnum


class AgendaType(StrEnum):
    """Agendas atendidas pelo painel; cada uma tem seus próprios webhooks."""

    MENTORIA_CI = "mentoria-ci"
    VENDA_CI = "venda-ci"

    @property
    def key_suffix(self) -> str:
        """Sufixo usado para qualificar a chave do endpoint (ex: MentoriaCi)."""
        return "".join(part.capitalize() for part in self.value.split("-"))


class AgendaOperation(StrEnum):
    """Prefixo da chave de endpoint de cada operação da agenda."""

    BASE = "agenda"
    ADD = "agendaAdicionar"
    EDIT = "agendaAlterar"
    DELETE = "agendaExcluir"


DEFAULT_AGENDA_TYPE = AgendaType.MENTORIA_CI

"""Contrato do store de URLs sobrescritas pelo usuário."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EndpointOverrideStoreProtocol(Protocol):
    """Persistência do mapa esparso chave de operação -> URL."""

    def load(self) -> dict[str, str]:
        """Retorna os overrides salvos; entradas inválidas são descartadas."""
        ...

    def save(self, overrides: dict[str, str]) -> None:
        """Substitui os overrides salvos."""
        ...

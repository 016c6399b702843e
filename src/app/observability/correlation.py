"""correlation_id por operação, propagado para os logs via ContextVar.

Cada operação disparada pelo usuário (carga de agenda, mutação, webhook)
abre um escopo; tudo que for logado dentro dele compartilha o mesmo id.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (string vazia se ausente)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Abre um escopo com correlation_id.

    Escopos aninhados reaproveitam o id externo, salvo quando um id
    explícito é informado.
    """
    value = correlation_id or get_correlation_id() or generate_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)

"""Contrato de notificações ao usuário (toasts transitórios)."""

from __future__ import annotations

from typing import Protocol


class NotifierProtocol(Protocol):
    """Canal de mensagens curtas e descartáveis para a interface."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

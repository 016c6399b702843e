"""Notifier que encaminha mensagens ao usuário para o log.

Usado quando não há interface conectada (scripts, execução headless).
"""

from __future__ import annotations

import logging

from app.protocols.notifier import NotifierProtocol

logger = logging.getLogger(__name__)


class LoggingNotifier(NotifierProtocol):
    def success(self, message: str) -> None:
        logger.info("user_notification", extra={"variant": "success", "text": message})

    def error(self, message: str) -> None:
        logger.warning("user_notification", extra={"variant": "error", "text": message})

    def info(self, message: str) -> None:
        logger.info("user_notification", extra={"variant": "info", "text": message})

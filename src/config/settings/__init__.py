"""Agregador de settings do painel.

Re-exporta as settings e seus getters cacheados.
"""

from __future__ import annotations

from config.settings.agenda import AgendaSettings, get_agenda_settings
from config.settings.base import BaseSettings, Environment, get_base_settings
from config.settings.webhooks import (
    DEFAULT_WEBHOOK_BASE_URL,
    WebhookSettings,
    get_webhook_settings,
)

__all__ = [
    "DEFAULT_WEBHOOK_BASE_URL",
    "AgendaSettings",
    "BaseSettings",
    "Environment",
    "WebhookSettings",
    "get_agenda_settings",
    "get_base_settings",
    "get_webhook_settings",
]

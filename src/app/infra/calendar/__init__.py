"""Infra de agenda — client dos webhooks por tipo de agenda."""

from app.infra.calendar.agenda_webhook_client import AgendaWebhookClient

__all__ = ["AgendaWebhookClient"]

"""Settings do módulo de agenda."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from app.constants.agenda import AgendaType


class AgendaSettings(BaseModel):
    """Configurações usadas pela sincronização de agenda."""

    model_config = ConfigDict(extra="ignore")

    default_agenda_type: AgendaType = Field(
        default=AgendaType.MENTORIA_CI,
        description="Tipo de agenda ativo ao abrir o painel.",
    )
    agenda_poll_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Intervalo do polling silencioso de eventos.",
    )
    agenda_utc_offset: str = Field(
        default="-03:00",
        pattern=r"^[+-]\d{2}:\d{2}$",
        description="Offset fixo usado nos timestamps enviados aos webhooks.",
    )


def _load_agenda_from_env() -> AgendaSettings:
    return AgendaSettings(
        default_agenda_type=os.getenv("AGENDA_DEFAULT_TYPE", "mentoria-ci"),
        agenda_poll_interval_seconds=float(os.getenv("AGENDA_POLL_INTERVAL_SECONDS", "30")),
        agenda_utc_offset=os.getenv("AGENDA_UTC_OFFSET", "-03:00"),
    )


@lru_cache(maxsize=1)
def get_agenda_settings() -> AgendaSettings:
    """Retorna instância cacheada de AgendaSettings."""
    return _load_agenda_from_env()


__all__ = ["AgendaSettings", "get_agenda_settings"]

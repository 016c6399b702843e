"""Stores do mapa de overrides de endpoints.

O arquivo guarda uma única chave (`webhookEndpoints`) com um objeto JSON
chave de operação -> URL. Conteúdo ausente ou malformado vira mapa vazio
com warning; nunca derruba o processo.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from app.constants.endpoints import OVERRIDES_STORAGE_KEY
from app.protocols.endpoint_override_store import EndpointOverrideStoreProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "endpoint_override_store"


def sanitize_overrides(raw: Any) -> dict[str, str]:
    """Mantém apenas pares str -> str não vazios."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning(
            "endpoint_overrides_not_an_object",
            extra={"component": _COMPONENT, "value_type": type(raw).__name__},
        )
        return {}
    clean: dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(key, str) and isinstance(value, str) and value.strip():
            clean[key] = value.strip()
            continue
        logger.warning(
            "endpoint_override_entry_ignored",
            extra={"component": _COMPONENT, "key": str(key)},
        )
    return clean


class JsonFileEndpointOverrideStore(EndpointOverrideStoreProtocol):
    """Overrides persistidos em arquivo JSON local."""

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning(
                "endpoint_overrides_read_failed",
                extra={"component": _COMPONENT, "error_type": type(exc).__name__},
            )
            return {}

        try:
            document = json.loads(text)
        except json.JSONDecodeError:
            logger.warning(
                "endpoint_overrides_malformed",
                extra={"component": _COMPONENT, "path": str(self._path)},
            )
            return {}

        if not isinstance(document, dict):
            return sanitize_overrides(document)
        return sanitize_overrides(document.get(OVERRIDES_STORAGE_KEY))

    def save(self, overrides: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        document = {OVERRIDES_STORAGE_KEY: sanitize_overrides(overrides)}
        # Escrita atômica: leitores nunca veem arquivo pela metade.
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(
            "endpoint_overrides_saved",
            extra={"component": _COMPONENT, "override_count": len(document[OVERRIDES_STORAGE_KEY])},
        )


class MemoryEndpointOverrideStore(EndpointOverrideStoreProtocol):
    """Overrides em memória; apenas para desenvolvimento e testes."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._overrides = sanitize_overrides(initial or {})

    def load(self) -> dict[str, str]:
        return dict(self._overrides)

    def save(self, overrides: dict[str, str]) -> None:
        self._overrides = sanitize_overrides(overrides)

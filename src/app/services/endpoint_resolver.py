"""Resolução de chave de operação -> URL de webhook.

Os defaults são imutáveis e construídos uma vez a partir das settings; os
overrides do usuário ficam num snapshot recarregado só quando a
configuração é salva (`reload`). Operações da agenda são sempre
resolvidas pelo par (operação, tipo de agenda).
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

import httpx

from app.constants.agenda import AgendaOperation, AgendaType
from app.constants.endpoints import EndpointKey, build_default_endpoints

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.endpoint_override_store import EndpointOverrideStoreProtocol
    from config.settings import WebhookSettings

logger = logging.getLogger(__name__)

_COMPONENT = "endpoint_resolver"
_VALID_SCHEMES = frozenset({"http", "https"})


class EndpointConfigurationError(Exception):
    """Configuração de endpoints inutilizável; fatal na validação de startup."""

    def __init__(self, message: str, keys: list[str] | None = None) -> None:
        super().__init__(message)
        self.keys = keys or []


class UnknownEndpointError(EndpointConfigurationError):
    """Chave fora do conjunto conhecido (erro de programação)."""


def qualify_key(operation_key: str, agenda_type: AgendaType | str | None = None) -> str:
    """Aplica a convenção `{operação}{SufixoDaAgenda}` (ex: agendaAdicionarVendaCi)."""
    if agenda_type is None:
        return str(operation_key)
    return f"{operation_key}{AgendaType(agenda_type).key_suffix}"


def is_valid_webhook_url(url: str) -> bool:
    """URL absoluta http(s) com host, aceita pelo httpx."""
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL:
        return False
    return parsed.scheme in _VALID_SCHEMES and bool(parsed.host)


def required_keys() -> list[str]:
    """Todas as chaves que precisam resolver para uma URL."""
    keys = [str(key) for key in EndpointKey]
    for operation in AgendaOperation:
        for agenda_type in AgendaType:
            qualified = qualify_key(operation, agenda_type)
            if qualified not in keys:
                keys.append(qualified)
    return keys


class EndpointResolver:
    """Resolve URLs preferindo override salvo e caindo no default."""

    def __init__(
        self,
        *,
        defaults: Mapping[str, str],
        store: EndpointOverrideStoreProtocol,
    ) -> None:
        self._defaults: Mapping[str, str] = MappingProxyType(dict(defaults))
        self._store = store
        self._overrides: Mapping[str, str] = MappingProxyType({})
        self.reload()

    @classmethod
    def from_settings(
        cls,
        settings: WebhookSettings,
        store: EndpointOverrideStoreProtocol,
    ) -> EndpointResolver:
        return cls(defaults=build_default_endpoints(settings.webhook_base_url), store=store)

    @property
    def defaults(self) -> Mapping[str, str]:
        return self._defaults

    @property
    def overrides(self) -> Mapping[str, str]:
        return self._overrides

    def resolve(self, operation_key: str, agenda_type: AgendaType | str | None = None) -> str:
        """Retorna a URL efetiva da operação.

        Raises:
            UnknownEndpointError: chave sem override nem default. Não deve
                ocorrer depois de `validate()` ter passado no startup.
        """
        key = qualify_key(operation_key, agenda_type)
        override = self._overrides.get(key)
        if override:
            return override
        default = self._defaults.get(key)
        if default:
            return default
        raise UnknownEndpointError(f"Endpoint desconhecido: {key}", keys=[key])

    def effective_endpoints(self) -> dict[str, str]:
        """Snapshot mesclado (defaults sombreados pelos overrides)."""
        merged = dict(self._defaults)
        merged.update({key: url for key, url in self._overrides.items() if url})
        return merged

    def validate(self) -> None:
        """Garante que toda chave conhecida resolve para uma URL http(s).

        Raises:
            EndpointConfigurationError: com a lista de chaves problemáticas.
        """
        problems: list[str] = []
        for key in required_keys():
            try:
                url = self.resolve(key)
            except UnknownEndpointError:
                problems.append(key)
                continue
            if not is_valid_webhook_url(url):
                problems.append(key)
        if problems:
            logger.error(
                "endpoint_configuration_invalid",
                extra={"component": _COMPONENT, "keys": problems},
            )
            raise EndpointConfigurationError(
                f"Endpoints sem URL válida: {', '.join(problems)}",
                keys=problems,
            )

    def reload(self) -> None:
        """Relê o store de overrides e troca o snapshot atual."""
        loaded = self._store.load()
        unknown = sorted(key for key in loaded if key not in self._defaults)
        if unknown:
            logger.warning(
                "endpoint_overrides_unknown_keys",
                extra={"component": _COMPONENT, "keys": unknown},
            )
        invalid = sorted(
            key for key, url in loaded.items() if key in self._defaults and not is_valid_webhook_url(url)
        )
        if invalid:
            # Override inválido cai no default; não pode impedir o boot.
            logger.warning(
                "endpoint_overrides_invalid_urls",
                extra={"component": _COMPONENT, "keys": invalid},
            )
        self._overrides = MappingProxyType(
            {
                key: url
                for key, url in loaded.items()
                if key in self._defaults and key not in invalid
            }
        )
        logger.info(
            "endpoint_overrides_loaded",
            extra={"component": _COMPONENT, "override_count": len(self._overrides)},
        )

    def save_overrides(self, endpoints: Mapping[str, str]) -> None:
        """Persiste a configuração editada pelo usuário e recarrega.

        Apenas valores diferentes do default são guardados; valor vazio
        volta a usar o default.

        Raises:
            UnknownEndpointError: se alguma chave não existir.
            EndpointConfigurationError: se alguma URL não for http(s) válida.
        """
        unknown = sorted(key for key in endpoints if key not in self._defaults)
        if unknown:
            raise UnknownEndpointError(
                f"Endpoints desconhecidos: {', '.join(unknown)}",
                keys=unknown,
            )
        overrides = {
            key: url.strip()
            for key, url in endpoints.items()
            if url and url.strip() and url.strip() != self._defaults[key]
        }
        malformed = sorted(key for key, url in overrides.items() if not is_valid_webhook_url(url))
        if malformed:
            raise EndpointConfigurationError(
                f"URLs inválidas: {', '.join(malformed)}",
                keys=malformed,
            )
        self._store.save(overrides)
        self.reload()

    def reset_overrides(self) -> None:
        """Descarta todos os overrides (volta aos defaults)."""
        self._store.save({})
        self.reload()


__all__ = [
    "EndpointConfigurationError",
    "EndpointResolver",
    "UnknownEndpointError",
    "is_valid_webhook_url",
    "qualify_key",
    "required_keys",
]

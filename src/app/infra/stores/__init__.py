"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - endpoint_override_store: overrides de URLs de webhook (arquivo JSON / memória)
"""

from __future__ import annotations

from app.infra.stores.endpoint_override_store import (
    JsonFileEndpointOverrideStore,
    MemoryEndpointOverrideStore,
    sanitize_overrides,
)

__all__ = [
    "JsonFileEndpointOverrideStore",
    "MemoryEndpointOverrideStore",
    "sanitize_overrides",
]

"""Filters que enriquecem cada registro de log com contexto do processo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CorrelationIdFilter(logging.Filter):
    """Injeta service, environment e correlation_id em cada record.

    Um correlation_id passado explicitamente via `extra` tem precedência
    sobre o valor do contexto.
    """

    def __init__(
        self,
        service_name: str,
        environment: str = "development",
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._environment = environment
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        record.environment = self._environment
        return True

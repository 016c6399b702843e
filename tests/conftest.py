"""Configuração do pytest para o painel da imobiliária."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ e a raiz ao PYTHONPATH (imports `app.`, `config.`, `tests.` e `scripts.`)
root_path = Path(__file__).parent.parent
for path in (root_path / "src", root_path):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


@pytest.fixture(autouse=True)
def _isolate_override_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    # Testes nunca devem gravar o arquivo real de overrides.
    monkeypatch.setenv("ENDPOINT_OVERRIDES_BACKEND", "memory")

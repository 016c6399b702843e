#!/usr/bin/env python3
"""Valida e lista os endpoints de webhook efetivos.

Uso:
    python scripts/validate_endpoints.py
    python scripts/validate_endpoints.py --overrides caminho/webhook_endpoints.json --only-overridden

Sai com código 1 se alguma operação não resolver para uma URL válida.
"""

from __future__ import annotations

import argparse
import sys

from app.infra.stores import JsonFileEndpointOverrideStore
from app.services.endpoint_resolver import EndpointConfigurationError, EndpointResolver
from config.settings import get_webhook_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--overrides",
        help="Arquivo de overrides (padrão: WEBHOOK_OVERRIDES_PATH)",
    )
    parser.add_argument(
        "--only-overridden",
        action="store_true",
        help="Lista apenas as chaves com override ativo",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_webhook_settings()
    store = JsonFileEndpointOverrideStore(args.overrides or settings.webhook_overrides_path)
    resolver = EndpointResolver.from_settings(settings, store)

    for key, url in sorted(resolver.effective_endpoints().items()):
        overridden = key in resolver.overrides
        if args.only_overridden and not overridden:
            continue
        marker = "*" if overridden else " "
        print(f"{marker} {key:<28} {url}")

    try:
        resolver.validate()
    except EndpointConfigurationError as exc:
        print(f"\nConfiguração inválida: {exc}", file=sys.stderr)
        return 1
    print(f"\nOK ({len(resolver.overrides)} override(s) ativo(s))")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""App — núcleo do painel: agenda, webhooks de saída e wiring.

Subpastas:
- bootstrap/: composition root (settings, logging, montagem do runtime)
- coordinators/: estado da agenda por sessão (carga, polling, mutações)
- services/: resolução de endpoints e integrações de saída
- infra/: implementações concretas de IO (HTTP, agenda, stores)
- protocols/: contratos/interfaces
- domain/: modelos e erros de domínio
- observability/: correlation_id para logs estruturados
- constants/: chaves de endpoint e tipos de agenda

Padrão: coordinators orquestram; services decidem a URL; infra faz IO.
"""

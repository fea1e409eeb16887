"""Utilitários para exportação de métricas no padrão Prometheus.

Os contadores são atualizados a cada iteração do loop; o servidor HTTP só é
iniciado quando ``DIFFWATCH_EXPORTER_ENABLE`` estiver ligado. As métricas
ficam num ``CollectorRegistry`` próprio para não colidir com o registry
global de quem importar o diffwatch como biblioteca.
"""

import logging
import os

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9108

REGISTRY = CollectorRegistry()

ITERATIONS = Counter("diffwatch_iterations", "Iterações executadas", registry=REGISTRY)
CHANGES = Counter("diffwatch_changes", "Iterações com diferença observada", registry=REGISTRY)
SUPPRESSED = Counter("diffwatch_suppressed", "Iterações suprimidas no modo silencioso", registry=REGISTRY)
CAPTURE_SECONDS = Histogram("diffwatch_capture_seconds", "Duração da captura dos comandos", registry=REGISTRY)
DIFF_SECONDS = Histogram("diffwatch_diff_seconds", "Duração da invocação do backend de diff", registry=REGISTRY)

_server_started = False


def exporter_enabled() -> bool:
    return os.getenv("DIFFWATCH_EXPORTER_ENABLE", "0").lower() in ("1", "true", "yes", "on")


def start_exporter(port: int | None = None, addr: str = "127.0.0.1") -> bool:
    """Inicia o servidor HTTP do exporter no endereço e porta informados.

    A porta pode ser definida por ``DIFFWATCH_EXPORTER_PORT`` quando ``port``
    for None. Retorna True quando o servidor está (ou já estava) ativo.
    """
    global _server_started
    if _server_started:
        logger.debug("prometheus exporter já iniciado")
        return True

    if port is None:
        try:
            port = int(os.getenv("DIFFWATCH_EXPORTER_PORT", str(DEFAULT_PORT)))
        except ValueError:
            logger.warning("DIFFWATCH_EXPORTER_PORT inválido; usando %d", DEFAULT_PORT)
            port = DEFAULT_PORT

    try:
        start_http_server(port, addr, registry=REGISTRY)
    except OSError as exc:
        logger.error("Falha ao iniciar Prometheus exporter em %s:%d: %s", addr, port, exc)
        return False
    _server_started = True
    logger.info("Prometheus exporter iniciado em %s:%d", addr, port)
    return True


def record_iteration(result) -> None:
    """Atualiza contadores e histogramas a partir de um resultado de iteração."""
    ITERATIONS.inc()
    if result.changed:
        CHANGES.inc()
    if result.suppressed:
        SUPPRESSED.inc()
    CAPTURE_SECONDS.observe(result.capture_seconds)
    DIFF_SECONDS.observe(result.diff_seconds)

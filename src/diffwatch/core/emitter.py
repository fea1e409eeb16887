"""Saída de cada iteração: terminal, feed JSONL e métricas.

Contém o ``RenderSink`` (escrita bufferizada vs. imediata no terminal) e a
rotina ``emit_iteration`` que registra o resultado da iteração no feed de
mudanças e no exporter. Mantido em módulo separado para reduzir
responsabilidades do ``core`` e facilitar testes.
"""

import logging
import sys

from ..exporter.exporter import record_iteration
from ..system.logs import write_feed_entry

logger = logging.getLogger(__name__)


class RenderSink:
    """Destino da renderização (``sys.stdout`` por padrão)."""

    def __init__(self, stream=None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def print(self, text: str) -> None:
        """Escrita bufferizada comum, sem newline implícito."""
        if text:
            self.stream.write(text)

    def flush_now(self, text: str) -> None:
        """Escreve e força a entrega imediata ao terminal."""
        if text:
            self.stream.write(text)
        self.stream.flush()

    def flush(self) -> None:
        self.stream.flush()


def _feed_message(result) -> str:
    if result.suppressed:
        return "sem mudanças"
    if result.fallback:
        return "snapshot completo"
    return f"{result.diff_lines} linha(s) alteradas"


def emit_iteration(result, config) -> None:  # noqa: D401
    """Registre a iteração no exporter e, se houver raiz de logs, no feed.

    Falhas aqui nunca interrompem o loop: são apenas registradas.
    """
    try:
        record_iteration(result)
    except Exception:
        logger.debug("Falha ao registrar métricas da iteração", exc_info=True)

    if not config.log_root:
        return
    extra = {
        "iteration": result.iteration,
        "snapshot_ts": result.timestamp,
        "changed": result.changed,
        "suppressed": result.suppressed,
        "fallback": result.fallback,
        "diff_lines": result.diff_lines,
        "commands": list(config.commands),
    }
    try:
        write_feed_entry(config.log_root, "INFO", _feed_message(result), extra=extra)
    except Exception as exc:
        logger.info("Falha ao escrever feed de mudanças: %s", exc)

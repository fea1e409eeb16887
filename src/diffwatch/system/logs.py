"""Subsistema de logs: diretórios, ficheiro de debug e feed de mudanças.

O feed (JSONL) e o ficheiro de debug só existem quando uma raiz de logs é
configurada (``--log-root`` ou ``DIFFWATCH_LOG_ROOT``); sem raiz, o
diffwatch não escreve nada em disco além dos buffers temporários.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path

from .log_helpers import ensure_dir_writable, write_json

logger = logging.getLogger(__name__)

FEED_NAME = "diffwatch"
DEBUG_LOG_FILENAME = "debug_log"


# ========================
# 1. Diretórios e Paths
# ========================


@dataclass(frozen=True)
class LogPaths:
    """Agrupa os diretórios usados pelo subsistema de logging."""

    root: Path
    json_dir: Path
    debug_dir: Path

    def __iter__(self):
        return iter((self.root, self.json_dir, self.debug_dir))


def resolve_log_root(root: str | Path | None = None) -> Path | None:
    """Resolve a raiz de logs: argumento explícito, depois ``DIFFWATCH_LOG_ROOT``.

    Retorna ``None`` quando nenhuma raiz foi configurada (logs em disco desligados).
    """
    candidate = root if root else os.getenv("DIFFWATCH_LOG_ROOT")
    if candidate is None:
        return None
    candidate = str(candidate).strip()
    return Path(candidate) if candidate else None


def get_log_paths(root: str | Path) -> LogPaths:
    """Garante diretórios criados e graváveis sob ``root``."""
    log_root = Path(root)
    json_dir = log_root / "json"
    debug_dir = log_root / "debug"
    for p in (log_root, json_dir, debug_dir):
        ensure_dir_writable(p)
    return LogPaths(log_root, json_dir, debug_dir)


def _day_stamp() -> str:
    # data local: um ficheiro de debug e um feed por dia
    return date.today().isoformat()


def get_debug_file_path(root: str | Path) -> Path:
    """Retorna caminho do arquivo de debug do dia."""
    return get_log_paths(root).debug_dir / f"{DEBUG_LOG_FILENAME}-{_day_stamp()}.txt"


def get_feed_path(root: str | Path) -> Path:
    """Retorna o caminho do feed JSONL de mudanças do dia."""
    return get_log_paths(root).json_dir / f"{FEED_NAME}-{_day_stamp()}.jsonl"


# ========================
# 2. Escrita do feed
# ========================

_FEED_BASE_KEYS = ("ts", "level", "msg")


def write_feed_entry(root: str | Path, level: str, message: str, extra: dict | None = None) -> None:
    """Anexa uma entrada ao feed JSONL de mudanças.

    Cada linha tem ``ts`` (UTC, ISO 8601), ``level`` e ``msg``; os campos de
    ``extra`` (iteração, bytes do diff, comandos) vêm em seguida. Um campo
    extra com nome de campo base é gravado como ``extra_<nome>``.

    Erros de I/O são tratados por ``write_json``; o loop nunca é interrompido
    por falha no feed.
    """
    entry = {"ts": datetime.now(timezone.utc).isoformat(), "level": level, "msg": message}
    for key, value in (extra or {}).items():
        entry[f"extra_{key}" if key in _FEED_BASE_KEYS else key] = value
    write_json(get_feed_path(root), entry)

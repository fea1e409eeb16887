# vulture: ignore
"""Helpers de baixo nível para o subsistema de logging.

Fornece escrita durável com lock exclusivo, serialização JSONL e
verificação de diretórios.
"""

from pathlib import Path
import os
import logging
import json as _json

import portalocker

logger = logging.getLogger(__name__)

# Durabilidade controlada via variável de ambiente
DURABLE_WRITES = os.environ.get("DIFFWATCH_DURABLE_WRITES", "1").lower() in ("1", "true", "yes", "on")


# -----------------------
# Escrita segura
# -----------------------
def write_text(path: Path, text: str) -> None:
    """Anexe texto a `path` de forma segura, usando lock e fsync.

    Cria o diretório pai quando necessário e aplica um lock exclusivo com
    `portalocker`, de modo que vários diffwatch apontando para a mesma raiz
    não intercalem linhas. Falhas de I/O são registradas e não propagadas.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            locked = False
            try:
                try:
                    portalocker.lock(fh, portalocker.LOCK_EX)
                    locked = True
                except portalocker.exceptions.LockException as exc:
                    logger.debug("write_text: portalocker.lock falhou em %s: %s", path, exc)

                fh.write(text)
                fh.flush()

                if DURABLE_WRITES:
                    try:
                        os.fsync(fh.fileno())
                    except OSError as exc:
                        logger.debug("write_text: fsync falhou em %s: %s", path, exc)
            finally:
                if locked:
                    try:
                        portalocker.unlock(fh)
                    except portalocker.exceptions.LockException as exc:
                        logger.debug("write_text: portalocker.unlock falhou em %s: %s", path, exc)
    except OSError as exc:
        logger.error("write_text: falhou em %s: %s", path, exc, exc_info=True)


def write_json(path: Path, obj: dict) -> None:
    """Serialize um objeto como JSONL e anexe ao ficheiro `path`.

    Em caso de objetos não serializáveis por padrão, usa `default=str` como
    fallback e registra o erro.
    """
    try:
        line = _json.dumps(obj, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as exc:
        line = _json.dumps(obj, ensure_ascii=False, default=str) + "\n"
        logger.error("write_json: fallback default=str usado em %s: %s", path, exc)
    write_text(path, line)


# -----------------------
# Diretórios / permissões
# -----------------------
def ensure_dir_writable(p: Path) -> bool:
    """Garante, em melhor esforço, que `p` existe e é gravável."""
    try:
        p.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        logger.error("ensure_dir_writable: permissão negada ao criar %s: %s", p, exc)
        return False
    except OSError as exc:
        logger.error("ensure_dir_writable: falhou para %s: %s", p, exc)
        return False
    if not os.access(p, os.W_OK):
        logger.error("ensure_dir_writable: %s não é gravável", p)
        return False
    return True

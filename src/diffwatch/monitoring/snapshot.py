"""Snapshots: captura da saída dos comandos monitorados.

Um ``Snapshot`` compõe um ``SnapshotBuffer`` próprio com o timestamp da
última captura e a lista de comandos de origem. O ``GenerationPair`` mantém
os papéis (old, new) sobre dois snapshots e os troca a cada iteração sem
copiar dados.
"""

from __future__ import annotations

import logging
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ..config.settings import DEFAULT_DATE_FORMAT
from ..system.buffer import SnapshotBuffer
from ..system.errors import SpawnError

logger = logging.getLogger(__name__)

TIMEOUT_MARKER = "[diffwatch: timeout after {timeout:g}s: {command}]\n"


# ========================
# 1. Execução de comandos
# ========================


def _as_bytes(value) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


def run_command(command: str, merge_stderr: bool = True, timeout: float | None = None) -> bytes:
    """Executa ``command`` via shell e retorna a saída capturada.

    Saída não-zero é dado normal (registrado em debug). Apenas falha ao
    lançar o shell é fatal (``SpawnError``). Em timeout, retorna a saída
    parcial seguida de uma linha marcadora.
    """
    stderr = subprocess.STDOUT if merge_stderr else subprocess.DEVNULL
    try:
        proc = subprocess.run(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=stderr,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        logger.warning("comando excedeu timeout de %ss: %s", timeout, command)
        partial = _as_bytes(exc.stdout)
        if partial and not partial.endswith(b"\n"):
            partial += b"\n"
        return partial + TIMEOUT_MARKER.format(timeout=timeout, command=command).encode("utf-8")
    except OSError as exc:
        raise SpawnError(f"não foi possível lançar o shell para {command!r}: {exc}") from exc

    if proc.returncode != 0:
        logger.debug("comando retornou %s: %s", proc.returncode, command)
    return proc.stdout or b""


def join_outputs(outputs: Sequence[bytes]) -> bytes:
    """Concatena saídas em ordem; o separador entre comandos é a fronteira de linha.

    Saída que já termina em ``\\n`` é unida sem nada extra; saída sem newline
    final recebe um antes do próximo comando. A última fica intacta, de modo
    que um único comando é capturado verbatim.
    """
    parts = []
    last = len(outputs) - 1
    for idx, out in enumerate(outputs):
        if idx < last and out and not out.endswith(b"\n"):
            out += b"\n"
        parts.append(out)
    return b"".join(parts)


def run_commands(
    commands: Sequence[str],
    merge_stderr: bool = True,
    parallel: bool = False,
    timeout: float | None = None,
) -> bytes:
    """Executa todos os comandos e retorna a saída concatenada em ordem.

    Com ``parallel=True`` os comandos rodam em threads, mas a ordem da
    concatenação é sempre a ordem configurada.
    """
    if parallel and len(commands) > 1:
        with ThreadPoolExecutor(max_workers=len(commands)) as pool:
            outputs = list(pool.map(lambda c: run_command(c, merge_stderr, timeout), commands))
    else:
        outputs = [run_command(c, merge_stderr, timeout) for c in commands]
    return join_outputs(outputs)


# ========================
# 2. Snapshot e par de gerações
# ========================


class Snapshot:
    """Buffer próprio + timestamp da captura + comandos de origem."""

    def __init__(
        self,
        commands: Sequence[str],
        buffer: SnapshotBuffer | None = None,
        merge_stderr: bool = True,
        parallel: bool = False,
        timeout: float | None = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        self.commands = tuple(commands)
        self.buffer = buffer if buffer is not None else SnapshotBuffer()
        self.merge_stderr = merge_stderr
        self.parallel = parallel
        self.timeout = timeout
        self.date_format = date_format
        self.timestamp = ""

    @classmethod
    def from_config(cls, config, buffer: SnapshotBuffer | None = None) -> "Snapshot":
        return cls(
            config.commands,
            buffer=buffer,
            merge_stderr=config.merge_stderr,
            parallel=config.parallel,
            timeout=config.timeout,
            date_format=config.date_format,
        )

    def update(self) -> str:
        """Executa os comandos, grava a saída no buffer e retorna o timestamp."""
        output = run_commands(self.commands, self.merge_stderr, self.parallel, self.timeout)
        self.timestamp = time.strftime(self.date_format)
        self.buffer.write(output)
        logger.debug("snapshot atualizado (%d bytes) em %s", len(output), self.buffer.handle())
        return self.timestamp

    def content(self) -> str:
        return self.buffer.read_text()

    def handle(self) -> str:
        return self.buffer.handle()

    def rewind(self) -> None:
        self.buffer.rewind()

    def close(self) -> None:
        self.buffer.close()

    def __repr__(self) -> str:
        return f"Snapshot(commands={self.commands!r}, handle={self.handle()!r})"


class GenerationPair:
    """Papéis (old, new) sobre dois snapshots; ``swap`` só reatribui."""

    def __init__(self, old: Snapshot, new: Snapshot) -> None:
        self.old = old
        self.new = new

    def swap(self) -> None:
        self.old, self.new = self.new, self.old

    def close(self) -> None:
        self.old.close()
        self.new.close()

    def __enter__(self) -> "GenerationPair":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""Buffer de snapshot: armazenamento efêmero para uma geração de saída.

Cada buffer é um ficheiro temporário nomeado; o caminho do ficheiro é o
``handle`` entregue ao backend de diff. O ficheiro existe durante toda a
vida do buffer e é removido no ``close()`` (ou na saída do ``with``).
"""

from __future__ import annotations

import logging
import os
import tempfile

from .errors import SnapshotBufferError

logger = logging.getLogger(__name__)

BUFFER_PREFIX = "diffwatch-"


class SnapshotBuffer:
    """Armazenamento efêmero com handle estável para processos externos.

    Leituras refletem sempre a escrita mais recente e deixam o buffer
    posicionado no início. Qualquer ``OSError`` é convertido em
    ``SnapshotBufferError`` (fatal).
    """

    def __init__(self, prefix: str = BUFFER_PREFIX, directory: str | None = None) -> None:
        try:
            self._fh = tempfile.NamedTemporaryFile(mode="w+b", prefix=prefix, dir=directory, delete=True)
        except OSError as exc:
            raise SnapshotBufferError(f"não foi possível criar buffer temporário: {exc}") from exc
        logger.debug("buffer criado em %s", self._fh.name)

    # Escreve o conteúdo completo: truncate, write, flush e volta ao início
    def write(self, data: bytes | str) -> None:
        """Substitui o conteúdo do buffer por ``data``."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            self._fh.seek(0)
            self._fh.truncate()
            self._fh.write(data)
            self._fh.flush()
            os.fsync(self._fh.fileno())
            self._fh.seek(0)
        except (OSError, ValueError) as exc:
            raise SnapshotBufferError(f"falha ao escrever em {self.handle()}: {exc}") from exc

    def read(self) -> bytes:
        """Retorna o conteúdo completo e reposiciona no início."""
        try:
            self._fh.seek(0)
            data = self._fh.read()
            self._fh.seek(0)
        except (OSError, ValueError) as exc:
            raise SnapshotBufferError(f"falha ao ler {self.handle()}: {exc}") from exc
        return data

    def read_text(self) -> str:
        return self.read().decode("utf-8", errors="replace")

    def rewind(self) -> None:
        try:
            self._fh.seek(0)
        except (OSError, ValueError) as exc:
            raise SnapshotBufferError(f"falha ao reposicionar {self.handle()}: {exc}") from exc

    def handle(self) -> str:
        """Caminho no filesystem legível por um processo externo."""
        return self._fh.name

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def close(self) -> None:
        if not self._fh.closed:
            logger.debug("removendo buffer %s", self._fh.name)
            self._fh.close()

    def __enter__(self) -> "SnapshotBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SnapshotBuffer({self.handle()!r})"

"""Invocação do backend de diff externo.

O diffwatch não implementa algoritmo de diff: compara dois handles de
buffer chamando ``<diffcmd> <handle_a> <handle_b>`` e devolve a saída
capturada. Saída vazia é o sentinela de "nenhuma diferença observável".

O backend padrão é o GNU ``diff`` com formatos de linha que escondem as
linhas inalteradas; os toggles controlam marcadores de mudança (``+``/``-``)
e a exibição das linhas da versão anterior.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Sequence

from ..system.errors import SpawnError

logger = logging.getLogger(__name__)

DIFF_BACKEND = "diff"
# status >= 2 no GNU diff significa "problema", não "diferenças encontradas"
_TROUBLE_STATUS = 2


def build_diff_command(show_markers: bool = True, show_old: bool = True) -> list[str]:
    """Monta o argv do backend padrão a partir dos toggles.

    - ``show_markers``: prefixa linhas novas com ``+ `` e antigas com ``- ``;
    - ``show_old``: inclui as linhas removidas/substituídas da versão anterior.

    ``--text`` força comparação linha a linha mesmo com bytes NUL na saída.
    """
    new_fmt = "+ %L" if show_markers else "%L"
    if show_old:
        old_fmt = "- %L" if show_markers else "%L"
    else:
        old_fmt = ""
    return [
        DIFF_BACKEND,
        "--text",
        "--unchanged-line-format=",
        f"--old-line-format={old_fmt}",
        f"--new-line-format={new_fmt}",
    ]


class DiffInvoker:
    """Compara dois handles via processo externo e retorna o texto do diff."""

    def __init__(self, argv: Sequence[str] | None = None, merge_stderr: bool = True) -> None:
        self.argv = list(argv) if argv else build_diff_command()
        self.merge_stderr = merge_stderr

    @classmethod
    def from_config(cls, config) -> "DiffInvoker":
        """Usa o override ``diff_command`` quando definido; senão, o backend padrão."""
        if config.diff_command:
            argv = shlex.split(config.diff_command)
        else:
            argv = build_diff_command(config.show_markers, config.show_old)
        return cls(argv)

    def command_for(self, handle_a: str, handle_b: str) -> list[str]:
        return [*self.argv, handle_a, handle_b]

    def compare(self, handle_a: str, handle_b: str) -> str:
        """Executa o backend e retorna a saída combinada (stdout + stderr).

        Falha ao lançar o backend é fatal (``SpawnError``); status 0 ou 1 é
        normal e status >= 2 é apenas registrado.
        """
        argv = self.command_for(handle_a, handle_b)
        stderr = subprocess.STDOUT if self.merge_stderr else subprocess.PIPE
        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr,
                check=False,
            )
        except OSError as exc:
            raise SpawnError(f"não foi possível lançar o backend de diff {argv[0]!r}: {exc}") from exc

        if proc.returncode >= _TROUBLE_STATUS:
            logger.warning("backend de diff retornou %s: %s", proc.returncode, " ".join(argv))
        return (proc.stdout or b"").decode("utf-8", errors="replace")

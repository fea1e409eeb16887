"""Formatação do texto renderizado a cada iteração.

Funções puras: montam cabeçalho, newline final e prefixos de apagar linha.
A decisão de quando usar cada uma fica no loop (``core.core``).
"""

from __future__ import annotations


def format_header(timestamp: str) -> str:
    """Cabeçalho de duas linhas: data e linha em branco."""
    return f"{timestamp}\n\n"


def format_suppressed(timestamp: str) -> str:
    """Linha do modo silencioso: só o timestamp e retorno de carro."""
    return f"{timestamp}\r"


def prefix_lines(text: str, prefix: str) -> str:
    """Prefixa cada linha de ``text`` com ``prefix``.

    Só ``\\n`` separa linhas; outros caracteres de controle da saída dos
    comandos passam intactos.
    """
    if not prefix or not text:
        return text
    parts = text.split("\n")
    out = [prefix + p for p in parts[:-1]]
    out.append(prefix + parts[-1] if parts[-1] else "")
    return "\n".join(out)


def count_lines(text: str) -> int:
    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)


def compose_full_render(
    diff_text: str,
    timestamp: str,
    show_date: bool = True,
    trailing_newline: bool = True,
    erase_line: str = "",
    home: str = "",
) -> str:
    """Monta o bloco completo de uma renderização normal.

    Ordem: ``home`` (quando presente), cabeçalho opcional, texto do diff e
    newline final opcional; no modo redraw cada linha recebe ``erase_line``.
    """
    body = diff_text + ("\n" if trailing_newline else "")
    if show_date:
        body = format_header(timestamp) + body
    return home + prefix_lines(body, erase_line)

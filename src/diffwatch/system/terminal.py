"""Consulta de capacidades do terminal (terminfo) para o modo redraw.

O modo redraw usa apenas quatro sequências: limpar tela, cursor para o
início (home), apagar até o fim da linha e apagar até o fim da tela. As
sequências são lidas uma única vez via ``curses`` na inicialização do loop.
"""

from __future__ import annotations

import curses
import logging
import sys
from dataclasses import dataclass

from .errors import TerminalError

logger = logging.getLogger(__name__)

# nome terminfo -> atributo de TerminalCaps
_CAPABILITIES = {
    "clear": "clear",
    "home": "home",
    "el": "erase_line",
    "ed": "erase_screen",
}


@dataclass(frozen=True)
class TerminalCaps:
    """Sequências de controle usadas pelo modo redraw."""

    clear: str = ""
    home: str = ""
    erase_line: str = ""
    erase_screen: str = ""

    @classmethod
    def ansi(cls) -> "TerminalCaps":
        """Sequências ANSI/VT100 fixas (útil em testes e terminais sem terminfo)."""
        return cls(clear="\x1b[H\x1b[2J", home="\x1b[H", erase_line="\x1b[K", erase_screen="\x1b[J")


def query_terminal_caps(term: str | None = None, stream=None) -> TerminalCaps:
    """Lê as sequências do terminfo para ``term`` (ou ``$TERM``).

    Levanta ``TerminalError`` quando o terminfo não puder ser inicializado ou
    quando o terminal não oferecer as sequências de home/apagar linha.
    """
    out = stream if stream is not None else sys.stdout
    try:
        fd = out.fileno()
    except (AttributeError, OSError, ValueError):
        fd = -1
    try:
        if fd >= 0:
            curses.setupterm(term, fd)
        else:
            curses.setupterm(term, sys.__stdout__.fileno())
    except (curses.error, OSError, ValueError, AttributeError) as exc:
        raise TerminalError(f"não foi possível consultar o terminal {term or ''}: {exc}") from exc

    values: dict[str, str] = {}
    for capname, attr in _CAPABILITIES.items():
        try:
            raw = curses.tigetstr(capname)
        except curses.error as exc:
            raise TerminalError(f"falha ao ler capacidade {capname}: {exc}") from exc
        values[attr] = raw.decode("latin-1") if raw else ""
        if not raw:
            logger.debug("capacidade %s ausente no terminfo", capname)

    if not values["home"] or not values["erase_line"]:
        raise TerminalError("terminal sem suporte a cursor home / apagar linha")
    return TerminalCaps(**values)

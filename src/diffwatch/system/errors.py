"""Taxonomia de erros do diffwatch.

Separa erros de configuração (diagnóstico de uso, saída com status 2) dos
erros fatais (buffer, terminal ou processo externo que não pode ser lançado),
que terminam a sessão com diagnóstico e status 1.

Observação: saída não-zero de um comando monitorado NÃO é erro; é dado
normal exibido como está.
"""

from __future__ import annotations


class DiffwatchError(Exception):
    """Erro base do diffwatch (não levantar diretamente)."""


class ConfigError(DiffwatchError, ValueError):
    """Configuração inválida (comando ausente, valor fora do intervalo)."""


class FatalError(DiffwatchError):
    """Falha irrecuperável; encerra a sessão com diagnóstico."""


class SnapshotBufferError(FatalError):
    """Não foi possível alocar ou operar um buffer de snapshot."""


class TerminalError(FatalError):
    """Não foi possível consultar as capacidades do terminal."""


class SpawnError(FatalError):
    """O shell ou o backend de diff não pôde ser lançado."""


__all__ = [
    "DiffwatchError",
    "ConfigError",
    "FatalError",
    "SnapshotBufferError",
    "TerminalError",
    "SpawnError",
]

"""Pacote system: buffers efêmeros, terminal, erros e logs.

Re-exports úteis para importações curtas.
"""

from .buffer import SnapshotBuffer
from .errors import ConfigError, FatalError, SnapshotBufferError, SpawnError, TerminalError
from .log_helpers import write_json, write_text

__all__ = [
    "SnapshotBuffer",
    "ConfigError",
    "FatalError",
    "SnapshotBufferError",
    "SpawnError",
    "TerminalError",
    "write_json",
    "write_text",
]

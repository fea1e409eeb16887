"""Pacote core: orquestração principal do diffwatch.

Contém o loop snapshot/diff/render, o parsing de argumentos e a saída.

Re-exports para importações curtas.
"""

from .emitter import RenderSink, emit_iteration
from .core import IterationResult, WatchLoop, run_loop

__all__ = ["RenderSink", "emit_iteration", "IterationResult", "WatchLoop", "run_loop"]

"""Pacote exporter: métricas do loop no padrão Prometheus.

Re-exports para importações curtas como ``from diffwatch.exporter import start_exporter``.
"""

from .exporter import exporter_enabled, record_iteration, start_exporter  # re-export

__all__ = ["exporter_enabled", "record_iteration", "start_exporter"]

"""diffwatch: executa comandos periodicamente e mostra só o que mudou.

Re-exports da API usada por quem embute o loop em outro programa.
"""

from .config.settings import WatchConfig, build_config
from .core.core import run_loop

__all__ = ["WatchConfig", "build_config", "run_loop"]
__version__ = "0.1.0"

"""Configurações do diffwatch.

Este módulo centraliza os valores padrão, a leitura de overrides via arquivo
``.env`` / variáveis de ambiente (prefixo ``DIFFWATCH_*``) e a construção do
``WatchConfig``: um valor imutável criado uma única vez na inicialização e
passado explicitamente ao loop.

As funções públicas principais são:

- ``load_env_items()`` -> dicionário combinado ``.env`` + ambiente.
- ``build_config(args)`` -> ``WatchConfig`` validado.

Comentários e mensagens de log estão em português.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from ..system.errors import ConfigError

logger = logging.getLogger(__name__)

# ========================
# Constantes e padrões globais
# ========================

DEFAULT_INTERVAL = 2.0
DEFAULT_COUNT = 1000
DEFAULT_REFRESH = 1
DEFAULT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"

# variável de ambiente -> destino no Namespace do argparse
ENV_MAP = {
    "DIFFWATCH_INTERVAL": "interval",
    "DIFFWATCH_COUNT": "count",
    "DIFFWATCH_REFRESH": "refresh",
    "DIFFWATCH_DIFF_CMD": "diff",
    "DIFFWATCH_DATE_FORMAT": "date_format",
    "DIFFWATCH_LOG_ROOT": "log_root",
    "DIFFWATCH_LOG_LEVEL": "log_level",
}


# ========================
# 1. Valor de configuração imutável
# ========================


@dataclass(frozen=True)
class WatchConfig:
    """Configuração completa de uma sessão de monitoramento.

    ``count == 0`` significa executar indefinidamente; ``refresh == 0``
    desliga o reposicionamento periódico do cursor (home) no modo redraw.
    """

    commands: tuple[str, ...]
    interval: float = DEFAULT_INTERVAL
    count: int = DEFAULT_COUNT
    refresh: int = DEFAULT_REFRESH
    silent: bool = False
    show_date: bool = True
    trailing_newline: bool = True
    clear_after: bool = True
    redraw: bool = False
    diff_command: str | None = None
    show_markers: bool = True
    show_old: bool = True
    merge_stderr: bool = True
    parallel: bool = False
    timeout: float | None = None
    date_format: str = DEFAULT_DATE_FORMAT
    log_root: str | None = None

    def __post_init__(self) -> None:
        if not self.commands:
            raise ConfigError("pelo menos um comando é necessário")
        if self.interval < 0:
            raise ConfigError("intervalo deve ser >= 0")
        if self.count < 0:
            raise ConfigError("count deve ser >= 0 (0 = infinito)")
        if self.refresh < 0:
            raise ConfigError("refresh deve ser >= 0 (0 = desligado)")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("timeout deve ser > 0")

    @property
    def runs_forever(self) -> bool:
        return self.count == 0


# ========================
# 2. Leitura de .env e ambiente
# ========================


# Auxilia load_env_items; criado para centralizar leitura do .env
def _read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                result[key] = val
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


def load_env_items(env_path: Path | str | None = None) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo.

    As variáveis do processo sobrescrevem o arquivo `.env`. Apenas chaves
    com prefixo ``DIFFWATCH_`` são mantidas.
    """
    if env_path is None:
        env_path = os.getenv("DIFFWATCH_ENV_FILE", ".env")
    env_items = _read_env_file(env_path)
    if env_items == {} and Path(env_path).exists():
        logger.warning("Erro ou ficheiro .env vazio em %s", env_path)
    env_items.update(os.environ)
    return {k: v for k, v in env_items.items() if k.startswith("DIFFWATCH_")}


# ========================
# 3. Construção do WatchConfig
# ========================


def _collect_commands(args) -> tuple[str, ...]:
    """Junta comandos posicionais e os de ``--exec`` preservando a ordem."""
    commands = list(getattr(args, "command", None) or [])
    commands.extend(getattr(args, "exec_commands", None) or [])
    return tuple(c for c in commands if c and c.strip())


def build_config(args, stdout=None) -> WatchConfig:
    """Constrói o ``WatchConfig`` a partir do Namespace validado.

    ``--plain`` desliga cabeçalho de data e newline final; ``--redraw`` ausente
    vira "ligado quando stdout é um TTY".
    """
    plain = bool(getattr(args, "plain", False))
    redraw = getattr(args, "redraw", None)
    if redraw is None:
        out = stdout if stdout is not None else sys.stdout
        try:
            redraw = bool(out.isatty())
        except (AttributeError, ValueError):
            redraw = False

    config = WatchConfig(
        commands=_collect_commands(args),
        interval=float(getattr(args, "interval", DEFAULT_INTERVAL)),
        count=int(getattr(args, "count", DEFAULT_COUNT)),
        refresh=int(getattr(args, "refresh", DEFAULT_REFRESH)),
        silent=bool(getattr(args, "silent", False)),
        show_date=not (plain or getattr(args, "no_date", False)),
        trailing_newline=not (plain or getattr(args, "no_newline", False)),
        clear_after=not getattr(args, "no_clear", False),
        redraw=redraw,
        diff_command=getattr(args, "diff", None) or None,
        show_markers=not getattr(args, "no_markers", False),
        show_old=not getattr(args, "no_old", False),
        merge_stderr=not getattr(args, "no_stderr", False),
        parallel=bool(getattr(args, "parallel", False)),
        timeout=getattr(args, "timeout", None),
        date_format=getattr(args, "date_format", None) or DEFAULT_DATE_FORMAT,
        log_root=getattr(args, "log_root", None),
    )
    logger.debug("Configuração construída: %s", config)
    return config

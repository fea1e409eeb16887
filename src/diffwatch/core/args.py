"""Parser de argumentos do diffwatch.

Docstrings e mensagens em português.

Este módulo fornece um parser que expõe:
- comandos a monitorar (posicionais ou -x / --exec, repetível)
- cadência de refresh do cursor (-r / --refresh), 0 = desligado
- intervalo entre iterações (-n / --interval)
- número de repetições (-c / --count), 0 = infinito
- políticas de renderização (silencioso, data, newline, plain, clear)
- backend de diff (-d / --diff) e seus toggles
- opções de logging (nível, verbosidade e raiz dos logs)

Overrides via ambiente/``.env`` valem apenas quando o argumento não foi
fornecido na linha de comando (prioridade: CLI > ENV > .env > default).
Por isso os defaults do parser são ``None``; os padrões reais entram só
depois dos overrides.
"""

import argparse
import logging
from typing import Sequence

from ..config.settings import (
    DEFAULT_COUNT,
    DEFAULT_DATE_FORMAT,
    DEFAULT_INTERVAL,
    DEFAULT_REFRESH,
    ENV_MAP,
    load_env_items,
)

logger = logging.getLogger(__name__)

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o diffwatch."""
    parser = argparse.ArgumentParser(
        prog="diffwatch",
        description="Executa comandos periodicamente e mostra apenas o que mudou entre execuções",
    )

    parser.add_argument("command", nargs="*", help="Comando(s) de shell a monitorar")
    parser.add_argument(
        "-x",
        "--exec",
        dest="exec_commands",
        action="append",
        default=[],
        metavar="CMD",
        help="Comando adicional a monitorar (repetível)",
    )
    parser.add_argument(
        "-r",
        "--refresh",
        type=int,
        default=None,
        help=f"Reposiciona o cursor no topo a cada N renderizações no modo redraw (0 = nunca; padrão {DEFAULT_REFRESH})",
    )
    parser.add_argument(
        "-n",
        "--interval",
        type=float,
        default=None,
        help=f"Intervalo em segundos entre iterações (float; padrão {DEFAULT_INTERVAL:g})",
    )
    parser.add_argument(
        "-c",
        "--count",
        type=int,
        default=None,
        help=f"Número de iterações a executar (0 = infinito; padrão {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Sem mudanças: mostra apenas o timestamp na mesma linha",
    )
    parser.add_argument("-D", "--no-date", dest="no_date", action="store_true", help="Não mostra o cabeçalho de data")
    parser.add_argument(
        "-N", "--no-newline", dest="no_newline", action="store_true", help="Não adiciona newline após a saída"
    )
    parser.add_argument("-p", "--plain", action="store_true", help="Equivale a --no-date --no-newline")
    parser.add_argument(
        "-C",
        "--no-clear",
        dest="no_clear",
        action="store_true",
        help="Não apaga o resto da tela após renderizar (modo redraw)",
    )
    parser.add_argument(
        "-d",
        "--diff",
        type=str,
        default=None,
        metavar="CMD",
        help="Comando de diff a usar; recebe os dois ficheiros de snapshot como argumentos",
    )
    parser.add_argument(
        "--no-markers", dest="no_markers", action="store_true", help="Backend padrão sem marcadores +/-"
    )
    parser.add_argument(
        "--no-old", dest="no_old", action="store_true", help="Backend padrão sem as linhas da versão anterior"
    )
    parser.add_argument(
        "--redraw",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Modo redraw (padrão: ligado quando stdout é um terminal)",
    )
    parser.add_argument(
        "--no-stderr", dest="no_stderr", action="store_true", help="Captura apenas stdout dos comandos"
    )
    parser.add_argument("--parallel", action="store_true", help="Executa os comandos em paralelo")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout em segundos por comando")
    parser.add_argument(
        "--date-format",
        dest="date_format",
        type=str,
        default=None,
        help="Formato strftime do timestamp (padrão: estilo date(1))",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade dos logs (-v, -vv)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Raiz para ficheiro de debug e feed JSONL de mudanças (substitui DIFFWATCH_LOG_ROOT)",
    )

    return parser


# ========================
# 1. Funções auxiliares para análise e validação de argumentos
# ========================


# Auxilia diffwatch.main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None, env_items: dict | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado.

    Erros de validação viram erro de uso do argparse (status 2).
    """
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    if env_items is None:
        env_items = load_env_items()
    _apply_env_overrides(ns, env_items)
    _fill_defaults(ns)
    try:
        validate_args(ns)
    except ValueError as exc:
        parser.error(str(exc))
    return ns


# Auxilia parse_args; aplica env/.env somente onde a CLI não forneceu valor
def _apply_env_overrides(ns: argparse.Namespace, env_items: dict) -> None:
    """Defaults do parser são ``None``: qualquer valor presente veio da CLI."""
    for env_var, arg in ENV_MAP.items():
        env_val = env_items.get(env_var)
        if env_val is None:
            continue
        if getattr(ns, arg, None) is not None:
            # valor vindo da CLI tem prioridade
            continue
        try:
            if arg == "interval":
                setattr(ns, arg, float(env_val))
            elif arg in ("count", "refresh"):
                setattr(ns, arg, int(env_val))
            else:
                setattr(ns, arg, env_val)
        except ValueError as exc:
            logger.warning("%s inválido ('%s'): %s. Usando valor padrão.", env_var, env_val, exc)


_FALLBACKS = {
    "interval": DEFAULT_INTERVAL,
    "count": DEFAULT_COUNT,
    "refresh": DEFAULT_REFRESH,
    "date_format": DEFAULT_DATE_FORMAT,
}


# Auxilia parse_args; preenche com o padrão o que nem CLI nem ambiente definiram
def _fill_defaults(ns: argparse.Namespace) -> None:
    for arg, fallback in _FALLBACKS.items():
        if getattr(ns, arg, None) is None:
            setattr(ns, arg, fallback)


# Auxilia parse_args; criado para garantir valores corretos e seguros
def validate_args(args: argparse.Namespace) -> None:
    """Valida e normaliza argumentos do diffwatch."""
    commands = list(getattr(args, "command", None) or []) + list(getattr(args, "exec_commands", None) or [])
    if not any(c.strip() for c in commands if c):
        raise ValueError("informe pelo menos um comando (posicional ou --exec)")

    try:
        args.interval = float(args.interval)
    except (TypeError, ValueError) as exc:
        raise ValueError("intervalo deve ser um número") from exc
    if args.interval < 0.0:
        raise ValueError("intervalo deve ser >= 0.0")

    for name in ("count", "refresh"):
        try:
            value = int(getattr(args, name))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} deve ser um inteiro >= 0") from exc
        if value < 0:
            raise ValueError(f"{name} deve ser >= 0")
        setattr(args, name, value)

    timeout = getattr(args, "timeout", None)
    if timeout is not None and timeout <= 0:
        raise ValueError("timeout deve ser > 0")


# ========================
# 2. Função auxiliar para configuração de logging
# ========================


# Auxilia diffwatch.main; criado para extrair configuração de logging dos argumentos
def get_log_config(args: argparse.Namespace) -> dict:
    """Retorna dict com configuração de logging ('level' e 'root')."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = "WARNING"

    return {"level": level, "root": getattr(args, "log_root", None)}

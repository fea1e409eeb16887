"""Ponto de entrada do diffwatch.

Este módulo realiza a inicialização da aplicação: parsing de argumentos CLI,
configuração de logging, instalação dos handlers de debug (quando há raiz de
logs) e execução do loop principal. A lógica de runtime fica em ``core`` para
facilitar testes e reutilização.
"""

import json as _json
import logging as _logging
import sys
import traceback as _tb

from .config.settings import build_config
from .core.args import get_log_config, parse_args
from .core.core import run_loop
from .exporter.exporter import exporter_enabled, start_exporter
from .system.errors import ConfigError, FatalError
from .system.logs import get_debug_file_path, resolve_log_root

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Inicializa a aplicação e executa o loop principal.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.

    Returns:
        Status de saída do processo.
    """
    args = parse_args(argv)
    log_conf = get_log_config(args)

    level = getattr(_logging, log_conf.get("level", "WARNING"), _logging.WARNING)
    _logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = _logging.getLogger(__name__)

    log_root = resolve_log_root(log_conf.get("root"))
    if log_root is not None:
        args.log_root = str(log_root)
        try:
            _setup_debug_file_handler(log_root)
        except OSError as exc:
            logger.warning("falha ao configurar debug file handler: %s", exc)

    try:
        config = build_config(args)
    except ConfigError as exc:
        print(f"diffwatch: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if exporter_enabled():
        start_exporter()

    try:
        run_loop(config)
    except FatalError as exc:
        logger.error("erro fatal: %s", exc, exc_info=level <= _logging.DEBUG)
        print(f"diffwatch: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.info("Recebido KeyboardInterrupt, saindo...")
        return EXIT_INTERRUPTED
    return EXIT_OK


def _setup_debug_file_handler(log_root) -> None:
    """Instala handlers de ficheiro para debug e hook global de exceções.

    Adiciona dois handlers ao logger root: um legível (texto) e um JSONL
    (uma linha de JSON por evento). Também instala um ``sys.excepthook`` que
    envia exceções não tratadas para o logger root.

    Evita duplicar handlers se já existirem handlers de ficheiro com os
    mesmos caminhos.
    """
    debug_path = get_debug_file_path(log_root)

    fh = _logging.FileHandler(str(debug_path), encoding="utf-8")
    fh.setLevel(_logging.DEBUG)
    fh.setFormatter(_logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    jfh = _logging.FileHandler(str(debug_path.with_suffix(".jsonl")), encoding="utf-8")
    jfh.setLevel(_logging.DEBUG)
    jfh.setFormatter(_JSONFormatter())

    root = _logging.getLogger()
    if _has_existing_file_handler(root, fh, jfh):
        fh.close()
        jfh.close()
    else:
        root.addHandler(fh)
        root.addHandler(jfh)

    def _exc_hook(exc_type, exc_value, exc_tb):
        root.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _exc_hook


class _JSONFormatter(_logging.Formatter):
    def format(self, record):
        obj = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc"] = "".join(_tb.format_exception(*record.exc_info))
        return _json.dumps(obj, ensure_ascii=False)


def _has_existing_file_handler(root, fh, jfh) -> bool:
    bases = (getattr(fh, "baseFilename", None), getattr(jfh, "baseFilename", None))
    for h in root.handlers:
        if isinstance(h, _logging.FileHandler) and getattr(h, "baseFilename", None) in bases:
            return True
    return False


if __name__ == "__main__":
    sys.exit(main())

from types import SimpleNamespace

import pytest

from diffwatch.core import args as args_mod


def test_configure_argparser_defaults():
    """Parser deixa valores ausentes em None; parse_args preenche os padrões."""
    p = args_mod.configure_argparser()
    raw = p.parse_args(["date"])
    assert raw.interval is None
    assert raw.count is None
    ns = args_mod.parse_args(["date"], env_items={})
    assert ns.command == ["date"]
    assert ns.interval == 2.0
    assert ns.count == 1000
    assert ns.refresh == 1
    assert ns.date_format == "%a %b %d %H:%M:%S %Y"
    assert ns.redraw is None
    assert ns.silent is False


def test_parse_args_exec_repeatable_and_flags():
    """Teste para --exec repetível e flags curtas."""
    ns = args_mod.parse_args(
        ["-x", "uptime", "--exec", "df -h", "-n", "0.5", "-c", "0", "-r", "0", "-s", "-p", "--no-redraw"],
        env_items={},
    )
    assert ns.exec_commands == ["uptime", "df -h"]
    assert ns.command == []
    assert ns.interval == 0.5
    assert ns.count == 0
    assert ns.refresh == 0
    assert ns.silent and ns.plain
    assert ns.redraw is False


def test_parse_args_without_command_is_usage_error(capsys):
    """Sem comandos: erro de uso do argparse (status 2)."""
    with pytest.raises(SystemExit) as exc:
        args_mod.parse_args([], env_items={})
    assert exc.value.code == 2
    assert "comando" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["-n", "-1", "ls"], ["-c", "-5", "ls"], ["-r", "-1", "ls"], ["--timeout", "0", "ls"]])
def test_parse_args_rejects_negative_values(argv):
    """Valores negativos são erro de uso."""
    with pytest.raises(SystemExit) as exc:
        args_mod.parse_args(argv, env_items={})
    assert exc.value.code == 2


def test_env_overrides_only_when_cli_default():
    """Ambiente aplica-se só ao que a CLI não informou."""
    env = {"DIFFWATCH_INTERVAL": "7", "DIFFWATCH_COUNT": "3", "DIFFWATCH_DIFF_CMD": "diff -u"}
    ns = args_mod.parse_args(["-n", "1", "ls"], env_items=env)
    assert ns.interval == 1.0
    assert ns.count == 3
    assert ns.diff == "diff -u"


def test_cli_value_equal_to_default_beats_env():
    """Valor digitado na CLI vence o ambiente mesmo quando igual ao padrão."""
    env = {
        "DIFFWATCH_INTERVAL": "7",
        "DIFFWATCH_COUNT": "3",
        "DIFFWATCH_REFRESH": "5",
        "DIFFWATCH_DATE_FORMAT": "%H",
    }
    argv = ["-n", "2", "-c", "1000", "-r", "1", "--date-format", "%a %b %d %H:%M:%S %Y", "ls"]
    ns = args_mod.parse_args(argv, env_items=env)
    assert ns.interval == 2.0
    assert ns.count == 1000
    assert ns.refresh == 1
    assert ns.date_format == "%a %b %d %H:%M:%S %Y"


def test_env_override_invalid_value_is_ignored(caplog):
    """Valor inválido no ambiente gera warning e mantém o default."""
    ns = args_mod.parse_args(["ls"], env_items={"DIFFWATCH_COUNT": "muitos"})
    assert ns.count == 1000
    assert "DIFFWATCH_COUNT" in caplog.text


def test_validate_args_errors():
    """Teste para validação de erros em argumentos."""
    ns = SimpleNamespace(command=["ls"], exec_commands=[], interval="bad", count=1, refresh=1)
    with pytest.raises(ValueError):
        args_mod.validate_args(ns)
    ns2 = SimpleNamespace(command=["  "], exec_commands=[], interval=1.0, count=1, refresh=1)
    with pytest.raises(ValueError):
        args_mod.validate_args(ns2)


def test_get_log_config_levels():
    """Teste para obtenção de níveis de configuração de log."""
    cfg = args_mod.get_log_config(SimpleNamespace(log_level="debug", log_root=None, verbose=0))
    assert cfg["level"] == "DEBUG"

    assert args_mod.get_log_config(SimpleNamespace(log_level=None, log_root=None, verbose=0))["level"] == "WARNING"
    assert args_mod.get_log_config(SimpleNamespace(log_level=None, log_root=None, verbose=1))["level"] == "INFO"
    assert args_mod.get_log_config(SimpleNamespace(log_level=None, log_root=None, verbose=2))["level"] == "DEBUG"

    cfg3 = args_mod.get_log_config(SimpleNamespace(log_level=None, log_root="/tmp", verbose=0))
    assert cfg3["root"] == "/tmp"

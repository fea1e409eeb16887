import json
from datetime import date

from diffwatch.system import logs as logs_mod


def test_get_log_paths_creates_dirs(tmp_path):
    """Teste para criação de diretórios de log."""
    root = tmp_path / "mylogs"
    lp = logs_mod.get_log_paths(root)
    assert lp.root == root
    assert lp.json_dir.exists()
    assert lp.debug_dir.exists()
    assert tuple(lp) == (root, root / "json", root / "debug")


def test_resolve_log_root_precedence(monkeypatch, tmp_path):
    """Argumento explícito > DIFFWATCH_LOG_ROOT > desligado."""
    monkeypatch.delenv("DIFFWATCH_LOG_ROOT", raising=False)
    assert logs_mod.resolve_log_root(None) is None

    monkeypatch.setenv("DIFFWATCH_LOG_ROOT", str(tmp_path / "env"))
    assert logs_mod.resolve_log_root(None) == tmp_path / "env"
    assert logs_mod.resolve_log_root(tmp_path / "cli") == tmp_path / "cli"

    monkeypatch.setenv("DIFFWATCH_LOG_ROOT", "   ")
    assert logs_mod.resolve_log_root(None) is None


def test_debug_file_path_is_dated(tmp_path):
    """Teste para nome do ficheiro de debug diário."""
    p = logs_mod.get_debug_file_path(tmp_path)
    assert p.parent == tmp_path / "debug"
    assert p.name.startswith("debug_log-") and p.suffix == ".txt"


def test_write_feed_entry_appends_jsonl(tmp_path):
    """Cada chamada deve anexar uma linha JSON ao feed do dia."""
    logs_mod.write_feed_entry(tmp_path, "INFO", "primeira", extra={"iteration": 0})
    logs_mod.write_feed_entry(tmp_path, "INFO", "segunda", extra={"iteration": 1, "msg": "colisao"})

    path = logs_mod.get_feed_path(tmp_path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["msg"] == "primeira" and first["iteration"] == 0
    # chave que colide com campo base recebe prefixo extra_
    assert second["msg"] == "segunda" and second["extra_msg"] == "colisao"
    assert "ts" in first and first["level"] == "INFO"


def test_feed_and_debug_paths_share_day_stamp(monkeypatch, tmp_path):
    """Feed e ficheiro de debug são nomeados pela data local do dia."""

    class FixedDate(date):
        @classmethod
        def today(cls):
            return cls(2024, 3, 9)

    monkeypatch.setattr(logs_mod, "date", FixedDate)
    assert logs_mod.get_feed_path(tmp_path) == tmp_path / "json" / "diffwatch-2024-03-09.jsonl"
    assert logs_mod.get_debug_file_path(tmp_path) == tmp_path / "debug" / "debug_log-2024-03-09.txt"


def test_write_feed_entry_keeps_base_fields(tmp_path):
    """Extras não sobrescrevem ts/level; sem extras só os campos base."""
    logs_mod.write_feed_entry(tmp_path, "INFO", "m", extra={"ts": "falso", "level": "DEBUG"})
    logs_mod.write_feed_entry(tmp_path, "WARNING", "sem extras")

    lines = logs_mod.get_feed_path(tmp_path).read_text(encoding="utf-8").splitlines()
    first, second = (json.loads(line) for line in lines)
    assert first["level"] == "INFO" and first["ts"] != "falso"
    assert first["extra_ts"] == "falso" and first["extra_level"] == "DEBUG"
    assert set(second) == {"ts", "level", "msg"}

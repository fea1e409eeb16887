import io
import json

from diffwatch.config.settings import WatchConfig
from diffwatch.core import emitter
from diffwatch.core.core import IterationResult
from diffwatch.system.logs import get_feed_path


class RecordingStream(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def _result(**kw):
    base = dict(iteration=0, timestamp="TS", diff_text="+ a\n+ b\n", suppressed=False, fallback=False)
    base.update(kw)
    return IterationResult(**base)


def test_render_sink_print_is_buffered():
    """print() escreve sem forçar flush."""
    stream = RecordingStream()
    sink = emitter.RenderSink(stream)
    sink.print("abc")
    sink.print("")
    assert stream.getvalue() == "abc"
    assert stream.flushes == 0


def test_render_sink_flush_now_forces_delivery():
    """flush_now() escreve e força o flush."""
    stream = RecordingStream()
    sink = emitter.RenderSink(stream)
    sink.flush_now("TS\r")
    assert stream.getvalue() == "TS\r"
    assert stream.flushes == 1


def test_emit_iteration_records_metrics_without_feed(monkeypatch):
    """Sem raiz de logs: só métricas, nenhum ficheiro."""
    calls = []
    monkeypatch.setattr(emitter, "record_iteration", calls.append)
    monkeypatch.setattr(emitter, "write_feed_entry", lambda *a, **k: calls.append("feed"))
    res = _result()
    emitter.emit_iteration(res, WatchConfig(commands=("ls",)))
    assert calls == [res]


def test_emit_iteration_writes_feed(tmp_path):
    """Com raiz de logs, cada iteração vira uma linha do feed JSONL."""
    cfg = WatchConfig(commands=("ls", "date"), log_root=str(tmp_path))
    emitter.emit_iteration(_result(), cfg)
    emitter.emit_iteration(_result(iteration=1, diff_text="", suppressed=True), cfg)

    lines = get_feed_path(tmp_path).read_text(encoding="utf-8").splitlines()
    first, second = (json.loads(line) for line in lines)
    assert first["msg"] == "2 linha(s) alteradas"
    assert first["changed"] is True and first["diff_lines"] == 2
    assert first["commands"] == ["ls", "date"]
    assert second["msg"] == "sem mudanças" and second["suppressed"] is True


def test_emit_iteration_survives_metric_failure(monkeypatch, tmp_path):
    """Falha nas métricas não interrompe a escrita do feed."""

    def boom(result):
        raise RuntimeError("registry quebrado")

    monkeypatch.setattr(emitter, "record_iteration", boom)
    cfg = WatchConfig(commands=("ls",), log_root=str(tmp_path))
    emitter.emit_iteration(_result(fallback=True), cfg)
    entry = json.loads(get_feed_path(tmp_path).read_text(encoding="utf-8"))
    assert entry["msg"] == "snapshot completo"

"""Core do diffwatch: loop snapshot → diff → render.

Estados de uma sessão::

    INIT -> CAPTURE -> COMPARE -> {SUPPRESSED_RENDER | FULL_RENDER} -> SWAP
         -> (CAPTURE | TERMINATED)

Os dois buffers pertencem ao loop e são entregues por papel (old/new) ao
runner e ao invocador de diff durante uma iteração; a troca de papéis é só
reatribuição, sem cópia de dados.
"""

import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass

from .emitter import RenderSink, emit_iteration
from ..config.settings import WatchConfig
from ..monitoring.differ import DiffInvoker
from ..monitoring.formatters import compose_full_render, count_lines, format_suppressed
from ..monitoring.snapshot import GenerationPair, Snapshot
from ..system.buffer import SnapshotBuffer
from ..system.terminal import TerminalCaps, query_terminal_caps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IterationResult:
    """Resultado de uma iteração, consumido pelo feed e pelo exporter."""

    iteration: int
    timestamp: str
    diff_text: str
    suppressed: bool
    fallback: bool
    home_emitted: bool = False
    capture_seconds: float = 0.0
    diff_seconds: float = 0.0

    @property
    def changed(self) -> bool:
        return bool(self.diff_text)

    @property
    def diff_lines(self) -> int:
        return count_lines(self.diff_text)


# ========================
# 1. Controlador do loop
# ========================


class WatchLoop:
    """Executa as iterações sobre um ``GenerationPair`` já alocado.

    O chamador é dono do par (e dos buffers); ``run_loop`` cuida da
    alocação e liberação em todos os caminhos de saída.
    """

    def __init__(
        self,
        config: WatchConfig,
        pair: GenerationPair,
        invoker: DiffInvoker,
        sink: RenderSink,
        caps: TerminalCaps | None = None,
    ) -> None:
        self.config = config
        self.pair = pair
        self.invoker = invoker
        self.sink = sink
        self.caps = caps if caps is not None else TerminalCaps()
        self.iteration = 0
        self.redraw_count = 0

    # INIT
    def start(self) -> None:
        self.iteration = 0
        self.redraw_count = 0
        if self.config.redraw:
            self.sink.flush_now(self.caps.clear)

    # CAPTURE + COMPARE + render
    def step(self) -> IterationResult:
        """Executa uma iteração completa, exceto a troca de papéis."""
        pair = self.pair
        pair.old.rewind()
        t0 = time.monotonic()
        timestamp = pair.new.update()
        t1 = time.monotonic()
        diff_text = self.invoker.compare(pair.old.handle(), pair.new.handle())
        t2 = time.monotonic()

        # sem geração anterior não há "sem mudança": a primeira iteração
        # sempre mostra o snapshot completo
        first = self.iteration == 0
        if not diff_text and self.config.silent and not first:
            self.sink.flush_now(format_suppressed(timestamp))
            return IterationResult(
                iteration=self.iteration,
                timestamp=timestamp,
                diff_text="",
                suppressed=True,
                fallback=False,
                capture_seconds=t1 - t0,
                diff_seconds=t2 - t1,
            )

        fallback = first or not diff_text
        text = pair.new.content() if fallback else diff_text
        home_emitted = self._render(text, timestamp)
        return IterationResult(
            iteration=self.iteration,
            timestamp=timestamp,
            diff_text=diff_text,
            suppressed=False,
            fallback=fallback,
            home_emitted=home_emitted,
            capture_seconds=t1 - t0,
            diff_seconds=t2 - t1,
        )

    # FULL_RENDER
    def _render(self, text: str, timestamp: str) -> bool:
        config = self.config
        erase_line = ""
        home = ""
        if config.redraw:
            erase_line = self.caps.erase_line
            if config.refresh > 0 and self.redraw_count % config.refresh == 0:
                home = self.caps.home
        self.redraw_count += 1

        self.sink.print(
            compose_full_render(
                text,
                timestamp,
                show_date=config.show_date,
                trailing_newline=config.trailing_newline,
                erase_line=erase_line,
                home=home,
            )
        )
        if config.redraw and config.clear_after:
            self.sink.flush_now(self.caps.erase_screen)
        return bool(home)

    # SWAP
    def advance(self) -> bool:
        """Troca os papéis e incrementa o contador; False quando deve parar."""
        self.pair.swap()
        self.iteration += 1
        return self.config.runs_forever or self.iteration < self.config.count

    # TERMINATED
    def finish(self) -> None:
        if self.config.redraw:
            self.sink.flush_now(self.caps.erase_line)
        else:
            self.sink.flush()


# ========================
# 2. Loop principal
# ========================


# Função principal do módulo; aloca os buffers e executa o loop até o fim
def run_loop(
    config: WatchConfig,
    sink: RenderSink | None = None,
    caps: TerminalCaps | None = None,
    invoker: DiffInvoker | None = None,
    sleep=time.sleep,
    on_iteration=emit_iteration,
) -> int:
    """Loop principal: captura, compara, renderiza e troca gerações.

    Parâmetros:
        config: configuração imutável da sessão.
        sink: destino da renderização (stdout por padrão).
        caps: sequências do terminal; consultadas via terminfo quando o
            modo redraw está ligado e nenhuma foi fornecida.
        invoker: invocador de diff (construído a partir de ``config``).
        sleep: função de pausa entre iterações.
        on_iteration: callback ``(result, config)`` após cada iteração.

    Retorna o número de iterações executadas. ``KeyboardInterrupt`` é
    propagado depois da sequência de término.
    """
    sink = sink if sink is not None else RenderSink()
    invoker = invoker if invoker is not None else DiffInvoker.from_config(config)
    if config.redraw and caps is None:
        caps = query_terminal_caps(stream=sink.stream)

    with ExitStack() as stack:
        old = Snapshot.from_config(config, stack.enter_context(SnapshotBuffer()))
        new = Snapshot.from_config(config, stack.enter_context(SnapshotBuffer()))
        loop = WatchLoop(config, GenerationPair(old, new), invoker, sink, caps)
        loop.start()
        try:
            while True:
                result = loop.step()
                if on_iteration is not None:
                    on_iteration(result, config)
                if not loop.advance():
                    break
                if config.interval > 0:
                    sleep(config.interval)
        finally:
            loop.finish()
        logger.info("loop encerrado após %d iteração(ões)", loop.iteration)
        return loop.iteration

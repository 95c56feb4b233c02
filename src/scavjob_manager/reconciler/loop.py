"""Fixed-period poll loop around the reconciler."""

from __future__ import annotations

import logging
import signal
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from scavjob_manager.reconciler.engine import Reconciler
from scavjob_manager.reconciler.models import ReconcileSummary

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoopRunSummary:
    """Aggregate loop counters for CLI reporting."""

    cycles: int = 0
    created: int = 0
    create_failed: int = 0
    deleted: int = 0
    orphans: int = 0
    stop_signal: str | None = None

    def add(self, summary: ReconcileSummary) -> None:
        self.created += summary.created
        self.create_failed += summary.create_failed
        self.deleted += summary.deleted
        self.orphans += summary.orphans


class ReconcileLoop:
    """Run startup reconciliation once, then a cycle every ``interval_seconds``.

    Ticks are scheduled at a fixed rate from the end of startup. A cycle that
    overruns its slot is followed immediately by the next one; missed ticks
    are not replayed. SIGINT/SIGTERM stop the loop between cycles.
    """

    def __init__(
        self,
        *,
        reconciler: Reconciler,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.reconciler = reconciler
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._stop_requested = False
        self._stop_signal_name: str | None = None

    def run(self, *, max_cycles: int | None = None) -> LoopRunSummary:
        """Run until stopped, or until ``max_cycles`` poll cycles completed."""

        aggregate = LoopRunSummary()
        with self._signal_handlers():
            aggregate.add(self.reconciler.reconcile_startup())
            next_tick = self._clock() + self.interval_seconds
            while True:
                if max_cycles is not None and aggregate.cycles >= max_cycles:
                    break
                self._sleep_until(next_tick)
                if self._stop_requested:
                    break

                aggregate.add(self.reconciler.reconcile_cycle())
                aggregate.cycles += 1

                next_tick += self.interval_seconds
                now = self._clock()
                if next_tick < now:
                    logger.warning(
                        "Reconcile cycle overran the %.1fs refresh interval",
                        self.interval_seconds,
                    )
                    next_tick = now

        aggregate.stop_signal = self._stop_signal_name
        if self._stop_signal_name is not None:
            logger.info("Stopped on %s after %d cycles", self._stop_signal_name, aggregate.cycles)
        return aggregate

    def request_stop(self, *, signal_name: str) -> None:
        self._stop_requested = True
        self._stop_signal_name = signal_name

    def _sleep_until(self, deadline: float) -> None:
        while not self._stop_requested:
            remaining = deadline - self._clock()
            if remaining <= 0:
                return
            self._sleep(min(0.1, remaining))

    @contextmanager
    def _signal_handlers(self) -> Iterator[None]:
        if not hasattr(signal, "SIGINT"):
            yield
            return

        original_sigint = signal.getsignal(signal.SIGINT)
        original_sigterm = signal.getsignal(signal.SIGTERM)

        def _handler(signum: int, _: object | None) -> None:
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = str(signum)
            self.request_stop(signal_name=name)

        try:
            signal.signal(signal.SIGINT, _handler)
            signal.signal(signal.SIGTERM, _handler)
        except ValueError:
            # Signal handlers can only be installed in main thread.
            yield
            return
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, original_sigint)
            signal.signal(signal.SIGTERM, original_sigterm)

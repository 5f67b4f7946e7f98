"""Change watcher for the growing item container.

The watcher is a two-state machine:

- IDLE: nothing scheduled.
- PENDING_FLUSH: at least one notification that added an element arrived and
  a flush is scheduled one quiescence window after the latest of them.

A flush re-classifies every item currently in the container rather than just
the new ones. Classification is idempotent, so re-testing unchanged items is
harmless and keeps the watcher free of per-item bookkeeping.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

from core.classifier import classify
from core.config import DEFAULT_MARKER
from core.models import ClassificationResult, MutationRecord, WatchState
from core.ports import ChangeSourcePort, ContainerPort
from core.rules_engine import MatcherSnapshot
from core.scheduling import DebounceTimer

LOGGER = logging.getLogger(__name__)


def has_new_elements(records: Sequence[MutationRecord]) -> bool:
    """Return True when any record added an element node."""

    return any(record.adds_element for record in records)


class ChangeWatcher:
    """Coalesces structural changes into debounced classification flushes."""

    def __init__(
        self,
        container: ContainerPort,
        change_source: ChangeSourcePort,
        snapshot: Callable[[], MatcherSnapshot],
        quiescence: float,
        marker: str = DEFAULT_MARKER,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._container = container
        self._change_source = change_source
        self._snapshot = snapshot
        self._marker = marker
        self._timer = DebounceTimer(quiescence, self._on_timer, loop=loop)
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._state = WatchState.IDLE
        self._disposed = False
        self.flush_count = 0

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self) -> None:
        if self._disposed:
            raise RuntimeError("watcher has been disposed")
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._change_source.observe(self._container, self._on_mutations)
        LOGGER.debug("Watching container (quiescence=%.3fs)", self._timer.delay)

    def dispose(self) -> None:
        """Cancel any pending flush and stop observing the container."""

        if self._disposed:
            return
        self._disposed = True
        self._timer.cancel()
        self._state = WatchState.IDLE
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()
        LOGGER.debug("Watcher disposed after %s flushes", self.flush_count)

    def flush_now(self) -> ClassificationResult:
        """Classify the container immediately, dropping any pending flush."""

        self._timer.cancel()
        self._state = WatchState.IDLE
        return self._flush()

    def _on_mutations(self, records: Sequence[MutationRecord]) -> None:
        if self._disposed or not has_new_elements(records):
            return
        self._state = WatchState.PENDING_FLUSH
        self._timer.schedule()

    def _on_timer(self) -> None:
        self._state = WatchState.IDLE
        try:
            self._flush()
        except Exception:
            LOGGER.exception("Classification flush failed")

    def _flush(self) -> ClassificationResult:
        self.flush_count += 1
        result = classify(self._container.items(), self._snapshot(), self._marker)
        LOGGER.debug(
            "Flush %s: scanned=%s hidden=%s changed=%s",
            self.flush_count,
            result.scanned,
            result.hidden,
            result.changed,
        )
        return result

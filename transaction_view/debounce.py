# transaction_view/debounce.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.3


class SearchDebouncer:
    """Hold back search input until typing pauses.

    ``value`` follows every keystroke immediately. ``on_change`` only sees
    the value that is still current once ``delay`` seconds pass without a
    new ``update``. There is a single timer slot: each update cancels and
    replaces the pending timer.

    ``timer_factory`` has the ``threading.Timer`` signature
    ``(interval, function)`` and must return an object with ``start`` and
    ``cancel``.
    """

    def __init__(
        self,
        on_change: Callable[[str], None],
        delay: float = DEFAULT_DELAY,
        timer_factory: Callable = threading.Timer,
    ) -> None:
        self.on_change = on_change
        self.delay = delay
        self.timer_factory = timer_factory
        self.value = ""
        self._lock = threading.Lock()
        self._timer = None
        self._pending: Optional[str] = None
        self._generation = 0

    @property
    def is_pending(self) -> bool:
        return self._timer is not None

    def update(self, text: str) -> None:
        text = text or ""
        with self._lock:
            self.value = text
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            self._pending = text
            timer = self.timer_factory(self.delay, lambda: self._fire(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def clear(self) -> None:
        """Empty the input and propagate ``""`` without waiting."""
        with self._lock:
            self.value = ""
            self._cancel_locked()
        self._emit("")

    def flush(self) -> None:
        """Propagate the pending value now, if there is one."""
        with self._lock:
            pending = self._pending
            self._cancel_locked()
        if pending is not None:
            self._emit(pending)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer keystroke or a cancel superseded this timer.
            if generation != self._generation or self._pending is None:
                return
            pending = self._pending
            self._timer = None
            self._pending = None
        self._emit(pending)

    def _emit(self, text: str) -> None:
        logger.debug("Search propagated: %r", text)
        self.on_change(text)

"""
Poll-driven debouncing for input bursts.

No threads or timers: the host loop calls ``poll()`` and the debouncer fires once the quiet
interval has elapsed since the last trigger.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .state import BondState, BondStateStore
from .validation import normalize_field

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(self, callback: Callable[..., Any], wait: float, clock: Callable[[], float] = time.monotonic):
        if wait < 0:
            raise ValueError("wait must be non-negative.")
        self.callback = callback
        self.wait = float(wait)
        self.clock = clock
        self._deadline: Optional[float] = None
        self._args: Tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self, *args: Any) -> None:
        """Arm (or re-arm) the deadline; only the latest arguments are kept."""
        self._args = args
        self._deadline = self.clock() + self.wait

    def poll(self, now: Optional[float] = None) -> bool:
        """Fire if the quiet interval has elapsed. Returns True when the callback ran."""
        if self._deadline is None:
            return False
        if now is None:
            now = self.clock()
        if now < self._deadline:
            return False
        self._fire()
        return True

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        self._deadline = None
        self._args = ()

    def _fire(self) -> None:
        args = self._args
        self.cancel()
        self.callback(*args)


class InputPipeline:
    """
    Collapses rapid field edits into one validate-and-recompute step on the store.

    Edits are buffered per field (latest wins) and applied in a single ``apply_inputs`` call.
    """

    def __init__(
        self,
        store: BondStateStore,
        wait: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if wait is None:
            wait = store.config.input_debounce_seconds
        self.store = store
        self._pending: Dict[str, Any] = {}
        self._debouncer = Debouncer(self._apply, wait, clock)
        self.flushes = 0

    @property
    def pending(self) -> Dict[str, Any]:
        return dict(self._pending)

    def submit(self, field_name: str, raw_value: Any) -> None:
        """Buffer an edit; unknown field names raise KeyError here and are never buffered."""
        self._pending[normalize_field(field_name)] = raw_value
        self._debouncer.trigger()

    def poll(self, now: Optional[float] = None) -> bool:
        return self._debouncer.poll(now)

    def flush(self) -> bool:
        return self._debouncer.flush()

    def cancel(self) -> None:
        self._pending.clear()
        self._debouncer.cancel()

    def _apply(self) -> BondState:
        values, self._pending = self._pending, {}
        self.flushes += 1
        logger.debug("Applying %d buffered input(s): %s", len(values), sorted(values))
        return self.store.apply_inputs(values)

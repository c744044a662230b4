"""Recalculation Dispatcher.

Coalesces bursts of input changes into a single recomputation. Requests
submitted inside the debounce window replace each other (last write wins,
intermediate inputs are dropped, nothing is queued). A commit runs at once,
cancels any pending coalesced run, and always uses the newest input.

The engine itself stays pure; this class is the only place that owns a
timer, and it hands each finished result to the sink as one whole value.
"""

import logging
import threading
from typing import Any, Callable, Optional

from src.position_calculator.config import DispatchConfig, DEFAULT_DISPATCH_CONFIG
from src.position_calculator.models import CalculationInput

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class RecalcDispatcher:
    """Debounced front door to a pure compute function.

    Args:
        compute: Pure function from inputs to a result (e.g.
            ``PositionSizingEngine().calculate``).
        sink: Receives every delivered result.
        config: Debounce settings.
        timer_factory: Builds a startable, cancellable timer from
            ``(seconds, callback)``. Defaults to a daemon ``threading.Timer``.

    Example:
        engine = PositionSizingEngine()
        dispatcher = RecalcDispatcher(engine.calculate, render)
        dispatcher.submit(inputs)      # on every keystroke
        dispatcher.commit()            # on blur / button press
    """

    def __init__(
        self,
        compute: Callable[[CalculationInput], Any],
        sink: Callable[[Any], None],
        config: Optional[DispatchConfig] = None,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.config = config or DEFAULT_DISPATCH_CONFIG
        self._compute = compute
        self._sink = sink
        self._timer_factory = timer_factory or _daemon_timer
        self._lock = threading.RLock()
        self._timer = None
        self._latest_input: Optional[CalculationInput] = None
        self._latest_result: Any = None
        self._generation = 0
        self._closed = False

    def submit(self, inputs: CalculationInput) -> None:
        """Schedule a coalesced recomputation with these inputs."""
        with self._lock:
            if self._closed:
                return
            self._latest_input = inputs
            self._generation += 1
            generation = self._generation
            self._cancel_timer()
            self._timer = self._timer_factory(
                self.config.debounce_ms / 1000.0,
                lambda: self._fire(generation),
            )
            self._timer.start()

    def commit(self, inputs: Optional[CalculationInput] = None) -> Any:
        """Recompute immediately, bypassing the debounce window.

        Args:
            inputs: New inputs; defaults to the most recently submitted ones.

        Returns:
            The computed result, or None if there is nothing to compute.
        """
        with self._lock:
            if self._closed:
                return None
            if inputs is not None:
                self._latest_input = inputs
            # A timer that already started firing must not deliver after us
            self._generation += 1
            self._cancel_timer()
            current = self._latest_input
            generation = self._generation

        if current is None:
            return None
        return self._run(current, generation)

    def cancel(self) -> None:
        """Drop any pending coalesced recomputation."""
        with self._lock:
            self._cancel_timer()

    def close(self) -> None:
        """Cancel pending work and ignore further requests."""
        with self._lock:
            self._cancel_timer()
            self._closed = True

    @property
    def pending(self) -> bool:
        """True while a coalesced recomputation is waiting to fire."""
        with self._lock:
            return self._timer is not None

    @property
    def latest_result(self) -> Any:
        """Most recently delivered result."""
        with self._lock:
            return self._latest_result

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._timer = None
            current = self._latest_input
        self._run(current, generation)

    def _run(self, inputs: CalculationInput, generation: int) -> Any:
        result = self._compute(inputs)
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale result for generation %d", generation)
                return result
            self._latest_result = result
            self._sink(result)
        return result

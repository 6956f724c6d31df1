"""Bounded rate history backing the circuit sparkline."""

from collections import deque
from collections.abc import Iterator

from hystrixview.core.config import DEFAULT_HISTORY_CAPACITY, DEFAULT_TREND_WINDOW_SECONDS
from hystrixview.core.models import HistorySample, TrendInstruction


class RollingHistory:
    """Ring buffer of rate samples.

    When the buffer is full the oldest sample is evicted to make room for
    the new one.

    Args:
        capacity: Maximum number of samples to keep.
        window_seconds: Time span the trend instruction covers.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_HISTORY_CAPACITY,
        window_seconds: float = DEFAULT_TREND_WINDOW_SECONDS,
    ) -> None:
        self._buffer: deque[HistorySample] = deque(maxlen=capacity)
        self._window_seconds = window_seconds

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[HistorySample]:
        return iter(self._buffer)

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen or 0

    def append(self, sample: HistorySample) -> None:
        """Add a sample, evicting the oldest one when full."""
        self._buffer.append(sample)

    def clear(self) -> None:
        self._buffer.clear()

    def trend(self, now: float) -> TrendInstruction:
        """Build the sparkline instruction for the current buffer.

        A lone zero sample is not drawn. A leading zero followed by a
        non-zero sample is dropped from the buffer so an entity first seen
        mid-burst does not show a ramp up from zero.
        """
        window_start = now - self._window_seconds
        if len(self._buffer) == 1 and self._buffer[0].value == 0:
            return TrendInstruction((), window_start, now)
        if (
            len(self._buffer) > 1
            and self._buffer[0].value == 0
            and self._buffer[1].value != 0
        ):
            self._buffer.popleft()
        return TrendInstruction(tuple(self._buffer), window_start, now)

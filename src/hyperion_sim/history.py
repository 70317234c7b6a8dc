# MIT License (see LICENSE)
"""
Bounded time-series buffers for graphs and trails.

Each buffer keeps the most recent ``maxlen`` samples of (time, value);
older samples are evicted first. Values may be scalars or small
vectors (a trail point, a phase-space pair).
"""
from __future__ import annotations
from collections import deque
from typing import Any, Iterator

import numpy as np


class HistoryBuffer:
    """
    FIFO of (time, value) samples with strictly increasing time.

    Example:
        h = HistoryBuffer(300)
        h.append(0.0, 1.5)
        h.append(0.0, 2.0)    # rejected, returns False
        t, v = h.arrays()
    """

    def __init__(self, maxlen: int):
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self.maxlen = int(maxlen)
        self._times: deque[float] = deque(maxlen=self.maxlen)
        self._values: deque[Any] = deque(maxlen=self.maxlen)

    def append(self, time: float, value: Any) -> bool:
        """
        Add a sample. Returns False (and stores nothing) if time does not
        increase past the newest stored sample.
        """
        if self._times and time <= self._times[-1]:
            return False
        if isinstance(value, np.ndarray):
            value = value.copy()
        self._times.append(float(time))
        self._values.append(value)
        return True

    def clear(self) -> None:
        self._times.clear()
        self._values.clear()

    def __len__(self) -> int:
        return len(self._times)

    def __iter__(self) -> Iterator[tuple[float, Any]]:
        return iter(zip(self._times, self._values))

    @property
    def last(self) -> tuple[float, Any] | None:
        if not self._times:
            return None
        return self._times[-1], self._values[-1]

    def times(self) -> np.ndarray:
        return np.fromiter(self._times, dtype=np.float64, count=len(self._times))

    def values(self) -> np.ndarray:
        """Stacked values; shape (n,) for scalars or (n, k) for vectors."""
        if not self._values:
            return np.zeros(0, dtype=np.float64)
        return np.array(list(self._values), dtype=np.float64)

    def arrays(self) -> tuple[np.ndarray, np.ndarray]:
        return self.times(), self.values()

    def tail(self, n: int) -> np.ndarray:
        """The values of the newest n samples (fewer if not yet filled)."""
        vals = list(self._values)[-n:]
        return np.array(vals, dtype=np.float64)

"""Logarithmic latency histogram shared by worker threads.

Values are bucketed on a log scale between ``range_min`` and ``range_max``
so that relative precision is the same for sub-microsecond and multi-second
latencies. Samples outside the range are clamped to the first or last
bucket.
"""

from __future__ import annotations

import math
import threading

import numpy as np

_BAR_WIDTH = 40


class LatencyHistogram:
    """Thread-safe latency accumulator with quantile queries.

    Lifecycle: ``init()`` allocates the buckets, ``record()`` may then be
    called from any number of threads, ``done()`` releases the buckets.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: np.ndarray | None = None
        self._range_min = 0.0
        self._range_max = 0.0
        self._range_deduct = 0.0
        self._range_mult = 0.0

    @property
    def is_initialized(self) -> bool:
        return self._counts is not None

    @property
    def size(self) -> int:
        return 0 if self._counts is None else len(self._counts)

    @property
    def range_min(self) -> float:
        return self._range_min

    @property
    def range_max(self) -> float:
        return self._range_max

    @property
    def total(self) -> int:
        """Number of samples recorded since the last reset."""
        with self._lock:
            return int(self._require_counts().sum())

    def init(self, size: int, range_min: float, range_max: float) -> None:
        """Allocate *size* buckets spanning ``[range_min, range_max]``.

        Raises:
            ValueError: If *size* is not positive or the range is empty or
                not strictly positive.
        """
        if size < 1:
            raise ValueError(f"Histogram size must be positive, got {size}")
        if range_min <= 0 or range_max <= range_min:
            raise ValueError(
                f"Histogram range must satisfy 0 < min < max, got [{range_min}, {range_max}]"
            )
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self._range_deduct = math.log(range_min)
        # A single bucket collapses every sample onto range_min.
        self._range_mult = (size - 1) / (math.log(range_max) - self._range_deduct)
        with self._lock:
            self._counts = np.zeros(size, dtype=np.uint64)

    def done(self) -> None:
        """Release the buckets. The histogram must be re-initialized before reuse."""
        with self._lock:
            self._counts = None

    def reset(self) -> None:
        """Drop all recorded samples, keeping the bucket layout."""
        with self._lock:
            self._require_counts().fill(0)

    def record(self, value: float) -> None:
        """Add one sample, in milliseconds.

        Raises:
            ValueError: If *value* is NaN.
        """
        index = self._index_of(value)
        with self._lock:
            self._require_counts()[index] += 1

    def value_of(self, index: int) -> float:
        """Return the representative value of bucket *index*."""
        if self._range_mult == 0:
            return self._range_min
        return math.exp(index / self._range_mult + self._range_deduct)

    def percentile(self, percentile: float) -> float:
        """Return the value below which *percentile* percent of samples fall.

        Returns:
            The representative value of the matching bucket, or 0.0 if no
            samples were recorded.
        """
        with self._lock:
            counts = self._require_counts().copy()
        total = int(counts.sum())
        if total == 0:
            return 0.0
        needed = max(1, math.floor(total * percentile / 100 + 0.5))
        index = int(np.searchsorted(np.cumsum(counts), needed, side="left"))
        return self.value_of(min(index, len(counts) - 1))

    def format(self) -> str:
        """Render non-empty buckets as an ASCII distribution chart."""
        with self._lock:
            counts = self._require_counts().copy()
        lines = ["       value  ------------- distribution ------------- count\n"]
        peak = int(counts.max()) if len(counts) else 0
        if peak == 0:
            return lines[0]
        for index in np.flatnonzero(counts):
            count = int(counts[index])
            width = math.floor(count * _BAR_WIDTH / peak + 0.5)
            bar = "*" * width
            lines.append(f"{self.value_of(int(index)):12.3f} |{bar:<{_BAR_WIDTH}} {count}\n")
        return "".join(lines)

    def _index_of(self, value: float) -> int:
        if math.isnan(value):
            raise ValueError("Latency sample must be a number, got nan")
        if value <= self._range_min:
            return 0
        if value >= self._range_max:
            return self.size - 1
        index = math.floor((math.log(value) - self._range_deduct) * self._range_mult + 0.5)
        return max(0, min(index, self.size - 1))

    def _require_counts(self) -> np.ndarray:
        if self._counts is None:
            raise RuntimeError("Latency histogram is not initialized")
        return self._counts

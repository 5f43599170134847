"""Operation handler: percentile configuration and latency histogram lifecycle.

The handler does not consume messages. It validates the ``percentile`` and
``histogram`` options, owns the latency histogram that workers record into,
and renders the percentile sections of progress and final reports.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benchlog.exceptions import ConfigError
from benchlog.handlers.base import LogHandler
from benchlog.histogram import LatencyHistogram
from benchlog.options import LogOption, OptionKind
from benchlog.report import format_percentiles_cumulative, format_percentiles_intermediate

if TYPE_CHECKING:
    from benchlog.config import LoggerConfig

logger = logging.getLogger("benchlog")

# 1024 buckets between 0.001 ms and 100 s.
HISTOGRAM_SIZE = 1024
HISTOGRAM_MIN_MS = 1e-3
HISTOGRAM_MAX_MS = 1e5


def parse_percentiles(values: list[str]) -> tuple[float, ...]:
    """Parse raw percentile strings.

    Raises:
        ConfigError: If a value is not a number or lies outside [0, 100].
    """
    parsed: list[float] = []
    for raw in values:
        try:
            value = float(raw)
        except ValueError:
            raise ConfigError(f"Invalid value for --percentile: {raw!r}") from None
        if not 0 <= value <= 100:
            raise ConfigError(f"Invalid value for --percentile: {value:f}")
        parsed.append(value)
    return tuple(parsed)


class OperationHandler(LogHandler):
    """Owns percentile settings and the shared latency histogram."""

    options = (
        LogOption(
            name="percentile",
            description=(
                "list of percentiles to calculate in latency statistics (0-100). "
                "Use an empty list to disable percentile calculations"
            ),
            default="95",
            kind=OptionKind.LIST,
        ),
        LogOption(
            name="histogram",
            description="print latency histogram in report",
            default="off",
            kind=OptionKind.BOOL,
        ),
    )

    def __init__(self, histogram: LatencyHistogram | None = None) -> None:
        self._histogram = histogram if histogram is not None else LatencyHistogram()
        self._percentiles: tuple[float, ...] = ()
        self._histogram_enabled = False

    @property
    def histogram(self) -> LatencyHistogram:
        return self._histogram

    @property
    def percentiles(self) -> tuple[float, ...]:
        return self._percentiles

    @property
    def histogram_enabled(self) -> bool:
        return self._histogram_enabled

    def init(self, config: LoggerConfig) -> None:
        """Validate options and allocate the histogram.

        Raises:
            ConfigError: On an invalid percentile, or when the histogram is
                requested with an empty percentile list.
        """
        percentiles = parse_percentiles(config.percentile_values)
        if config.histogram and not percentiles:
            raise ConfigError("--histogram cannot be used with --percentile=NULL")

        self._percentiles = percentiles
        self._histogram_enabled = config.histogram
        self._histogram.init(HISTOGRAM_SIZE, HISTOGRAM_MIN_MS, HISTOGRAM_MAX_MS)
        logger.debug(
            "Latency histogram ready: percentiles=%s histogram=%s",
            percentiles,
            config.histogram,
        )

    def done(self) -> None:
        self._histogram.done()

    def record_latency(self, seconds: float) -> None:
        """Record one operation latency given in seconds."""
        self._histogram.record(seconds * 1000.0)

    def percentile_results(self) -> list[float]:
        """Return the latency in seconds for each configured percentile."""
        return [self._histogram.percentile(p) / 1000.0 for p in self._percentiles]

    def percentile_report(self, cumulative: bool = False) -> str:
        """Render the configured percentiles from the current histogram.

        Args:
            cumulative: Use the multi-line final report layout instead of
                the single-line progress layout.
        """
        results = self.percentile_results()
        if cumulative:
            return format_percentiles_cumulative(self._percentiles, results)
        return format_percentiles_intermediate(self._percentiles, results)

    def histogram_report(self) -> str:
        """Return the latency histogram chart, or ``""`` when disabled."""
        if not self._histogram_enabled:
            return ""
        return "Latency histogram (values are in milliseconds)\n" + self._histogram.format()

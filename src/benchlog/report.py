"""Percentile report strings.

Both layouts are consumed by existing report parsers and must stay
byte-identical: one fragment per percentile, in input order, latency
converted from seconds to milliseconds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

INTERMEDIATE_FORMAT = "lat (ms,%5.2f%%): %4.2f "
CUMULATIVE_FORMAT = "         %5.2fth percentile:%25.2f\n"


def _sec_to_ms(seconds: float) -> float:
    return seconds * 1000.0


def format_percentiles(
    percentiles: Sequence[float],
    results: Sequence[float],
    template: str,
) -> str:
    """Render one *template* fragment per percentile and concatenate them.

    Args:
        percentiles: Requested percentiles, e.g. ``[50.0, 95.0]``.
        results: Latency in seconds for each percentile, same order.
        template: ``%``-style format taking ``(percentile, latency_ms)``.

    Returns:
        The concatenated fragments, or ``""`` when *percentiles* is empty.

    Raises:
        ValueError: If the two sequences differ in length.
    """
    if len(percentiles) != len(results):
        raise ValueError(
            f"Got {len(percentiles)} percentiles but {len(results)} results"
        )
    return "".join(
        template % (percentile, _sec_to_ms(result))
        for percentile, result in zip(percentiles, results)
    )


def format_percentiles_intermediate(
    percentiles: Sequence[float],
    results: Sequence[float],
) -> str:
    """Single-line form used by periodic progress reports."""
    return format_percentiles(percentiles, results, INTERMEDIATE_FORMAT)


def format_percentiles_cumulative(
    percentiles: Sequence[float],
    results: Sequence[float],
) -> str:
    """One line per percentile, used by the final report."""
    return format_percentiles(percentiles, results, CUMULATIVE_FORMAT)

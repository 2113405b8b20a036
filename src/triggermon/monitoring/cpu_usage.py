"""
CPU utilization from cumulative CPU time counters.

`aggregate_cpu_times` is the single aggregation pipeline for CPU data: the
monitoring loop uses it for the live busy percentage and the recorder uses it
for the utilization table it stores, so both always agree for the same
interval.
"""

import logging
from typing import Mapping, Sequence

import polars as pl

from ..collectors.base import Snapshot

logger = logging.getLogger(__name__)


def aggregate_cpu_times(samples: Sequence[Mapping[str, float]]) -> pl.DataFrame:
    """
    Convert cumulative CPU time samples into per-interval utilization.

    Each consecutive pair of samples yields one row holding, for every CPU
    state, the share of that interval spent in the state, in percent.
    Counters are expected to be monotonic; a decrease means the counter was
    reset, so negative deltas are clipped to zero. Intervals in which no time
    elapsed at all are dropped.

    Args:
        samples: Cumulative CPU times keyed by state name, oldest first. The
            states of the first sample define the output columns.

    Returns:
        DataFrame with one Float64 column per CPU state and ``len(samples) - 1``
        rows at most.
    """
    if not samples:
        return pl.DataFrame()

    states = list(samples[0].keys())
    if len(samples) < 2:
        return pl.DataFrame(schema={state: pl.Float64 for state in states})

    counters = pl.DataFrame(
        {state: [float(sample.get(state, 0.0)) for sample in samples] for state in states},
        schema={state: pl.Float64 for state in states},
    )

    deltas = (
        counters
        .select([pl.col(state).diff().clip(lower_bound=0.0).alias(state) for state in states])
        .slice(1)
        .with_columns(pl.sum_horizontal(states).alias("_total"))
        .filter(pl.col("_total") > 0.0)
    )

    return deltas.select(
        [(pl.col(state) / pl.col("_total") * 100.0).alias(state) for state in states]
    )


def calculate_cpu_usage(prev: Snapshot, curr: Snapshot) -> float:
    """
    Busy percentage between two consecutive CPU snapshots.

    Args:
        prev: Earlier CPU snapshot
        curr: Later CPU snapshot

    Returns:
        ``100 - idle%`` of the interval, within [0, 100]. Returns 0.0 when the
        interval carries no usable data.
    """
    utilization = aggregate_cpu_times((prev.values, curr.values))
    if utilization.is_empty() or "idle" not in utilization.columns:
        logger.debug("CPU aggregation produced no data, reporting 0% busy")
        return 0.0

    idle = utilization["idle"][-1]
    return min(100.0, max(0.0, 100.0 - idle))

"""
Time-bucketed histogram of log entries.

Buckets span the interval between the oldest and newest entry. The bucket
count follows a five-seconds-per-bucket heuristic clamped to 10..20 so both
very short and very long windows still chart well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable

from otlpview.otel.decoder import LogEntry

logger = logging.getLogger(__name__)

MIN_BUCKETS = 10
MAX_BUCKETS = 20
SECONDS_PER_BUCKET = 5
NANOS_PER_SECOND = 1_000_000_000

LABEL_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class HistogramBucket:
    """A histogram bar: start-time label and number of entries."""

    label: str
    count: int
    start_time_unix_nano: int


def bucket_count_for(range_ns: int) -> int:
    """Number of buckets for a time range, ``clamp(ceil(s / 5), 10, 20)``."""
    per_bucket_ns = SECONDS_PER_BUCKET * NANOS_PER_SECOND
    wanted = -(-range_ns // per_bucket_ns)
    return min(max(MIN_BUCKETS, wanted), MAX_BUCKETS)


def format_bucket_label(time_ns: int, tz: tzinfo | None = None) -> str:
    # Truncate to whole seconds
    seconds = time_ns // NANOS_PER_SECOND
    try:
        moment = datetime.fromtimestamp(seconds, tz=tz)
    except (OverflowError, OSError, ValueError):
        return str(time_ns)
    return moment.strftime(LABEL_FORMAT)


def build_histogram(
    entries: Iterable[LogEntry],
    tz: tzinfo | None = None,
) -> list[HistogramBucket]:
    """Count log entries per time bucket.

    Returns an empty list for empty input and whenever the oldest or newest
    entry has no usable timestamp. Entries without a timestamp are not
    counted.

    Args:
        entries: Log entries in any order.
        tz: Timezone for bucket labels; local time when omitted.

    Returns:
        Buckets in chronological order.
    """
    entries = list(entries)
    if not entries:
        return []

    ordered = sorted(entries, key=lambda entry: entry.time_ns)
    min_time = ordered[0].time_ns
    max_time = ordered[-1].time_ns
    if min_time == 0 or max_time == 0:
        logger.debug("No valid time anchor, skipping histogram")
        return []

    range_ns = max_time - min_time
    bucket_count = bucket_count_for(range_ns)
    counts = [0] * bucket_count

    for entry in entries:
        time_ns = entry.time_ns
        if not time_ns:
            continue
        if range_ns == 0:
            index = 0
        else:
            # floor((t - min) / (range / n)) without float rounding
            index = (time_ns - min_time) * bucket_count // range_ns
        counts[min(max(index, 0), bucket_count - 1)] += 1

    buckets = []
    for i, count in enumerate(counts):
        start = min_time + i * range_ns // bucket_count
        buckets.append(
            HistogramBucket(
                label=format_bucket_label(start, tz),
                count=count,
                start_time_unix_nano=start,
            )
        )
    return buckets

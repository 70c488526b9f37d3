# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Summaries and output files for merged sessions.

Works on the merged session returned by ``Environment.run``, where every
metric key starts with the session name.
"""

import csv
import json
import statistics
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List

from .session import Session


@dataclass
class MetricSummary:
    """Aggregated statistics for one metric key of one session."""

    session: str
    metric: str
    count: int = 0

    # Values are in the metric's own unit (seconds for durations)
    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    p50: float = 0.0
    p90: float = 0.0
    p95: float = 0.0
    p99: float = 0.0


def percentile(data: List[float], p: float) -> float:
    """Calculate percentile of a list."""
    if not data:
        return 0.0
    sorted_data = sorted(data)
    k = (len(sorted_data) - 1) * p / 100
    f = int(k)
    c = min(f + 1, len(sorted_data) - 1)
    return sorted_data[f] + (k - f) * (sorted_data[c] - sorted_data[f])


def summarize(session: Session) -> List[MetricSummary]:
    """Compute count, min/max/avg and percentiles for every numeric metric."""
    summaries = []
    for key, entries in session.metrics.items():
        values = [value for _, value in entries if isinstance(value, (int, float)) and not isinstance(value, bool)]
        summary = MetricSummary(session=str(key[0]), metric=_metric_label(key[1:]), count=len(values))
        if values:
            summary.min = min(values)
            summary.max = max(values)
            summary.avg = statistics.mean(values)
            summary.p50 = percentile(values, 50)
            summary.p90 = percentile(values, 90)
            summary.p95 = percentile(values, 95)
            summary.p99 = percentile(values, 99)
        summaries.append(summary)
    return summaries


def _metric_label(key) -> str:
    return " ".join(str(part) for part in key)


# =============================================================================
# Output Functions
# =============================================================================


def write_jsonl(session: Session, filepath: Path):
    """Write every recorded metric value of a merged session to a JSONL file."""
    with open(filepath, "a") as f:
        for key, entries in session.metrics.items():
            for ts, value in entries:
                row = {
                    "session": str(key[0]),
                    "metric": _metric_label(key[1:]),
                    "timestamp": ts,
                    "value": value,
                }
                f.write(json.dumps(row, default=str) + "\n")


def write_csv_summary(summaries: List[MetricSummary], filepath: Path):
    """Write summaries to CSV file."""
    if not summaries:
        return

    fieldnames = list(asdict(summaries[0]).keys())
    file_exists = filepath.exists()

    with open(filepath, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        if not file_exists:
            writer.writeheader()
        for s in summaries:
            writer.writerow(asdict(s))


def print_summary(summaries: List[MetricSummary]):
    """Print summaries to console."""
    print()
    print("=" * 100)
    print(f"  {'Session':<24} {'Metric':<40} {'N':>6} {'P50':>8} {'P95':>8} {'P99':>8}")
    print("=" * 100)
    for s in summaries:
        print(f"  {s.session[:24]:<24} {s.metric[:40]:<40} {s.count:>6} {s.p50:>8.4f} {s.p95:>8.4f} {s.p99:>8.4f}")
    print()

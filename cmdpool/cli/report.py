from __future__ import annotations

import sys
from typing import TextIO

from cmdpool.config import PoolConfig
from cmdpool.stats import DurationStats, FinalReport

SEPARATOR = "-" * 40

_UNITS = (
    (86400, "day"),
    (3600, "h"),
    (60, "m"),
    (1, "s"),
)


def format_duration(seconds: float) -> str:
    """Seconds with two decimals below a minute, whole units above.

    >>> format_duration(1.234)
    '1.23s'
    >>> format_duration(3725.9)
    '1h 2m 5s'
    """
    whole = int(seconds)
    if whole < 60:
        return f"{seconds:.2f}s"

    parts = []
    remaining = whole
    for size, unit in _UNITS:
        count, remaining = divmod(remaining, size)
        if count == 0:
            continue
        if unit == "day" and count > 1:
            parts.append(f"{count}days")
        else:
            parts.append(f"{count}{unit}")
    return " ".join(parts)


def print_config(config: PoolConfig, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print("Starting command-pool with:", file=out)
    print(f"  Concurrency: {config.concurrency}", file=out)
    print(f"  Total tasks: {config.total_tasks}", file=out)
    print(f"  Command: {config.executable} {' '.join(config.args)}", file=out)
    print(f"  Quiet mode: {str(config.quiet).lower()}", file=out)
    print(f"  Initial launch delay: {config.launch_delay_ms}ms", file=out)
    if config.working_dir:
        print(f"  Working dir: {config.working_dir}", file=out)
    print(SEPARATOR, file=out)


def print_report(report: FinalReport, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print(SEPARATOR, file=out)
    print("All tasks completed.", file=out)
    print(f"Total: {report.completed}", file=out)
    print(f"Successful: {report.successful}", file=out)
    print(f"Failed: {report.failed}", file=out)
    print(f"Success Rate: {report.success_rate:.2f}%", file=out)

    _print_stats("Successful", report.success_stats, out)
    _print_stats("Failed", report.failure_stats, out)

    print(
        f"\nTotal command-pool execution time: {format_duration(report.elapsed_s)}",
        file=out,
    )


def _print_stats(label: str, stats: DurationStats | None, out: TextIO) -> None:
    if stats is None:
        return
    print(f"\n{label} Tasks Statistics:", file=out)
    print(f"  Average Duration: {format_duration(stats.average_s)}", file=out)
    print(f"  Min Duration: {format_duration(stats.min_s)}", file=out)
    print(f"  Max Duration: {format_duration(stats.max_s)}", file=out)

from .aggregator import StatsAggregator
from .types import DurationStats, FinalReport, PoolState

__all__ = ["StatsAggregator", "DurationStats", "FinalReport", "PoolState"]

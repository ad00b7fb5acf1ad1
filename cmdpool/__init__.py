"""Run a command many times under a fixed concurrency ceiling."""

from cmdpool.pool import PoolScheduler
from cmdpool.stats import FinalReport

__all__ = ["PoolScheduler", "FinalReport"]

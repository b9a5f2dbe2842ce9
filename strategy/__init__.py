# PATH: strategy/__init__.py
"""Strategy package for DEXARB: normalize, price, evaluate, schedule."""

from strategy.engine import ArbitrageEngine, EngineConfig
from strategy.evaluator import evaluate
from strategy.normalizer import normalize
from strategy.profit import compute_directional_profits, compute_profit
from strategy.scheduler import Scheduler, SchedulerStats

__all__ = [
    "ArbitrageEngine",
    "EngineConfig",
    "Scheduler",
    "SchedulerStats",
    "compute_directional_profits",
    "compute_profit",
    "evaluate",
    "normalize",
]

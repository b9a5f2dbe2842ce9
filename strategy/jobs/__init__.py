# PATH: strategy/jobs/__init__.py
"""
Strategy jobs package.

Available entry points:
    dexarb-monitor                       # installed console script
    python -m strategy.jobs.run_monitor  # same, from a checkout

NOTE: run_monitor is not imported here to avoid import side effects
(logging setup, click command registration).
"""

__all__: list[str] = []

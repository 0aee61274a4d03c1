"""Lifetrack - personal activity tracking dashboard engine.

Lifetrack provides:
- Start/stop session tracking driven by a 1 Hz tick
- Per-category daily goals with completion events
- Streak and productivity trend analytics
- Failure-isolated aggregation of remote monitoring data

Usage:
    python -m lifetrack --config config/dev.yaml
    python -m lifetrack --profile prod --once
"""

__version__ = "0.1.0"

from .config import LifetrackConfig
from .config.loader import load_config
from .dashboard import Dashboard

__all__ = [
    "Dashboard",
    "LifetrackConfig",
    "__version__",
    "load_config",
]

"""ZenFlow - Personal task manager with a due-date reminder and alarm engine.

ZenFlow provides:
- A persistent task list with due dates and quality ratings
- A background reminder engine that fires each reminder at most once
- Ringing alarms with looping audio, dismiss and snooze
- AI productivity insights over notes and tasks (Claude)

Usage:
    python -m zenflow --profile dev
    python -m zenflow --config config/prod.yaml
"""

__version__ = "0.1.0"

from .config import ZenFlowConfig
from .config.loader import load_config

__all__ = [
    "ZenFlowConfig",
    "__version__",
    "load_config",
]

"""Alarm module for ZenFlow.

Provides the single-slot ringing alarm state machine.
"""

from .controller import AlarmController, AlarmState

__all__ = [
    "AlarmController",
    "AlarmState",
]

"""
Runner module - Orchestrates the tuning workflow.

The Runner:
- Executes state machine transitions
- Resolves candidate devices
- Applies device and controller tuning
- Enables periodic TRIM
"""

from .engine import TuneEngine
from .state import StateMachine, State

__all__ = [
    "TuneEngine",
    "StateMachine",
    "State",
]

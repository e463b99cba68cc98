"""
UI module - Rich console interface.

Provides:
- Severity-prefixed diagnostics (INFO/WARN/ERROR)
- Result table
- Verification commands and mount-option hint
"""

from .console import ConsoleUI, VERIFY_COMMANDS, FSTAB_HINT

__all__ = [
    "ConsoleUI",
    "VERIFY_COMMANDS",
    "FSTAB_HINT",
]

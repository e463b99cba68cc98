"""
Protocol definitions for ssd_tune.

- WriteStatus / ParameterResult: outcome of one best-effort write
- DeviceReport / ControllerReport / MaintenanceResult: per-entity rollups
- RunReport: everything one invocation did, plus its warning list
- TuneError and subclasses: the fatal tier (exit status 1)
"""

from .tuning import (
    WriteStatus,
    Severity,
    ParameterResult,
    DeviceReport,
    ControllerReport,
    MaintenanceResult,
    RunReport,
)
from .errors import (
    TuneError,
    PrivilegeError,
    NoCandidatesError,
    ConfigError,
    UsageError,
)

__all__ = [
    # Results
    "WriteStatus",
    "Severity",
    "ParameterResult",
    "DeviceReport",
    "ControllerReport",
    "MaintenanceResult",
    "RunReport",
    # Errors
    "TuneError",
    "PrivilegeError",
    "NoCandidatesError",
    "ConfigError",
    "UsageError",
]

"""
ssd_tune - SSD / NVMe block-device tuning for Linux

Adjusts runtime kernel parameters only:
- block queue: scheduler / nr_requests / read_ahead_kb / rq_affinity
- NVMe controller power policy (performance first)
- optional weekly TRIM via fstrim.timer

Never partitions, formats or changes RAID layout.

Usage:
    # As a module
    sudo python -m ssd_tune --dry-run

    # Programmatically
    from ssd_tune import Config, RunConfig, TuneEngine

    engine = TuneEngine(Config.load(), RunConfig(dry_run=True))
    report = engine.run()
"""

__version__ = "1.0.0"

# Main exports
from .config import Config, RunConfig
from .runner.engine import TuneEngine
from .runner.state import StateMachine, State

# Protocol exports
from .protocol.tuning import RunReport, DeviceReport, ParameterResult, WriteStatus
from .protocol.errors import TuneError, NoCandidatesError, PrivilegeError

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "RunConfig",
    # Engine
    "TuneEngine",
    "StateMachine",
    "State",
    # Protocol
    "RunReport",
    "DeviceReport",
    "ParameterResult",
    "WriteStatus",
    "TuneError",
    "NoCandidatesError",
    "PrivilegeError",
]

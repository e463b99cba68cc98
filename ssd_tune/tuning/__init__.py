"""
Tuning module - Applies kernel runtime parameters.

Components:
- SysfsWriter: best-effort pseudo-file writes with dry-run support
- DeviceTuner: block-device queue parameters
- ControllerPowerTuner: NVMe controller power policy
- ServiceController: enables the periodic TRIM timer
- TuningVerifier: reads back current values for the summary
"""

from .sysfs import SysfsWriter
from .executor import DeviceTuner, ControllerPowerTuner, choose_scheduler, parse_scheduler_list
from .service import ServiceController, ServiceConfig
from .verifier import TuningVerifier

__all__ = [
    "SysfsWriter",
    "DeviceTuner",
    "ControllerPowerTuner",
    "choose_scheduler",
    "parse_scheduler_list",
    "ServiceController",
    "ServiceConfig",
    "TuningVerifier",
]

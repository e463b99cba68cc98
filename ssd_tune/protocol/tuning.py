"""
Tuning Protocol - typed outcome of every kernel-parameter write.

Every best-effort write produces a ParameterResult. Results roll up into
DeviceReport / ControllerReport / MaintenanceResult and finally a RunReport
that the engine hands back to the CLI.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class WriteStatus(str, Enum):
    """Outcome of a single best-effort write."""
    APPLIED = "APPLIED"                # Kernel accepted the value
    DRY_RUN = "DRY_RUN"                # Would have written, nothing changed
    NOT_APPLICABLE = "NOT_APPLICABLE"  # Control surface absent on this kernel/device
    REJECTED = "REJECTED"              # Not writable, or kernel refused the value
    UNMATCHED = "UNMATCHED"            # No acceptable option offered (scheduler)

    @property
    def is_warning(self) -> bool:
        return self in (WriteStatus.REJECTED, WriteStatus.UNMATCHED)


class Severity(str, Enum):
    """Diagnostic severity."""
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass
class ParameterResult:
    """Result of writing one tunable parameter."""
    parameter: str
    path: str
    value: Optional[str]
    status: WriteStatus
    message: str = ""

    @property
    def is_warning(self) -> bool:
        return self.status.is_warning

    @property
    def severity(self) -> Severity:
        return Severity.WARN if self.is_warning else Severity.INFO


@dataclass
class DeviceReport:
    """Everything that happened to one block device."""
    device: str
    forced: bool = False
    skipped: bool = False
    skip_reason: str = ""
    results: List[ParameterResult] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        warnings = [r.message for r in self.results if r.is_warning]
        if self.skipped:
            warnings.insert(0, self.skip_reason)
        return warnings

    def result_for(self, parameter: str) -> Optional[ParameterResult]:
        """Look up the result for a named parameter (e.g. 'scheduler')."""
        for result in self.results:
            if result.parameter == parameter:
                return result
        return None


@dataclass
class ControllerReport:
    """Power-policy writes for one NVMe controller."""
    controller: str
    results: List[ParameterResult] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [r.message for r in self.results if r.is_warning]


@dataclass
class MaintenanceResult:
    """Outcome of enabling the periodic TRIM job."""
    unit: str
    status: WriteStatus
    message: str = ""
    command: str = ""

    @property
    def is_warning(self) -> bool:
        return self.status.is_warning


@dataclass
class RunReport:
    """Aggregated outcome of one invocation."""
    dry_run: bool = False
    candidates: List[str] = field(default_factory=list)
    devices: List[DeviceReport] = field(default_factory=list)
    controllers: List[ControllerReport] = field(default_factory=list)
    controller_warnings: List[str] = field(default_factory=list)
    maintenance: Optional[MaintenanceResult] = None

    @property
    def warnings(self) -> List[str]:
        warnings: List[str] = []
        for device in self.devices:
            warnings.extend(device.warnings)
        warnings.extend(self.controller_warnings)
        for controller in self.controllers:
            warnings.extend(controller.warnings)
        if self.maintenance and self.maintenance.is_warning:
            warnings.append(self.maintenance.message)
        return warnings

    @property
    def writes(self) -> List[ParameterResult]:
        """Every parameter result that did (or would, in dry-run) change a value."""
        writes = []
        for report in list(self.devices) + list(self.controllers):
            for result in report.results:
                if result.status in (WriteStatus.APPLIED, WriteStatus.DRY_RUN):
                    writes.append(result)
        return writes

"""
TuneEngine - Orchestrates one tuning run.

discover → tune each device → tune NVMe controllers → enable TRIM

Only an empty auto-detect result is fatal here; every other problem is
recorded in the RunReport and the pipeline moves on.
"""

from typing import Callable, Optional

from .state import StateMachine, State, StateEvent
from ..config import Config, RunConfig
from ..discovery.system import SystemScanner
from ..protocol.errors import NoCandidatesError
from ..protocol.tuning import (
    DeviceReport,
    MaintenanceResult,
    ParameterResult,
    RunReport,
    WriteStatus,
)
from ..tuning.executor import ControllerPowerTuner, DeviceTuner
from ..tuning.service import ServiceConfig, ServiceController
from ..tuning.sysfs import SysfsWriter


class TuneEngine:
    """
    Runs the tuning pipeline for one RunConfig.

    Components can be injected for testing; otherwise they are built from
    the Config.
    """

    def __init__(
        self,
        config: Config,
        run_config: RunConfig,
        scanner: Optional[SystemScanner] = None,
        writer: Optional[SysfsWriter] = None,
        service_controller: Optional[ServiceController] = None,
    ):
        self.config = config
        self.run_config = run_config
        self.state_machine = StateMachine()

        self.scanner = scanner or SystemScanner(config)
        self.writer = writer or SysfsWriter(dry_run=run_config.dry_run)
        self.service_controller = service_controller or ServiceController(
            ServiceConfig(unit=config.maintenance.timer)
        )

        # Callbacks
        self._on_candidates: Optional[Callable[[list], None]] = None
        self._on_result: Optional[Callable[[ParameterResult], None]] = None
        self._on_device: Optional[Callable[[str], None]] = None
        self._on_device_done: Optional[Callable[[DeviceReport], None]] = None
        self._on_controller: Optional[Callable[[str], None]] = None
        self._on_maintenance: Optional[Callable[[MaintenanceResult], None]] = None
        self._on_warning: Optional[Callable[[str], None]] = None

    def on_result(self, callback: Callable[[ParameterResult], None]):
        """Register callback for every parameter write."""
        self._on_result = callback

    def on_device(self, callback: Callable[[str], None], done: Optional[Callable[[DeviceReport], None]] = None):
        """Register callbacks for device start / finish."""
        self._on_device = callback
        self._on_device_done = done

    def on_candidates(self, callback: Callable[[list], None]):
        """Register callback fired once the device list is known."""
        self._on_candidates = callback

    def on_controller(self, callback: Callable[[str], None]):
        self._on_controller = callback

    def on_maintenance(self, callback: Callable[[MaintenanceResult], None]):
        self._on_maintenance = callback

    def on_warning(self, callback: Callable[[str], None]):
        """Register callback for warnings not tied to a single write."""
        self._on_warning = callback

    def on_state_change(self, callback: Callable[[StateEvent], None]):
        self.state_machine.on_transition(callback)

    def _warn(self, message: str):
        if self._on_warning:
            self._on_warning(message)

    def run(self) -> RunReport:
        """
        Execute the pipeline.

        Raises:
            NoCandidatesError: auto-detect mode found nothing to tune
        """
        report = RunReport(dry_run=self.run_config.dry_run)

        self.state_machine.transition(State.DISCOVER)
        try:
            report.candidates = self.scanner.resolve(self.run_config)
        except NoCandidatesError as e:
            self.state_machine.transition(State.FAILED, {"error": str(e)})
            raise
        if self._on_candidates:
            self._on_candidates(report.candidates)

        self.state_machine.transition(State.TUNE_DEVICES, {"candidates": report.candidates})
        report.devices = self.tune_devices(report.candidates)

        self.state_machine.transition(State.TUNE_CONTROLLERS)
        tuner = ControllerPowerTuner(self.config, self.writer, on_result=self._on_result)
        report.controllers, report.controller_warnings = tuner.tune_all(self._on_controller)
        for warning in report.controller_warnings:
            self._warn(warning)

        self.state_machine.transition(State.MAINTENANCE)
        report.maintenance = self.enable_maintenance()

        self.state_machine.transition(State.COMPLETE)
        return report

    def tune_devices(self, candidates) -> list:
        """Tune each candidate in enumerator order."""
        tuner = DeviceTuner(self.config, self.writer, on_result=self._on_result)
        forced = self.run_config.explicit
        reports = []

        for device in candidates:
            if self._on_device:
                self._on_device(device)
            device_report = tuner.tune(device, forced=forced)
            if device_report.skipped:
                self._warn(device_report.skip_reason)
            elif self._on_device_done:
                self._on_device_done(device_report)
            reports.append(device_report)

        return reports

    def enable_maintenance(self) -> MaintenanceResult:
        unit = self.config.maintenance.timer
        if not self.config.maintenance.enable_trim:
            result = MaintenanceResult(
                unit=unit,
                status=WriteStatus.NOT_APPLICABLE,
                message=f"{unit} setup disabled by configuration",
            )
        else:
            result = self.service_controller.enable(dry_run=self.run_config.dry_run)

        if self._on_maintenance:
            self._on_maintenance(result)
        return result

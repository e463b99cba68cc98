"""
Device and controller tuners.

DeviceTuner applies the queue parameters to one block device:
1. scheduler     - none, else mq-deadline, else leave as-is and warn
2. nr_requests   - queue depth
3. read_ahead_kb - read-ahead size
4. rq_affinity   - request completion CPU

ControllerPowerTuner keeps every NVMe controller out of runtime suspend
and allows its highest-performance power state at all times.

Each write is independent; a failure is recorded and the next write runs.
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config import Config
from ..protocol.tuning import (
    ControllerReport,
    DeviceReport,
    ParameterResult,
    WriteStatus,
)
from .sysfs import SysfsWriter


ResultCallback = Callable[[ParameterResult], None]


def parse_scheduler_list(raw: str) -> Tuple[List[str], Optional[str]]:
    """
    Parse the contents of queue/scheduler.

    "none [mq-deadline] kyber" -> (["none", "mq-deadline", "kyber"], "mq-deadline")
    """
    available = []
    current = None
    for token in raw.split():
        if token.startswith("[") and token.endswith("]"):
            token = token[1:-1]
            current = token
        available.append(token)
    return available, current


def choose_scheduler(available: List[str], preference: List[str]) -> Optional[str]:
    """First preferred scheduler the device offers, or None."""
    for name in preference:
        if name in available:
            return name
    return None


class DeviceTuner:
    """
    Applies queue tuning to block devices under <sysfs_root>/block.
    """

    def __init__(
        self,
        config: Config,
        writer: SysfsWriter,
        on_result: Optional[ResultCallback] = None,
    ):
        self.config = config
        self.writer = writer
        self.on_result = on_result
        self.block_root = Path(config.paths.sysfs_root) / "block"

    def _record(self, report: DeviceReport, result: ParameterResult):
        report.results.append(result)
        if self.on_result:
            self.on_result(result)

    def is_rotational(self, device: str) -> bool:
        """Unreadable counts as rotational so unknown media is left alone."""
        value = self.writer.read(self.block_root / device / "queue" / "rotational")
        return value != "0"

    def tune(self, device: str, forced: bool = False) -> DeviceReport:
        """
        Tune one device.

        Args:
            device: Device name without /dev/ prefix
            forced: Named explicitly by the operator; skips the rotational check

        Returns:
            DeviceReport with one result per parameter
        """
        report = DeviceReport(device=device, forced=forced)
        sys_path = self.block_root / device

        if not sys_path.is_dir():
            report.skipped = True
            report.skip_reason = f"{sys_path} for device {device} does not exist, skipping"
            return report

        if not forced and self.is_rotational(device):
            report.skipped = True
            report.skip_reason = (
                f"/dev/{device} is rotational (or reports no rotational flag), "
                f"not applying SSD tuning"
            )
            return report

        queue = sys_path / "queue"
        targets = self.config.targets

        self._record(report, self._tune_scheduler(queue / "scheduler"))
        self._record(report, self.writer.write("nr_requests", queue / "nr_requests", targets.nr_requests))
        self._record(report, self.writer.write("read_ahead_kb", queue / "read_ahead_kb", targets.read_ahead_kb))
        self._record(report, self.writer.write("rq_affinity", queue / "rq_affinity", targets.rq_affinity))

        return report

    def _tune_scheduler(self, path: Path) -> ParameterResult:
        raw = self.writer.read(path)
        if raw is None:
            return ParameterResult(
                parameter="scheduler",
                path=str(path),
                value=None,
                status=WriteStatus.NOT_APPLICABLE,
                message=f"{path} does not exist, kernel may force multi-queue without a scheduler",
            )

        available, _ = parse_scheduler_list(raw)
        target = choose_scheduler(available, self.config.targets.schedulers)
        if target is None:
            return ParameterResult(
                parameter="scheduler",
                path=str(path),
                value=None,
                status=WriteStatus.UNMATCHED,
                message=(
                    f"No {'/'.join(self.config.targets.schedulers)} scheduler "
                    f"offered by {path}, available: {raw}"
                ),
            )

        return self.writer.write("scheduler", path, target)


class ControllerPowerTuner:
    """
    Applies power policy to controllers under <sysfs_root>/class/nvme.
    """

    def __init__(
        self,
        config: Config,
        writer: SysfsWriter,
        on_result: Optional[ResultCallback] = None,
    ):
        self.config = config
        self.writer = writer
        self.on_result = on_result
        self.class_root = Path(config.paths.sysfs_root) / "class" / "nvme"

    def controllers(self) -> List[Path]:
        if not self.class_root.is_dir():
            return []
        return sorted(p for p in self.class_root.glob("nvme*") if p.is_dir())

    def tune(self, controller: Path) -> ControllerReport:
        report = ControllerReport(controller=controller.name)
        power = controller / "power"

        for parameter, value in (
            ("control", self.config.power.control),
            ("ps_max_latency_us", self.config.power.ps_max_latency_us),
        ):
            result = self.writer.write(parameter, power / parameter, value)
            report.results.append(result)
            if self.on_result:
                self.on_result(result)

        return report

    def tune_all(
        self, on_controller: Optional[Callable[[str], None]] = None
    ) -> Tuple[List[ControllerReport], List[str]]:
        """
        Tune every controller.

        Args:
            on_controller: called with each controller name before it is tuned

        Returns:
            (reports, warnings) - warnings holds the empty-inventory notice
        """
        controllers = self.controllers()
        if not controllers:
            return [], [self.missing_message()]

        reports = []
        for controller in controllers:
            if on_controller:
                on_controller(controller.name)
            reports.append(self.tune(controller))
        return reports, []

    def missing_message(self) -> str:
        return f"No {self.class_root}/nvme* found, system may have no NVMe controllers"

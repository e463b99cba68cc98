"""
ServiceController - Enables the periodic TRIM timer.

Provides unit enable (systemctl enable --now) with dry-run support.
"""

import shutil
import subprocess
from typing import List, Optional
from dataclasses import dataclass

from ..protocol.tuning import MaintenanceResult, WriteStatus


@dataclass
class ServiceConfig:
    """Configuration for service controller."""
    unit: str = "fstrim.timer"
    systemctl: str = "systemctl"
    timeout: int = 30  # seconds


class ServiceController:
    """
    Controls systemd units through systemctl.
    """

    def __init__(self, config: Optional[ServiceConfig] = None):
        self.config = config or ServiceConfig()

    def _run_command(self, cmd: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd, capture_output=True, text=True, timeout=self.config.timeout
        )

    def available(self) -> bool:
        """True if the service supervisor is installed."""
        return shutil.which(self.config.systemctl) is not None

    def enable_command(self) -> List[str]:
        return [self.config.systemctl, "enable", "--now", self.config.unit]

    def enable(self, dry_run: bool = False) -> MaintenanceResult:
        """
        Enable and start the unit.

        Args:
            dry_run: Describe the command instead of running it

        Returns:
            MaintenanceResult (REJECTED when systemctl is missing or fails)
        """
        unit = self.config.unit
        command = " ".join(self.enable_command())

        if not self.available():
            return MaintenanceResult(
                unit=unit,
                status=WriteStatus.REJECTED,
                message=f"systemctl not found, skipping {unit} setup",
                command=command,
            )

        if dry_run:
            return MaintenanceResult(
                unit=unit,
                status=WriteStatus.DRY_RUN,
                message=f"DRY-RUN: {command}",
                command=command,
            )

        try:
            result = self._run_command(self.enable_command())
            ok = result.returncode == 0
        except (OSError, subprocess.SubprocessError):
            ok = False

        if not ok:
            return MaintenanceResult(
                unit=unit,
                status=WriteStatus.REJECTED,
                message=f"Failed to enable {unit}, run manually: {command}",
                command=command,
            )

        return MaintenanceResult(
            unit=unit,
            status=WriteStatus.APPLIED,
            message=f"{unit} enabled (weekly TRIM of all mounted filesystems)",
            command=command,
        )

"""
ConsoleUI - Rich-based console interface.

Info goes to stdout, warnings and errors to stderr, each prefixed with its
severity so the stream reads the same with or without colour.
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..protocol.tuning import (
    DeviceReport,
    MaintenanceResult,
    ParameterResult,
    RunReport,
    Severity,
    WriteStatus,
)


VERIFY_COMMANDS = [
    "lsblk -d -o NAME,ROTA,SCHED,RA | column -t",
    "systemctl status fstrim.timer  # if using systemd",
]

FSTAB_HINT = """\
To tune mount options as well, edit /etc/fstab by hand, for example:

  # ext4 (SSD/NVMe)
  UUID=xxxx-xxxx   /data  ext4  defaults,noatime,nodiratime  0  2

  # xfs (SSD/NVMe)
  UUID=yyyy-yyyy   /data  xfs   defaults,noatime,nodiratime  0  0

- noatime,nodiratime cut metadata writes for small-file workloads
- prefer periodic TRIM via fstrim.timer over the 'discard' mount option

Back up fstab and check its syntax before rebooting; a broken entry can
leave the system unbootable."""

STATUS_STYLES = {
    WriteStatus.APPLIED: "green",
    WriteStatus.DRY_RUN: "cyan",
    WriteStatus.NOT_APPLICABLE: "dim",
    WriteStatus.REJECTED: "yellow",
    WriteStatus.UNMATCHED: "yellow",
}


class ConsoleUI:
    """
    Rich console interface for ssd_tune.
    """

    def __init__(
        self,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def info(self, message: str):
        if self.quiet:
            return
        self.console.print(f"[bold blue]\\[INFO ][/] {escape(message)}")

    def warn(self, message: str):
        self.err_console.print(f"[bold yellow]\\[WARN ][/] {escape(message)}")

    def error(self, message: str):
        self.err_console.print(f"[bold red]\\[ERROR][/] {escape(message)}")

    def log(self, severity: Severity, message: str):
        {
            Severity.INFO: self.info,
            Severity.WARN: self.warn,
            Severity.ERROR: self.error,
        }[severity](message)

    def print_header(self, title: str):
        """Print a section header."""
        if self.quiet:
            return
        self.console.print()
        self.console.rule(f"[bold blue]{title}[/]")

    def print_config(self, summary: str):
        """Show the effective configuration, one info line per entry."""
        for line in summary.splitlines():
            self.info(line)

    def print_candidates(self, candidates: List[str], explicit: bool):
        source = "requested" if explicit else "detected"
        self.info(f"Tuning {source} block devices: {' '.join(candidates)}")

    def print_device_start(self, device: str):
        self.info(f"Tuning block device /dev/{device}")

    def print_device_done(self, report: DeviceReport):
        self.info(f"Block device /dev/{report.device} done")

    def print_controller_start(self, controller: str):
        self.info(f"Setting NVMe controller power policy: {controller}")

    def print_result(self, result: ParameterResult):
        """One line per write, at the result's severity."""
        self.log(result.severity, result.message)

    def print_maintenance(self, result: MaintenanceResult):
        if result.is_warning:
            self.warn(result.message)
        else:
            self.info(result.message)

    def print_summary(self, report: RunReport, verifier=None):
        """Result table, verification commands and mount-option hint."""
        if self.quiet:
            return

        self.print_header("Summary" + (" (dry run)" if report.dry_run else ""))

        table = Table(show_header=True, header_style="bold")
        table.add_column("Target")
        table.add_column("Parameter")
        table.add_column("Value")
        table.add_column("Status")
        table.add_column("Live", style="dim")

        for device in report.devices:
            if device.skipped:
                table.add_row(device.device, "-", "-", "[yellow]SKIPPED[/]", "")
                continue
            for result in device.results:
                table.add_row(device.device, *self._result_row(result, verifier))

        for controller in report.controllers:
            for result in controller.results:
                table.add_row(controller.controller, *self._result_row(result, verifier))

        if report.maintenance:
            style = STATUS_STYLES.get(report.maintenance.status, "white")
            table.add_row(
                report.maintenance.unit, "enable", "--now",
                f"[{style}]{report.maintenance.status.value}[/]", "",
            )

        self.console.print(table)

        warnings = report.warnings
        if warnings:
            self.console.print(f"[yellow]{len(warnings)} warning(s)[/]")
        else:
            self.console.print("[green]No warnings[/]")

    def _result_row(self, result: ParameterResult, verifier) -> list:
        style = STATUS_STYLES.get(result.status, "white")
        live = ""
        if verifier is not None:
            verified, actual = verifier.verify(result)
            if verified is True:
                live = actual
            elif verified is False:
                live = f"[yellow]{escape(actual)}[/]"
        return [
            result.parameter,
            escape(result.value or "-"),
            f"[{style}]{result.status.value}[/]",
            live,
        ]

    def print_verification_hints(self):
        if self.quiet:
            return
        self.info("All done. Check the result with:")
        for cmd in VERIFY_COMMANDS:
            self.console.print(f"  {cmd}")

    def print_fstab_hint(self):
        if self.quiet:
            return
        self.console.print()
        self.console.print(Panel(FSTAB_HINT, title="Mount options", border_style="cyan"))

    def print_usage(self, usage: str):
        """Usage text always prints, even in quiet mode."""
        self.console.print(usage, markup=False)

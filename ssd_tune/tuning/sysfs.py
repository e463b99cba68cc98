"""
SysfsWriter - best-effort reads and writes of kernel pseudo-files.

A write never raises and is never retried: it returns a ParameterResult
saying what happened.
"""

import os
from pathlib import Path
from typing import Optional, Union

from ..protocol.tuning import ParameterResult, WriteStatus


PathLike = Union[str, Path]


class SysfsWriter:
    """Writes single values to /sys, or describes the write in dry-run mode."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def read(self, path: PathLike) -> Optional[str]:
        """Return the stripped contents of a pseudo-file, or None."""
        try:
            return Path(path).read_text().strip()
        except OSError:
            return None

    def _write(self, path: Path, value: str):
        # One write(2) per value; sysfs handlers expect the whole value at once
        with open(path, "w") as f:
            f.write(f"{value}\n")

    def write(self, parameter: str, path: PathLike, value) -> ParameterResult:
        """
        Write `value` to `path`.

        Args:
            parameter: Short name used in reports (e.g. 'nr_requests')
            path: Pseudo-file to write
            value: Desired value

        Returns:
            ParameterResult with APPLIED, DRY_RUN, NOT_APPLICABLE or REJECTED
        """
        path = Path(path)
        value = str(value)

        if not path.exists():
            return ParameterResult(
                parameter=parameter,
                path=str(path),
                value=value,
                status=WriteStatus.NOT_APPLICABLE,
                message=f"{path} does not exist, skipping",
            )

        if not os.access(path, os.W_OK):
            return ParameterResult(
                parameter=parameter,
                path=str(path),
                value=value,
                status=WriteStatus.REJECTED,
                message=f"{path} is not writable (read-only or permission problem), skipping",
            )

        if self.dry_run:
            return ParameterResult(
                parameter=parameter,
                path=str(path),
                value=value,
                status=WriteStatus.DRY_RUN,
                message=f"DRY-RUN: echo {value} > {path}",
            )

        try:
            self._write(path, value)
        except OSError as e:
            return ParameterResult(
                parameter=parameter,
                path=str(path),
                value=value,
                status=WriteStatus.REJECTED,
                message=(
                    f"Write failed (kernel may not support the value): "
                    f"echo {value} > {path} ({e.strerror or e})"
                ),
            )

        return ParameterResult(
            parameter=parameter,
            path=str(path),
            value=value,
            status=WriteStatus.APPLIED,
            message=f"Set {path} = {value}",
        )

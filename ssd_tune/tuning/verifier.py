"""
TuningVerifier - Reads applied values back from sysfs.

The kernel may accept a write and still clamp the value (nr_requests is
bounded by the hardware queue depth), so the summary shows what is live.
"""

from typing import Optional

from ..protocol.tuning import ParameterResult, WriteStatus
from .executor import parse_scheduler_list
from .sysfs import SysfsWriter


class TuningVerifier:
    """
    Verifies that writes took effect.

    Supports:
    - Scheduler files (active entry in [brackets])
    - Plain value files
    """

    def __init__(self, writer: Optional[SysfsWriter] = None):
        self.writer = writer or SysfsWriter()

    def get_value(self, result: ParameterResult) -> Optional[str]:
        """Current live value for the result's path."""
        raw = self.writer.read(result.path)
        if raw is None:
            return None
        if result.parameter == "scheduler":
            _, current = parse_scheduler_list(raw)
            return current or raw
        return raw

    def matches(self, actual: Optional[str], expected: Optional[str]) -> bool:
        """
        Compare actual value against expected value.

        power/control reads back as-is; numeric files may gain whitespace.
        """
        if actual is None or expected is None:
            return False
        return actual.strip().lower() == expected.strip().lower()

    def verify(self, result: ParameterResult) -> tuple:
        """
        Verify one applied write.

        Returns:
            (verified: Optional[bool], actual_value: str)
            verified is None when the write was not applied.
        """
        if result.status != WriteStatus.APPLIED:
            return None, ""

        actual = self.get_value(result)
        if actual is None:
            return False, "N/A"
        return self.matches(actual, result.value), actual

"""
Pytest configuration for ssd_tune tests.

Every fixture points the code at a fake sysfs tree and fake mdstat under
tmp_path, so nothing here needs root or real hardware.
"""

import io

import pytest
from rich.console import Console

from ssd_tune.config import Config
from ssd_tune.ui.console import ConsoleUI

from tests.mocks import FakeSysfs, MDSTAT_NONE


@pytest.fixture
def sysfs(tmp_path):
    return FakeSysfs(tmp_path / "sys")


@pytest.fixture
def mdstat(tmp_path):
    path = tmp_path / "mdstat"
    path.write_text(MDSTAT_NONE)
    return path


@pytest.fixture
def config(sysfs, mdstat):
    config = Config()
    config.paths.sysfs_root = str(sysfs.root)
    config.paths.mdstat = str(mdstat)
    return config


class CapturingUI(ConsoleUI):
    """ConsoleUI writing to in-memory buffers."""

    def __init__(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        super().__init__(
            console=Console(file=self.out, width=200, color_system=None),
            err_console=Console(file=self.err, width=200, color_system=None),
        )

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


@pytest.fixture
def ui():
    return CapturingUI()

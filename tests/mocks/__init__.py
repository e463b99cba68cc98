"""
Mock components for testing ssd_tune.

These stand in for the kernel and system tools so tests never touch the
real /sys, run lsblk, or call systemctl.
"""

from .golden_data import (
    LSBLK_NVME_RAID,
    LSBLK_LEGACY_STRINGS,
    LSBLK_HDD_ONLY,
    LSBLK_EMPTY,
    MDSTAT_RAID0,
    MDSTAT_MIXED,
    MDSTAT_NONE,
    SCHEDULER_ALL,
    SCHEDULER_NO_NONE,
    SCHEDULER_KYBER_ONLY,
)
from .fake_sysfs import FakeSysfs
from .mock_system import MockSystemScanner, MockServiceController

__all__ = [
    'FakeSysfs',
    'MockSystemScanner',
    'MockServiceController',
    # Golden data
    'LSBLK_NVME_RAID',
    'LSBLK_LEGACY_STRINGS',
    'LSBLK_HDD_ONLY',
    'LSBLK_EMPTY',
    'MDSTAT_RAID0',
    'MDSTAT_MIXED',
    'MDSTAT_NONE',
    'SCHEDULER_ALL',
    'SCHEDULER_NO_NONE',
    'SCHEDULER_KYBER_ONLY',
]

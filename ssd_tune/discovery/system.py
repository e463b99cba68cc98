"""
SystemScanner - Finds solid-state block devices to tune.

Uses lsblk and /proc/mdstat (no udev or pyudev required).
"""

import json
import re
import subprocess
from typing import Any, List, Optional
from pathlib import Path

from ..config import Config, RunConfig
from ..protocol.context import BlockDevice, RaidArray, StorageContext
from ..protocol.errors import NoCandidatesError


LSBLK_COMMAND = ["lsblk", "-J", "-o", "NAME,ROTA,TYPE"]

RAID_LEVELS = ("raid10", "raid1", "raid0", "raid5", "raid6", "linear")


def parse_rotational(value: Any) -> Optional[bool]:
    """
    Normalise lsblk's ROTA column.

    Older util-linux emits "0"/"1" strings, newer emits JSON booleans.
    Anything else counts as unreadable.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return {0: False, 1: True}.get(value)
    if isinstance(value, str):
        return {"0": False, "1": True, "false": False, "true": True}.get(value.strip().lower())
    return None


def parse_lsblk(output: str) -> List[BlockDevice]:
    """Parse `lsblk -J` output into a device tree."""
    if not output:
        return []
    try:
        data = json.loads(output)
    except json.JSONDecodeError:
        return []

    def build(node: dict) -> BlockDevice:
        return BlockDevice(
            name=node.get("name", ""),
            device_type=node.get("type", ""),
            rotational=parse_rotational(node.get("rota")),
            children=[build(c) for c in node.get("children") or []],
        )

    return [build(node) for node in data.get("blockdevices", [])]


def parse_mdstat(text: str) -> List[RaidArray]:
    """Parse /proc/mdstat into RAID arrays and their member devices."""
    arrays = []
    for line in text.splitlines():
        if not line.startswith("md"):
            continue
        name, _, array_info = line.partition(":")
        if not array_info:
            continue
        tokens = array_info.split()
        level = next((t for t in tokens if t in RAID_LEVELS), "unknown")
        # Members look like nvme0n1p1[0] or sdb[1](F)
        members = re.findall(r"([A-Za-z0-9_-]+)\[\d+\]", array_info)
        arrays.append(RaidArray(name=name.strip(), level=level, members=members))
    return arrays


def dedupe(names) -> List[str]:
    """Drop repeated identifiers, keeping first-seen order."""
    seen = set()
    unique = []
    for name in names:
        if name and name not in seen:
            seen.add(name)
            unique.append(name)
    return unique


class SystemScanner:
    """
    Scans the local block-device inventory.

    Two sources feed the candidate list: lsblk (non-rotational disks) and
    /proc/mdstat (arrays whose members are all non-rotational).
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def _run_command(self, cmd: List[str]) -> str:
        """Run a read-only command, returning stdout ('' on any failure)."""
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError:
            return ""
        if result.returncode != 0:
            return ""
        return result.stdout.strip()

    def _read_mdstat(self) -> str:
        try:
            return Path(self.config.paths.mdstat).read_text()
        except OSError:
            return ""

    def scan(self) -> StorageContext:
        """Perform the inventory scan."""
        return StorageContext(
            devices=parse_lsblk(self._run_command(LSBLK_COMMAND)),
            raid_arrays=parse_mdstat(self._read_mdstat()),
        )

    def detect_candidates(self, context: Optional[StorageContext] = None) -> List[str]:
        """
        Auto-detect solid-state devices.

        Raises:
            NoCandidatesError: if nothing qualifies
        """
        context = context or self.scan()

        names = [node.name for node in context.all_nodes() if node.is_candidate]

        rotational = context.rotational_map()
        for array in context.raid_arrays:
            if array.members and all(rotational.get(m) is False for m in array.members):
                names.append(array.name)

        candidates = dedupe(names)
        if not candidates:
            raise NoCandidatesError(
                "No SSD/NVMe disks detected (ROTA=0 & TYPE=disk); check lsblk output"
            )
        return candidates

    def resolve(self, run_config: RunConfig) -> List[str]:
        """Candidate devices for this run: the allow-list, or auto-detected."""
        if run_config.explicit:
            return dedupe(run_config.devices)
        return self.detect_candidates()

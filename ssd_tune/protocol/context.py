"""
Discovery context - what the scanner learned about the host.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class BlockDevice:
    """A block device as reported by lsblk."""
    name: str                   # No /dev/ prefix
    device_type: str            # disk, part, raid0, ...
    rotational: Optional[bool]  # None = attribute missing or unreadable
    children: List["BlockDevice"] = field(default_factory=list)

    @property
    def is_solid_state(self) -> bool:
        return self.rotational is False

    @property
    def is_candidate(self) -> bool:
        """Non-rotational whole disk."""
        return self.device_type == "disk" and self.is_solid_state

    def walk(self):
        """Yield this device and all of its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class RaidArray:
    """A software-RAID array from /proc/mdstat."""
    name: str
    level: str = "unknown"
    members: List[str] = field(default_factory=list)


@dataclass
class StorageContext:
    """Block-device inventory for one run."""
    devices: List[BlockDevice] = field(default_factory=list)
    raid_arrays: List[RaidArray] = field(default_factory=list)

    def all_nodes(self) -> List[BlockDevice]:
        nodes = []
        for device in self.devices:
            nodes.extend(device.walk())
        return nodes

    def rotational_map(self) -> dict:
        return {node.name: node.rotational for node in self.all_nodes()}

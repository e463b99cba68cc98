"""
Discovery module - Finds the devices a run will tune.

Components:
- SystemScanner: lsblk + /proc/mdstat inventory and candidate detection
"""

from .system import SystemScanner, parse_lsblk, parse_mdstat, parse_rotational

__all__ = ["SystemScanner", "parse_lsblk", "parse_mdstat", "parse_rotational"]

"""Tests for candidate-device discovery."""

import pytest

from ssd_tune.config import RunConfig
from ssd_tune.discovery.system import (
    SystemScanner,
    dedupe,
    parse_lsblk,
    parse_mdstat,
    parse_rotational,
)
from ssd_tune.protocol.errors import NoCandidatesError

from tests.mocks import (
    LSBLK_EMPTY,
    LSBLK_HDD_ONLY,
    LSBLK_LEGACY_STRINGS,
    LSBLK_NVME_RAID,
    MDSTAT_MIXED,
    MDSTAT_RAID0,
    MockSystemScanner,
)


class TestParseRotational:

    @pytest.mark.parametrize("value,expected", [
        (False, False),
        (True, True),
        ("0", False),
        ("1", True),
        (0, False),
        (1, True),
        (None, None),
        ("", None),
        ("yes", None),
        (2, None),
    ])
    def test_normalises_lsblk_values(self, value, expected):
        assert parse_rotational(value) is expected


class TestParsers:

    def test_parse_lsblk_builds_tree(self):
        devices = parse_lsblk(LSBLK_NVME_RAID)

        assert [d.name for d in devices] == ["sda", "nvme0n1", "nvme1n1", "sr0"]
        nvme0 = devices[1]
        assert nvme0.children[0].name == "nvme0n1p1"
        assert nvme0.children[0].children[0].device_type == "raid0"

    def test_parse_lsblk_tolerates_garbage(self):
        assert parse_lsblk("") == []
        assert parse_lsblk("not json") == []

    def test_parse_mdstat_members(self):
        arrays = parse_mdstat(MDSTAT_RAID0)

        assert len(arrays) == 1
        assert arrays[0].name == "md0"
        assert arrays[0].level == "raid0"
        assert sorted(arrays[0].members) == ["nvme0n1p1", "nvme1n1p1"]

    def test_dedupe_keeps_first_seen_order(self):
        assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


class TestDetectCandidates:

    def test_nvme_disks_and_all_ssd_raid(self, config, mdstat):
        mdstat.write_text(MDSTAT_RAID0)
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        assert scanner.detect_candidates() == ["nvme0n1", "nvme1n1", "md0"]

    def test_rotational_disk_excluded(self, config):
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        candidates = scanner.detect_candidates()

        assert "sda" not in candidates
        assert "sr0" not in candidates

    def test_unreadable_rotational_excluded(self, config):
        scanner = MockSystemScanner(config, LSBLK_LEGACY_STRINGS)

        # vda has no ROTA value, sdb is rotational, loop0 is not a disk
        assert scanner.detect_candidates() == ["sda"]

    def test_raid_with_hdd_member_excluded(self, config, mdstat):
        mdstat.write_text(MDSTAT_MIXED)
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        assert "md1" not in scanner.detect_candidates()

    def test_md_reported_once(self, config, mdstat):
        # md0 shows up under both members in lsblk and again in mdstat
        mdstat.write_text(MDSTAT_RAID0)
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        assert scanner.detect_candidates().count("md0") == 1

    @pytest.mark.parametrize("output", [LSBLK_HDD_ONLY, LSBLK_EMPTY, ""])
    def test_nothing_to_tune_is_fatal(self, config, output):
        scanner = MockSystemScanner(config, output)

        with pytest.raises(NoCandidatesError):
            scanner.detect_candidates()

    def test_missing_mdstat_is_not_an_error(self, config, tmp_path):
        config.paths.mdstat = str(tmp_path / "does-not-exist")
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        assert scanner.detect_candidates() == ["nvme0n1", "nvme1n1"]

    def test_missing_lsblk_binary(self, config, monkeypatch):
        def boom(*args, **kwargs):
            raise FileNotFoundError("lsblk")

        monkeypatch.setattr("ssd_tune.discovery.system.subprocess.run", boom)

        with pytest.raises(NoCandidatesError):
            SystemScanner(config).detect_candidates()


class TestResolve:

    def test_explicit_list_used_verbatim(self, config):
        scanner = MockSystemScanner(config, LSBLK_HDD_ONLY)

        # sda is rotational, but explicit mode does not filter
        assert scanner.resolve(RunConfig(devices=("sda", "md0", "sda"))) == ["sda", "md0"]
        assert scanner.commands == []

    def test_auto_detect_when_no_devices(self, config):
        scanner = MockSystemScanner(config, LSBLK_NVME_RAID)

        assert scanner.resolve(RunConfig()) == ["nvme0n1", "nvme1n1"]
        assert scanner.commands == [["lsblk", "-J", "-o", "NAME,ROTA,TYPE"]]

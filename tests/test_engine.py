"""End-to-end tests of the tuning pipeline against a fake sysfs."""

import pytest

from ssd_tune.config import RunConfig
from ssd_tune.protocol.errors import NoCandidatesError
from ssd_tune.protocol.tuning import WriteStatus
from ssd_tune.runner.engine import TuneEngine
from ssd_tune.runner.state import State

from tests.mocks import (
    LSBLK_HDD_ONLY,
    LSBLK_NVME_RAID,
    MDSTAT_RAID0,
    MockServiceController,
    MockSystemScanner,
)


def make_engine(config, run_config=None, lsblk=LSBLK_NVME_RAID, service=None):
    return TuneEngine(
        config,
        run_config or RunConfig(),
        scanner=MockSystemScanner(config, lsblk),
        service_controller=service or MockServiceController(),
    )


@pytest.fixture
def host(sysfs, mdstat):
    """Two NVMe disks in RAID0, one HDD, two controllers."""
    mdstat.write_text(MDSTAT_RAID0)
    sysfs.add_block_device("nvme0n1", {"scheduler": "[none] mq-deadline"})
    sysfs.add_block_device("nvme1n1", {"scheduler": "[none] mq-deadline"})
    sysfs.add_block_device("md0", {"scheduler": "none", "nr_requests": None})
    sysfs.add_block_device("sda", {"rotational": "1"})
    sysfs.add_nvme_controller("nvme0")
    sysfs.add_nvme_controller("nvme1")
    return sysfs


def test_full_run(config, host):
    service = MockServiceController()
    engine = make_engine(config, service=service)

    report = engine.run()

    assert report.candidates == ["nvme0n1", "nvme1n1", "md0"]
    assert [d.device for d in report.devices] == report.candidates
    assert host.read_queue("nvme0n1", "nr_requests") == "1024"
    assert host.read_queue("md0", "read_ahead_kb") == "128"
    assert host.read_queue("sda", "nr_requests") == "256"
    assert host.read("class/nvme/nvme1/power/control") == "on"
    assert report.maintenance.status == WriteStatus.APPLIED
    assert len(service.commands) == 1
    assert report.warnings == []
    assert engine.state_machine.state == State.COMPLETE


def test_auto_detect_empty_is_fatal_and_writes_nothing(config, host):
    before = host.snapshot()
    service = MockServiceController()
    engine = make_engine(config, lsblk=LSBLK_HDD_ONLY, service=service)

    with pytest.raises(NoCandidatesError):
        engine.run()

    assert host.snapshot() == before
    assert service.commands == []
    assert engine.state_machine.state == State.FAILED


def test_explicit_devices_forced(config, host):
    engine = make_engine(config, RunConfig(devices=("sda",)), lsblk=LSBLK_HDD_ONLY)

    report = engine.run()

    assert report.candidates == ["sda"]
    assert report.devices[0].forced
    assert host.read_queue("sda", "nr_requests") == "1024"


def test_bad_device_does_not_stop_the_run(config, host):
    engine = make_engine(config, RunConfig(devices=("nvme7n1", "nvme0n1")))

    report = engine.run()

    assert report.devices[0].skipped
    assert not report.devices[1].skipped
    assert host.read_queue("nvme0n1", "nr_requests") == "1024"
    assert len(report.warnings) == 1
    assert engine.state_machine.state == State.COMPLETE


def test_no_controllers_is_warning(config, sysfs):
    sysfs.add_block_device("nvme0n1")
    engine = make_engine(config, RunConfig(devices=("nvme0n1",)))

    report = engine.run()

    assert report.controllers == []
    assert len(report.controller_warnings) == 1
    assert report.controller_warnings[0] in report.warnings


def test_missing_systemctl_is_warning(config, host):
    engine = make_engine(config, service=MockServiceController(installed=False))

    report = engine.run()

    assert report.maintenance.is_warning
    assert report.warnings == [report.maintenance.message]


def test_trim_disabled(config, host):
    config.maintenance.enable_trim = False
    service = MockServiceController()
    engine = make_engine(config, service=service)

    report = engine.run()

    assert report.maintenance.status == WriteStatus.NOT_APPLICABLE
    assert service.commands == []
    assert report.warnings == []


def test_dry_run_pipeline(config, host):
    before = host.snapshot()
    service = MockServiceController()
    engine = make_engine(config, RunConfig(dry_run=True), service=service)

    report = engine.run()

    assert host.snapshot() == before
    assert service.commands == []
    assert report.maintenance.status == WriteStatus.DRY_RUN
    assert all(w.status == WriteStatus.DRY_RUN for w in report.writes)
    # 4 + 4 + 3 queue knobs (md0 has no nr_requests), 2 x 2 controller knobs
    assert len(report.writes) == 15


def test_dry_run_matches_real_run(config, host):
    planned = make_engine(config, RunConfig(dry_run=True)).run()
    applied = make_engine(config).run()

    assert [(w.path, w.value) for w in planned.writes] == \
        [(w.path, w.value) for w in applied.writes]


def test_second_run_same_state(config, host):
    first = make_engine(config).run()
    after_first = host.snapshot()
    second = make_engine(config).run()

    assert host.snapshot() == after_first
    assert len(second.warnings) <= len(first.warnings)


def test_callbacks_fire_in_order(config, host):
    events = []
    engine = make_engine(config)
    engine.on_candidates(lambda c: events.append(("candidates", tuple(c))))
    engine.on_device(lambda d: events.append(("device", d)))
    engine.on_controller(lambda c: events.append(("controller", c)))
    engine.on_maintenance(lambda m: events.append(("maintenance", m.unit)))

    engine.run()

    assert events == [
        ("candidates", ("nvme0n1", "nvme1n1", "md0")),
        ("device", "nvme0n1"),
        ("device", "nvme1n1"),
        ("device", "md0"),
        ("controller", "nvme0"),
        ("controller", "nvme1"),
        ("maintenance", "fstrim.timer"),
    ]


def test_state_history(config, host):
    engine = make_engine(config)
    seen = []
    engine.on_state_change(lambda event: seen.append(event.to_state))

    engine.run()

    assert [e.to_state for e in engine.state_machine.history] == [
        State.DISCOVER,
        State.TUNE_DEVICES,
        State.TUNE_CONTROLLERS,
        State.MAINTENANCE,
        State.COMPLETE,
    ]
    assert seen == [e.to_state for e in engine.state_machine.history]

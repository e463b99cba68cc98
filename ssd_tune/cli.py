"""
CLI - Command-line interface for ssd_tune.

    sudo ssd-tune                     auto-detect every SSD/NVMe and tune it
    sudo ssd-tune nvme0n1 md0         tune only the named block devices
    sudo ssd-tune --dry-run           show what would be written, change nothing
"""

import argparse
import os
import sys
from typing import List, Optional

from .config import Config, RunConfig
from .protocol.errors import ConfigError, PrivilegeError, TuneError, UsageError
from .runner.engine import TuneEngine
from .tuning.verifier import TuningVerifier
from .ui.console import ConsoleUI


DESCRIPTION = "Generic SSD / NVMe block-device tuning"

EPILOG = """
Notes:
  - Only non-rotational (ROTA=0) block devices are tuned when auto-detecting;
    devices named on the command line are tuned as given.
  - Never creates or deletes partitions, touches filesystems or changes
    RAID layout.
  - Only /sys/block/... queue parameters and NVMe power policy are changed,
    and nothing persists across reboots.

Examples:
    sudo ssd-tune
    sudo ssd-tune nvme0n1 sda md0
    sudo ssd-tune --dry-run
    sudo ssd-tune --dry-run nvme0n1
"""


class ArgumentParser(argparse.ArgumentParser):
    """Raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="ssd-tune",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
        add_help=False,
        allow_abbrev=False,
    )

    parser.add_argument(
        '-h', '--help',
        action='store_true',
        help='Show this help and exit'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Only print the writes that would happen (must precede device names)'
    )
    parser.add_argument(
        '--no-trim',
        action='store_true',
        help='Do not enable fstrim.timer'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Only print warnings and errors'
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='TOML config file (default: $SSD_TUNE_CONFIG or ./ssd_tune.toml)'
    )
    parser.add_argument(
        'devices',
        nargs=argparse.REMAINDER,
        metavar='DEVICE',
        help='Block device names without /dev/ (e.g. nvme0n1 sda md0)'
    )

    return parser


def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command line arguments.

    Everything from the first device name onwards is a device name, so
    options have to come first.

    Raises:
        UsageError: on --help or bad arguments
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help:
        raise UsageError(parser.format_help())

    for device in args.devices:
        if device.startswith('-'):
            raise UsageError(
                f"option {device} must come before device names\n\n{parser.format_usage()}"
            )

    return args


def require_root():
    """
    Raises:
        PrivilegeError: if not running as root
    """
    if os.geteuid() != 0:
        raise PrivilegeError("Run as root: sudo ssd-tune ...")


def build_run_config(args) -> RunConfig:
    return RunConfig(
        dry_run=args.dry_run,
        devices=tuple(args.devices),
    )


def run(argv: Optional[List[str]] = None, ui: Optional[ConsoleUI] = None) -> int:
    """
    Run ssd_tune and return the process exit status.

    0 on completion (warnings allowed), 1 on missing privilege, nothing to
    tune, or usage.
    """
    ui = ui or ConsoleUI()

    try:
        require_root()
        args = parse_args(argv)
        run_config = build_run_config(args)

        config = Config.load(args.config).override_from_args(args)
        errors = config.validate()
        if errors:
            raise ConfigError("Invalid configuration:\n  " + "\n  ".join(errors))
        ui.quiet = config.output.quiet
        ui.print_config(config.summary())

        engine = TuneEngine(config, run_config)
        engine.on_result(ui.print_result)
        engine.on_device(ui.print_device_start, ui.print_device_done)
        engine.on_controller(ui.print_controller_start)
        engine.on_maintenance(ui.print_maintenance)
        engine.on_warning(ui.warn)
        engine.on_candidates(
            lambda candidates: ui.print_candidates(candidates, run_config.explicit)
        )

        if not run_config.explicit:
            ui.info("Auto-detecting SSD/NVMe devices (ROTA=0 & TYPE=disk)...")

        report = engine.run()

        verifier = None if run_config.dry_run else TuningVerifier(engine.writer)
        ui.print_summary(report, verifier)
        if config.output.fstab_hint:
            ui.print_fstab_hint()
        ui.print_verification_hints()

    except UsageError as e:
        ui.print_usage(str(e))
        return e.exit_code

    except TuneError as e:
        ui.error(str(e))
        return e.exit_code

    except KeyboardInterrupt:
        ui.error("Interrupted by user")
        return 130

    return 0


def main():
    """Main entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()

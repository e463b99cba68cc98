"""
Configuration management for ssd_tune.

Supports:
- TOML config files
- Environment variables
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Config file
4. Defaults
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib

from .protocol.errors import ConfigError


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "ssd_tune.toml",
    Path.home() / ".config" / "ssd_tune" / "config.toml",
    Path("/etc/ssd_tune.toml"),
]

CONFIG_ENV_VAR = "SSD_TUNE_CONFIG"
SYSFS_ROOT_ENV_VAR = "SSD_TUNE_SYSFS_ROOT"


@dataclass
class TargetsConfig:
    """Queue parameters applied to every candidate block device."""
    nr_requests: int = 1024
    read_ahead_kb: int = 128
    # 2 = complete on the submitting CPU when appropriate
    rq_affinity: int = 2
    # Scheduler preference, first available wins
    schedulers: List[str] = field(default_factory=lambda: ["none", "mq-deadline"])


@dataclass
class PowerConfig:
    """NVMe controller power policy."""
    control: str = "on"
    ps_max_latency_us: int = 0


@dataclass
class MaintenanceConfig:
    """Periodic TRIM job."""
    enable_trim: bool = True
    timer: str = "fstrim.timer"


@dataclass
class PathsConfig:
    """Kernel surfaces. Overridable so a fake tree can stand in for /sys."""
    sysfs_root: str = "/sys"
    mdstat: str = "/proc/mdstat"


@dataclass
class OutputConfig:
    """Output configuration."""
    quiet: bool = False
    fstab_hint: bool = True


@dataclass
class Config:
    """Main configuration container."""
    targets: TargetsConfig = field(default_factory=TargetsConfig)
    power: PowerConfig = field(default_factory=PowerConfig)
    maintenance: MaintenanceConfig = field(default_factory=MaintenanceConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file, then apply environment overrides.

        Args:
            config_path: Explicit path to config file. If None, checks
                $SSD_TUNE_CONFIG and then the default locations.

        Returns:
            Config instance with loaded values
        """
        config = cls()

        config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        sysfs_root = os.environ.get(SYSFS_ROOT_ENV_VAR)
        if sysfs_root:
            config.paths.sysfs_root = sysfs_root

        return config

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        for section in ("targets", "power", "maintenance", "paths", "output"):
            if section in data and not isinstance(data[section], dict):
                raise ConfigError(f"[{section}] must be a table")

        if "targets" in data:
            t = data["targets"]
            config.targets = TargetsConfig(
                nr_requests=t.get("nr_requests", config.targets.nr_requests),
                read_ahead_kb=t.get("read_ahead_kb", config.targets.read_ahead_kb),
                rq_affinity=t.get("rq_affinity", config.targets.rq_affinity),
                schedulers=t.get("schedulers", config.targets.schedulers),
            )

        if "power" in data:
            p = data["power"]
            config.power = PowerConfig(
                control=p.get("control", config.power.control),
                ps_max_latency_us=p.get("ps_max_latency_us", config.power.ps_max_latency_us),
            )

        if "maintenance" in data:
            m = data["maintenance"]
            config.maintenance = MaintenanceConfig(
                enable_trim=m.get("enable_trim", config.maintenance.enable_trim),
                timer=m.get("timer", config.maintenance.timer),
            )

        if "paths" in data:
            p = data["paths"]
            config.paths = PathsConfig(
                sysfs_root=p.get("sysfs_root", config.paths.sysfs_root),
                mdstat=p.get("mdstat", config.paths.mdstat),
            )

        if "output" in data:
            out = data["output"]
            config.output = OutputConfig(
                quiet=out.get("quiet", config.output.quiet),
                fstab_hint=out.get("fstab_hint", config.output.fstab_hint),
            )

        return config

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None/False are ignored (keeping config file values).
        """
        if getattr(args, "no_trim", False):
            self.maintenance.enable_trim = False
        if getattr(args, "quiet", False):
            self.output.quiet = True

        return self

    def _type_errors(self) -> list:
        errors = []

        for name, value in (
            ("targets.nr_requests", self.targets.nr_requests),
            ("targets.read_ahead_kb", self.targets.read_ahead_kb),
            ("targets.rq_affinity", self.targets.rq_affinity),
            ("power.ps_max_latency_us", self.power.ps_max_latency_us),
        ):
            # bool is an int subclass; `true` is not a queue depth
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")

        for name, value in (
            ("maintenance.enable_trim", self.maintenance.enable_trim),
            ("output.quiet", self.output.quiet),
            ("output.fstab_hint", self.output.fstab_hint),
        ):
            if not isinstance(value, bool):
                errors.append(f"{name} must be true or false, got {value!r}")

        for name, value in (
            ("power.control", self.power.control),
            ("maintenance.timer", self.maintenance.timer),
            ("paths.sysfs_root", self.paths.sysfs_root),
            ("paths.mdstat", self.paths.mdstat),
        ):
            if not isinstance(value, str):
                errors.append(f"{name} must be a string, got {value!r}")

        schedulers = self.targets.schedulers
        if not isinstance(schedulers, list) or not all(isinstance(s, str) for s in schedulers):
            errors.append(
                f"targets.schedulers must be a list of scheduler names, got {schedulers!r}"
            )

        return errors

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = self._type_errors()
        # Range checks below assume the right types
        if errors:
            return errors

        if self.targets.nr_requests < 1:
            errors.append("targets.nr_requests must be at least 1")
        if self.targets.read_ahead_kb < 0:
            errors.append("targets.read_ahead_kb must not be negative")
        if self.targets.rq_affinity not in (0, 1, 2):
            errors.append("targets.rq_affinity must be 0, 1 or 2")
        if not self.targets.schedulers:
            errors.append("targets.schedulers must name at least one scheduler")
        if self.power.ps_max_latency_us < 0:
            errors.append("power.ps_max_latency_us must not be negative")
        if not self.paths.sysfs_root:
            errors.append("paths.sysfs_root is required")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(
            f"Queue: scheduler {'/'.join(self.targets.schedulers)}, "
            f"nr_requests {self.targets.nr_requests}, "
            f"read_ahead_kb {self.targets.read_ahead_kb}, "
            f"rq_affinity {self.targets.rq_affinity}"
        )
        lines.append(
            f"NVMe power: control={self.power.control}, "
            f"ps_max_latency_us={self.power.ps_max_latency_us}"
        )
        if self.maintenance.enable_trim:
            lines.append(f"TRIM: {self.maintenance.timer}")
        else:
            lines.append("TRIM: (disabled)")
        lines.append(f"sysfs: {self.paths.sysfs_root}")

        return "\n".join(lines)


@dataclass(frozen=True)
class RunConfig:
    """
    Per-invocation options. Built once by the CLI and passed to every
    component; never mutated during a run.
    """
    dry_run: bool = False
    devices: Tuple[str, ...] = ()

    @property
    def explicit(self) -> bool:
        """True when the operator named devices instead of auto-detecting."""
        return bool(self.devices)

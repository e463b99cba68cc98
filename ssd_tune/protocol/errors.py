"""
Fatal error types.

Only conditions that abort the whole run are exceptions. Everything
recoverable travels as a WriteStatus inside the RunReport.
"""


class TuneError(Exception):
    """Base class for conditions that end the run with exit status 1."""
    exit_code = 1


class PrivilegeError(TuneError):
    """Process is not running with root privileges."""
    pass


class NoCandidatesError(TuneError):
    """Auto-detection found no non-rotational disks."""
    pass


class ConfigError(TuneError):
    """Config file missing, unparseable or invalid."""
    pass


class UsageError(TuneError):
    """Help requested or arguments could not be parsed."""
    pass

"""Global constants for ec2dev.

This module contains application-wide constants shared by the state toggle,
the convergence poller and the SSH config reconciler.
"""

from enum import Enum

POLL_MAX_ATTEMPTS = 60
"""Maximum number of describe calls made while waiting for convergence.

Together with POLL_INTERVAL_SECONDS this bounds the wait to roughly two
minutes, which covers a normal EC2 start or stop.
"""

POLL_INTERVAL_SECONDS = 2.0
"""Delay in seconds between two consecutive convergence poll attempts."""

SSH_HOST_DIRECTIVE = "Host "
"""Prefix of a line that opens a host block in an SSH client config."""

SSH_SERVER_ALIVE_INTERVAL = 5
"""ServerAliveInterval value written into every reconciled host block."""

SSH_EXIT_ON_FORWARD_FAILURE = "yes"
"""ExitOnForwardFailure value written into every reconciled host block."""

SSH_CONFIG_FILE_MODE = 0o600
"""Permissions for a newly created SSH config file."""

SSH_DIR_MODE = 0o700
"""Permissions for a newly created ~/.ssh directory."""

DEFAULT_CONFIG_RELATIVE_PATH = ".ec2dev/config.yml"
"""Location of the settings file relative to the home directory."""

DEFAULT_SSH_CONFIG_RELATIVE_PATH = ".ssh/config"
"""Location of the SSH client config relative to the home directory."""

DEFAULT_PROVIDER = "aws"
"""Cloud provider used when none is configured."""

EXIT_SUCCESS = 0
"""Exit code indicating successful program completion."""

EXIT_ERROR = 1
"""Exit code indicating a provider, I/O or other runtime error."""

EXIT_CONFIG_ERROR = 2
"""Exit code indicating a missing or invalid settings file."""

EXIT_INTERRUPTED = 130
"""Exit code used when the operator interrupts the run with Ctrl-C."""


class InstanceStatus(str, Enum):
    """Instance status as seen by the toggle.

    Only the two stable states are actionable; everything else the provider
    may report (pending, stopping, terminated, ...) collapses into OTHER.
    """

    RUNNING = "running"
    STOPPED = "stopped"
    OTHER = "other"

    @classmethod
    def from_state_name(cls, state_name: str | None) -> "InstanceStatus":
        """Map a raw provider state name onto an InstanceStatus."""
        if state_name == cls.RUNNING.value:
            return cls.RUNNING
        if state_name == cls.STOPPED.value:
            return cls.STOPPED
        return cls.OTHER


REACHABLE_STATUS = InstanceStatus.RUNNING
"""Status at which the instance has a usable public address."""

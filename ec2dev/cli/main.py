"""CLI entry point for ec2dev."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import fire

from ec2dev.constants import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
)
from ec2dev.logging import StreamFormatter, StreamRoutingFilter
from ec2dev.providers import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    TransitionFailedError,
)
from ec2dev.providers.aws.utils import get_aws_credentials_error_message

DEFAULT_COMMAND = "toggle"


def get_ec2dev_base_class() -> type:
    """Get Ec2Dev base class on-demand to avoid circular imports.

    Returns
    -------
    type
        Ec2Dev base class
    """
    from ec2dev.__main__ import Ec2Dev

    return Ec2Dev


class Ec2DevCLI:
    """CLI wrapper that turns command results into process exit codes.

    Defined as a factory that creates a subclass of Ec2Dev at runtime to
    avoid circular import issues. Commands print through logging and return
    None so fire does not echo the result dictionaries.
    """

    _cached_class: type | None = None

    def __new__(cls, **kwargs: Any) -> Any:
        if cls._cached_class is None:
            Ec2Dev = get_ec2dev_base_class()

            class Ec2DevCLIImpl(Ec2Dev):
                """CLI wrapper implementation for Ec2Dev."""

                def toggle(self, yes: bool = False) -> None:
                    """Start the instance if stopped, stop it if running.

                    Parameters
                    ----------
                    yes : bool
                        Skip the confirmation prompt
                    """
                    result = super().toggle(yes=yes)
                    exit_code = result.get("exit_code", EXIT_SUCCESS)
                    if exit_code != EXIT_SUCCESS:
                        sys.exit(exit_code)

                def status(self) -> None:
                    """Show the instance state and public address."""
                    super().status()

                def ssh_config(self) -> None:
                    """Refresh the SSH host entry for an already running instance."""
                    super().ssh_config()

            cls._cached_class = Ec2DevCLIImpl

        return cls._cached_class(**kwargs)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle settings and other precondition errors.

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_transition_error(error: TransitionFailedError, debug_mode: bool) -> None:
    """Handle a rejected start or stop request.

    Nothing after the request has run: no polling, no SSH config change.

    Raises
    ------
    TransitionFailedError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(str(error), file=sys.stderr)

    if error.error_code == "IncorrectInstanceState":
        print(
            "The instance changed state in the meantime. Run 'ec2dev status' and retry.",
            file=sys.stderr,
        )
    elif error.error_code == "UnauthorizedOperation":
        print(
            f"Your credentials are not allowed to {error.action} instances "
            f"(ec2:{error.action.capitalize()}Instances).",
            file=sys.stderr,
        )

    print("The instance state was not changed.", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider query errors with context-specific messages.

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    if isinstance(error, InstanceNotFoundError):
        print(f"{error}\n", file=sys.stderr)
        print("Check 'instance_id' and 'region' in your settings file.", file=sys.stderr)
    elif error.error_code == "UnauthorizedOperation":
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print("Contact your cloud administrator to grant:", file=sys.stderr)
        print(
            "  - ec2:DescribeInstances, ec2:StartInstances, ec2:StopInstances",
            file=sys.stderr,
        )
    elif error.error_code in ["ExpiredToken", "RequestExpired", "ExpiredTokenException"]:
        print("Cloud credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    else:
        print(f"Cloud API error: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_connection_error(error: ProviderConnectionError, debug_mode: bool) -> None:
    """Handle unreachable provider endpoint.

    Raises
    ------
    ProviderConnectionError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Could not reach the cloud API: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_os_error(error: OSError, debug_mode: bool) -> None:
    """Handle SSH config read or write failures.

    Raises
    ------
    OSError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"File error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_interrupt() -> None:
    """Handle Ctrl-C; an accepted start or stop keeps running remotely."""
    print(
        "\nInterrupted. A submitted start or stop request still completes on the "
        "provider side; run 'ec2dev status' to check.",
        file=sys.stderr,
    )
    sys.exit(EXIT_INTERRUPTED)


def setup_logging(level: int = logging.INFO) -> None:
    """Route INFO to stdout and WARNING and above to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=level,
        handlers=[stdout_handler, stderr_handler],
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for Fire CLI with graceful error handling.

    Running ``ec2dev`` without a command performs ``toggle``. Every error
    category is handled here: settings errors exit with 2, provider and file
    errors with 1, Ctrl-C with 130. ``EC2DEV_DEBUG=1`` re-raises instead.
    """
    debug_mode = os.environ.get("EC2DEV_DEBUG") == "1"
    setup_logging(logging.DEBUG if debug_mode else logging.INFO)

    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        args = [DEFAULT_COMMAND]

    try:
        fire.Fire(Ec2DevCLI(), command=args)
    except KeyboardInterrupt:
        if debug_mode:
            raise
        handle_interrupt()
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except TransitionFailedError as e:
        handle_transition_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ProviderConnectionError as e:
        handle_connection_error(e, debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except OSError as e:
        handle_os_error(e, debug_mode)

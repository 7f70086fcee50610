#!/usr/bin/env python3
"""ec2dev - toggle a development EC2 instance."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from ec2dev.constants import EXIT_ERROR, REACHABLE_STATUS  # noqa: E402
from ec2dev.core.config import Paths, Settings, SettingsLoader  # noqa: E402
from ec2dev.core.interfaces import ComputeProvider  # noqa: E402
from ec2dev.core.poller import ConvergencePoller  # noqa: E402
from ec2dev.core.toggle_executor import ToggleExecutor  # noqa: E402
from ec2dev.core.transition import InstanceInspector  # noqa: E402
from ec2dev.providers import get_provider  # noqa: E402
from ec2dev.services.ssh_config import SSHConfigReconciler  # noqa: E402
from ec2dev.templates import CONFIG_TEMPLATE  # noqa: E402
from ec2dev.cli.main import main  # noqa: E402
from ec2dev.utils import confirm_transition, log_and_print_error  # noqa: E402

logger = logging.getLogger(__name__)


class Ec2Dev:
    """Main CLI interface for ec2dev."""

    def __init__(
        self,
        compute_provider_factory: Callable[..., ComputeProvider] | None = None,
        paths: Paths | None = None,
        input_func: Callable[[str], str] | None = None,
        poller_factory: Callable[[InstanceInspector], ConvergencePoller] | None = None,
    ) -> None:
        """Initialize ec2dev with optional dependency injection."""
        self._compute_provider_factory_override = compute_provider_factory
        self._paths = paths
        self._settings_loader = SettingsLoader()
        self._input_func = input_func or input
        self._poller_factory = poller_factory

    @property
    def paths(self) -> Paths:
        """File locations, resolved from the environment on first use."""
        if self._paths is None:
            self._paths = Paths.from_environment()
        return self._paths

    def _load_settings(self) -> Settings:
        return self._settings_loader.load(self.paths.config_file)

    def _create_compute_provider(self, settings: Settings) -> ComputeProvider:
        if self._compute_provider_factory_override is not None:
            return self._compute_provider_factory_override(region=settings.region)
        return get_provider(settings.provider)(region=settings.region)

    def _create_executor(self, settings: Settings) -> ToggleExecutor:
        return ToggleExecutor(
            settings=settings,
            compute_provider=self._create_compute_provider(settings),
            ssh_reconciler=SSHConfigReconciler(self.paths.ssh_config_file),
            confirm=lambda target: confirm_transition(target, self._input_func),
            poller_factory=self._poller_factory,
        )

    def toggle(self, yes: bool = False) -> dict[str, Any]:
        """Start the instance if stopped, stop it if running.

        Parameters
        ----------
        yes : bool
            Skip the confirmation prompt
        """
        settings = self._load_settings()
        return self._create_executor(settings).execute(assume_yes=yes)

    def status(self) -> dict[str, Any]:
        """Show the instance state and public address."""
        settings = self._load_settings()
        inspector = InstanceInspector(self._create_compute_provider(settings))
        instance = inspector.inspect(settings.instance_id)

        logger.info("Instance ID: %s", instance.instance_id)
        logger.info("State: %s", instance.state)
        if instance.public_ip:
            logger.info("Public IP: %s", instance.public_ip)

        return {
            "instance_id": instance.instance_id,
            "state": instance.state,
            "public_ip": instance.public_ip,
        }

    def ssh_config(self) -> dict[str, Any]:
        """Refresh the SSH host entry for an already running instance."""
        settings = self._load_settings()
        executor = self._create_executor(settings)

        if settings.manages_ssh_config:
            executor.ssh_reconciler.check_readable()

        instance = executor.inspector.inspect(settings.instance_id)

        if instance.status is REACHABLE_STATUS:
            updated = executor.update_ssh_config(instance)
        else:
            logger.info("Instance is %s; run 'ec2dev toggle' to start it", instance.state)
            updated = False

        return {
            "instance_id": instance.instance_id,
            "state": instance.state,
            "public_ip": instance.public_ip,
            "ssh_config_updated": updated,
        }

    def init(self, force: bool = False) -> None:
        """Create a default settings file."""
        config_file = self.paths.config_file

        if config_file.exists() and not force:
            log_and_print_error(
                "%s already exists. Use --force to overwrite.",
                config_file,
            )
            sys.exit(EXIT_ERROR)

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            f.write(CONFIG_TEMPLATE)

        print(f"Created {config_file} settings file.")


if __name__ == "__main__":
    main()

"""Orchestration of a single start/stop toggle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ec2dev.constants import REACHABLE_STATUS, EXIT_SUCCESS
from ec2dev.core.config import Settings
from ec2dev.core.interfaces import ComputeProvider
from ec2dev.core.models import Instance
from ec2dev.core.poller import ConvergencePoller, TimedOut
from ec2dev.core.transition import (
    InstanceInspector,
    StateTransitioner,
    plan_transition,
)
from ec2dev.services.ssh_config import SSHConfigReconciler
from ec2dev.utils import confirm_transition

logger = logging.getLogger(__name__)


class ToggleExecutor:
    """Run inspect, plan, confirm, transition, poll and reconcile in order.

    Parameters
    ----------
    settings : Settings
        Validated settings
    compute_provider : ComputeProvider
        Provider for the configured region
    ssh_reconciler : SSHConfigReconciler
        Reconciler bound to the SSH config file
    confirm : Callable[[str], bool]
        Confirmation callback receiving the target state name
    poller_factory : Callable[[InstanceInspector], ConvergencePoller] | None
        Optional factory for the poller, used to shorten waits in tests
    """

    def __init__(
        self,
        settings: Settings,
        compute_provider: ComputeProvider,
        ssh_reconciler: SSHConfigReconciler,
        confirm: Callable[[str], bool] = confirm_transition,
        poller_factory: Callable[[InstanceInspector], ConvergencePoller] | None = None,
    ) -> None:
        self.settings = settings
        self.compute_provider = compute_provider
        self.ssh_reconciler = ssh_reconciler
        self.confirm = confirm
        self.inspector = InstanceInspector(compute_provider)
        self.transitioner = StateTransitioner(compute_provider)
        self.poller = (poller_factory or ConvergencePoller)(self.inspector)

    def execute(self, assume_yes: bool = False) -> dict[str, Any]:
        """Toggle the instance and reconcile the SSH config when it comes up.

        Parameters
        ----------
        assume_yes : bool
            Skip the confirmation prompt

        Returns
        -------
        dict[str, Any]
            Run summary: instance_id, previous_state, target_state,
            final_state, public_ip, converged, ssh_config_updated, exit_code

        Raises
        ------
        ProviderError
            If describing the instance fails or the transition is rejected
        OSError
            If the SSH config cannot be read or written
        """
        instance_id = self.settings.instance_id

        if self.settings.manages_ssh_config:
            self.ssh_reconciler.check_readable()

        instance = self.inspector.inspect(instance_id)
        self._log_instance(instance)

        result: dict[str, Any] = {
            "instance_id": instance_id,
            "previous_state": instance.state,
            "target_state": None,
            "final_state": instance.state,
            "public_ip": instance.public_ip,
            "converged": False,
            "ssh_config_updated": False,
            "exit_code": EXIT_SUCCESS,
        }

        plan = plan_transition(instance.status)
        if not plan.should_act:
            logger.info(
                "Instance is %s; only running or stopped instances can be toggled",
                instance.state,
            )
            return result

        target = plan.target.value
        result["target_state"] = target

        if not assume_yes and not self.confirm(target):
            logger.info("Aborted")
            return result

        logger.info("Changing the state to %s", target)
        self.transitioner.apply(instance_id, plan)

        logger.info("Waiting for %s state.", target)
        outcome = self.poller.wait(instance_id, plan.target)
        final = outcome.instance
        self._log_instance(final)

        result["final_state"] = final.state
        result["public_ip"] = final.public_ip
        result["converged"] = outcome.converged

        if isinstance(outcome, TimedOut):
            logger.warning(
                "Gave up waiting after %d attempts; the instance is still %s",
                outcome.attempts,
                final.state,
            )
            return result

        if plan.target is REACHABLE_STATUS:
            result["ssh_config_updated"] = self.update_ssh_config(final)

        return result

    def update_ssh_config(self, instance: Instance) -> bool:
        """Write the host block for a running instance.

        Returns
        -------
        bool
            True if the SSH config was rewritten
        """
        if not self.settings.manages_ssh_config:
            logger.info("No SSH host name configured; leaving SSH config untouched")
            return False

        if instance.status is not REACHABLE_STATUS or not instance.public_ip:
            logger.warning(
                "Instance %s has no public address; leaving SSH config untouched",
                instance.instance_id,
            )
            return False

        block = self.settings.host_block(instance.public_ip)
        self.ssh_reconciler.reconcile(block)

        logger.info("Updated host %s in %s", block.alias, self.ssh_reconciler.path)
        logger.info("Run below command to connect vscode:")
        logger.info("code --remote ssh-remote+%s", block.alias)
        return True

    def _log_instance(self, instance: Instance) -> None:
        logger.info("Instance ID: %s", instance.instance_id)
        logger.info("State: %s", instance.state)

"""Inspecting the instance, planning and issuing the state transition."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ec2dev.constants import InstanceStatus
from ec2dev.core.interfaces import ComputeProvider
from ec2dev.core.models import Instance, StateChange
from ec2dev.providers.exceptions import (
    ProviderAPIError,
    ProviderError,
    TransitionFailedError,
)

logger = logging.getLogger(__name__)

_TRANSITIONS = {
    InstanceStatus.RUNNING: InstanceStatus.STOPPED,
    InstanceStatus.STOPPED: InstanceStatus.RUNNING,
}


class InstanceInspector:
    """Read-only view of the managed instance.

    Parameters
    ----------
    compute_provider : ComputeProvider
        Provider used to describe the instance
    """

    def __init__(self, compute_provider: ComputeProvider) -> None:
        self.compute_provider = compute_provider

    def inspect(self, instance_id: str) -> Instance:
        """Return a fresh snapshot of the instance.

        Provider errors (including ``InstanceNotFoundError``) propagate to the
        caller unchanged.
        """
        instance = self.compute_provider.describe_instance(instance_id)

        if instance.instance_id != instance_id:
            raise ProviderAPIError(
                f"Provider returned instance {instance.instance_id} "
                f"when asked for {instance_id}",
                error_code="UnexpectedResponse",
            )

        return instance


@dataclass(frozen=True)
class TransitionPlan:
    """Outcome of planning a toggle for an observed status."""

    current: InstanceStatus
    target: InstanceStatus | None
    should_act: bool


def plan_transition(status: InstanceStatus) -> TransitionPlan:
    """Derive the toggle target for the observed status.

    Running becomes Stopped and Stopped becomes Running. Any other status is a
    no-op: the plan has no target and ``should_act`` is False.
    """
    target = _TRANSITIONS.get(InstanceStatus(status))

    return TransitionPlan(
        current=InstanceStatus(status),
        target=target,
        should_act=target is not None,
    )


class StateTransitioner:
    """Issue the start or stop request matching a plan.

    Parameters
    ----------
    compute_provider : ComputeProvider
        Provider used to submit the request
    """

    def __init__(self, compute_provider: ComputeProvider) -> None:
        self.compute_provider = compute_provider

    def apply(self, instance_id: str, plan: TransitionPlan) -> StateChange:
        """Submit the transition for exactly one instance.

        Parameters
        ----------
        instance_id : str
            Instance to transition
        plan : TransitionPlan
            Actionable plan from ``plan_transition``

        Returns
        -------
        StateChange
            Accepted transitional state reported by the provider

        Raises
        ------
        ValueError
            If the plan is not actionable
        TransitionFailedError
            If the provider rejects the request
        """
        if not plan.should_act:
            raise ValueError(f"Nothing to do for instance in state {plan.current.value}")

        if plan.target is InstanceStatus.STOPPED:
            action, request = "stop", self.compute_provider.stop_instance
        else:
            action, request = "start", self.compute_provider.start_instance

        try:
            change = request(instance_id)
        except ProviderError as e:
            raise TransitionFailedError(action, instance_id, e) from e

        logger.info("The instance state has been successfully changed!")
        logger.info("Instance ID: %s", change.instance_id)
        logger.info("State: %s", change.current_state)
        return change

"""Capability interfaces implemented by cloud providers."""

from __future__ import annotations

from typing import Protocol

from ec2dev.core.models import Instance, StateChange


class ComputeProvider(Protocol):
    """Narrow compute capability the toggle depends on.

    Implementations raise ``ProviderError`` subclasses from
    ``ec2dev.providers.exceptions`` and never return placeholder values.
    """

    def describe_instance(self, instance_id: str) -> Instance:
        """Return the current snapshot of an instance.

        Raises
        ------
        InstanceNotFoundError
            If the provider reports no matching instance
        """
        ...

    def start_instance(self, instance_id: str) -> StateChange:
        """Request the instance to start and return the accepted state."""
        ...

    def stop_instance(self, instance_id: str) -> StateChange:
        """Request the instance to stop and return the accepted state."""
        ...

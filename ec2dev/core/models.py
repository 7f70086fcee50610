"""Value objects shared by the toggle components."""

from __future__ import annotations

from dataclasses import dataclass

from ec2dev.constants import InstanceStatus


@dataclass(frozen=True)
class Instance:
    """Snapshot of the managed instance as returned by a describe call.

    Attributes
    ----------
    instance_id : str
        Provider instance identifier
    state : str
        Raw provider state name (e.g. ``running``, ``stopping``)
    public_ip : str | None
        Public address, only present while the instance is running
    """

    instance_id: str
    state: str
    public_ip: str | None = None

    @property
    def status(self) -> InstanceStatus:
        return InstanceStatus.from_state_name(self.state)


@dataclass(frozen=True)
class StateChange:
    """State change accepted by the provider for a start or stop request."""

    instance_id: str
    previous_state: str
    current_state: str

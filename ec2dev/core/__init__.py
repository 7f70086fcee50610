"""Core ec2dev functionality."""

from __future__ import annotations

from ec2dev.core.interfaces import ComputeProvider
from ec2dev.core.models import Instance, StateChange

__all__ = [
    "ComputeProvider",
    "Instance",
    "StateChange",
]

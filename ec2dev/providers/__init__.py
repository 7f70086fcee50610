"""Provider registry and management.

Compute providers are registered by name so the CLI can build the configured
one without importing a specific cloud SDK directly.
"""

from __future__ import annotations

from collections.abc import Callable

from ec2dev.core.interfaces import ComputeProvider
from ec2dev.providers.aws import EC2Manager
from ec2dev.providers.exceptions import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
    TransitionFailedError,
)

_PROVIDERS: dict[str, Callable[..., ComputeProvider]] = {}


def register_provider(name: str, compute_class: Callable[..., ComputeProvider]) -> None:
    """Register a compute provider implementation.

    Parameters
    ----------
    name : str
        Provider name (e.g., 'aws')
    compute_class : Callable[..., ComputeProvider]
        Class or factory accepting a ``region`` keyword argument
    """
    _PROVIDERS[name] = compute_class


def get_provider(name: str) -> Callable[..., ComputeProvider]:
    """Get a registered provider by name.

    Raises
    ------
    ValueError
        If provider is not registered
    """
    if name not in _PROVIDERS:
        raise ValueError(f"Unknown provider: {name}")
    return _PROVIDERS[name]


def list_providers() -> list[str]:
    """List all registered provider names."""
    return list(_PROVIDERS.keys())


__all__ = [
    "register_provider",
    "get_provider",
    "list_providers",
    "ProviderError",
    "ProviderCredentialsError",
    "ProviderAPIError",
    "ProviderConnectionError",
    "InstanceNotFoundError",
    "TransitionFailedError",
]

register_provider("aws", EC2Manager)

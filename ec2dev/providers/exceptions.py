"""Provider-agnostic exception hierarchy.

Provider implementations translate their SDK errors into these types so the
core and the CLI never depend on a specific cloud SDK.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all cloud provider errors."""


class ProviderCredentialsError(ProviderError):
    """Raised when cloud credentials are missing or incomplete."""


class ProviderConnectionError(ProviderError):
    """Raised when the provider endpoint cannot be reached."""


class ProviderAPIError(ProviderError):
    """Raised when a provider API call is rejected.

    Parameters
    ----------
    message : str
        Human readable error description
    error_code : str | None
        Provider specific error code (e.g. ``UnauthorizedOperation``)
    operation : str | None
        Name of the API operation that failed
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.operation = operation


class InstanceNotFoundError(ProviderAPIError):
    """Raised when a describe call matches no instance."""

    def __init__(self, instance_id: str, error_code: str | None = None) -> None:
        super().__init__(
            f"No instances found for ID '{instance_id}'",
            error_code=error_code,
            operation="DescribeInstances",
        )
        self.instance_id = instance_id


class TransitionFailedError(ProviderError):
    """Raised when the provider rejects a start or stop request.

    Parameters
    ----------
    action : str
        ``"start"`` or ``"stop"``
    instance_id : str
        Instance the request was issued for
    cause : ProviderError
        Underlying provider error
    """

    def __init__(self, action: str, instance_id: str, cause: ProviderError) -> None:
        super().__init__(
            f"Got an error trying to {action} instance {instance_id}: {cause}"
        )
        self.action = action
        self.instance_id = instance_id
        self.error_code = getattr(cause, "error_code", None)

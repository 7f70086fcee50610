"""Translation of botocore errors into provider exceptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
)

from ec2dev.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)

logger = logging.getLogger(__name__)

INSTANCE_NOT_FOUND_CODES = frozenset(
    (
        "InvalidInstanceID.NotFound",
        "InvalidInstanceID.Malformed",
    )
)


def get_error_code(error: ClientError) -> str:
    """Return the AWS error code carried by a ClientError."""
    return error.response.get("Error", {}).get("Code", "Unknown")


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Translate botocore exceptions raised in the block.

    Raises
    ------
    ProviderCredentialsError
        If credentials are missing or incomplete
    ProviderConnectionError
        If the EC2 endpoint cannot be reached
    ProviderAPIError
        If the API call is rejected, with ``error_code`` set
    """
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError) as e:
        raise ProviderCredentialsError(str(e)) from e
    except NoRegionError as e:
        raise ProviderAPIError(
            "No AWS region configured. Set 'region' in the settings file "
            "or configure a default region.",
            error_code="NoRegion",
        ) from e
    except EndpointConnectionError as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error_code = get_error_code(e)
        operation = e.operation_name
        logger.debug("AWS %s failed with %s", operation, error_code)
        raise ProviderAPIError(
            e.response.get("Error", {}).get("Message", str(e)),
            error_code=error_code,
            operation=operation,
        ) from e

"""AWS-specific utility functions for ec2dev."""

from __future__ import annotations

from typing import Any

from ec2dev.core.models import Instance, StateChange
from ec2dev.providers.exceptions import ProviderAPIError


def extract_instance_from_response(response: dict[str, Any]) -> dict[str, Any]:
    """Extract first instance from AWS describe_instances response.

    Parameters
    ----------
    response : dict[str, Any]
        Response from boto3 describe_instances call

    Returns
    -------
    dict[str, Any]
        The first instance dictionary

    Raises
    ------
    ValueError
        If response has no reservations or instances
    """
    if not response.get("Reservations"):
        raise ValueError("No reservations in response")
    if not response["Reservations"][0].get("Instances"):
        raise ValueError("No instances in reservation")
    return response["Reservations"][0]["Instances"][0]


def instance_from_description(description: dict[str, Any]) -> Instance:
    """Build an Instance from one entry of a describe_instances response."""
    return Instance(
        instance_id=description["InstanceId"],
        state=description["State"]["Name"],
        public_ip=description.get("PublicIpAddress"),
    )


def state_change_from_response(
    response: dict[str, Any], key: str, instance_id: str
) -> StateChange:
    """Extract the state change for one instance from a start/stop response.

    Parameters
    ----------
    response : dict[str, Any]
        Response from start_instances or stop_instances
    key : str
        ``StartingInstances`` or ``StoppingInstances``
    instance_id : str
        Instance the request was issued for

    Raises
    ------
    ProviderAPIError
        If the accepted request's response does not mention the instance
    """
    for change in response.get(key, []):
        if change["InstanceId"] == instance_id:
            return StateChange(
                instance_id=instance_id,
                previous_state=change["PreviousState"]["Name"],
                current_state=change["CurrentState"]["Name"],
            )
    raise ProviderAPIError(
        f"No state change for {instance_id} in {key}",
        error_code="UnexpectedResponse",
    )


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "Cloud credentials not found\n\n"
        "Configure your credentials:\n"
        "  aws configure\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=..."
    )

"""EC2 instance management for ec2dev."""

from __future__ import annotations

import logging
from typing import Any

import boto3

from ec2dev.core.models import Instance, StateChange
from ec2dev.providers.aws.errors import INSTANCE_NOT_FOUND_CODES, handle_aws_errors
from ec2dev.providers.aws.utils import (
    extract_instance_from_response,
    instance_from_description,
    state_change_from_response,
)
from ec2dev.providers.exceptions import InstanceNotFoundError, ProviderAPIError

logger = logging.getLogger(__name__)


class EC2Manager:
    """Describe, start and stop a single EC2 instance.

    Implements the ``ComputeProvider`` protocol. Unlike a waiter based
    implementation, start and stop return as soon as AWS accepts the request;
    convergence is left to the caller.

    Parameters
    ----------
    region : str | None
        AWS region override. If None, boto3 resolves the region from the
        environment and the shared AWS config
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients. If None, uses boto3.client
    """

    def __init__(
        self,
        region: str | None = None,
        boto3_client_factory: Any | None = None,
    ) -> None:
        self.boto3_client_factory = boto3_client_factory or boto3.client

        with handle_aws_errors():
            self.ec2_client = self.boto3_client_factory("ec2", region_name=region)

        self.region = region or self.ec2_client.meta.region_name

    def describe_instance(self, instance_id: str) -> Instance:
        """Describe an instance by ID.

        Parameters
        ----------
        instance_id : str
            EC2 instance ID

        Returns
        -------
        Instance
            Current instance snapshot

        Raises
        ------
        InstanceNotFoundError
            If AWS reports the ID as unknown or returns no reservations
        ProviderAPIError
            If the describe call fails for another reason
        """
        try:
            with handle_aws_errors():
                response = self.ec2_client.describe_instances(
                    InstanceIds=[instance_id]
                )
        except ProviderAPIError as e:
            if e.error_code in INSTANCE_NOT_FOUND_CODES:
                raise InstanceNotFoundError(instance_id, e.error_code) from e
            raise

        try:
            description = extract_instance_from_response(response)
        except ValueError as e:
            raise InstanceNotFoundError(instance_id) from e

        instance = instance_from_description(description)
        logger.debug(
            "Described %s: state=%s public_ip=%s",
            instance.instance_id,
            instance.state,
            instance.public_ip,
        )
        return instance

    def start_instance(self, instance_id: str) -> StateChange:
        """Request an instance start.

        Parameters
        ----------
        instance_id : str
            Instance ID to start

        Returns
        -------
        StateChange
            Previous and accepted state reported by AWS
        """
        logger.debug("Starting instance %s", instance_id)

        with handle_aws_errors():
            response = self.ec2_client.start_instances(InstanceIds=[instance_id])

        return state_change_from_response(response, "StartingInstances", instance_id)

    def stop_instance(self, instance_id: str) -> StateChange:
        """Request an instance stop.

        Parameters
        ----------
        instance_id : str
            Instance ID to stop

        Returns
        -------
        StateChange
            Previous and accepted state reported by AWS
        """
        logger.debug("Stopping instance %s", instance_id)

        with handle_aws_errors():
            response = self.ec2_client.stop_instances(InstanceIds=[instance_id])

        return state_change_from_response(response, "StoppingInstances", instance_id)

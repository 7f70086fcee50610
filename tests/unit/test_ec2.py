from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from moto import mock_aws

from ec2dev.constants import InstanceStatus
from ec2dev.providers.aws.compute import EC2Manager
from ec2dev.providers.aws.errors import handle_aws_errors
from ec2dev.providers.aws.utils import extract_instance_from_response
from ec2dev.providers.exceptions import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)


@pytest.fixture(scope="function")
def ec2_client(aws_credentials):
    """Mock all AWS interactions and return a raw EC2 client."""
    with mock_aws():
        yield boto3.client("ec2", region_name="us-east-1")


@pytest.fixture
def instance_id(ec2_client) -> str:
    """Launch one instance in the mocked account."""
    image = ec2_client.register_image(
        Name="test-ami-image",
        Description="Test AMI",
        Architecture="x86_64",
        RootDeviceName="/dev/sda1",
        VirtualizationType="hvm",
    )
    response = ec2_client.run_instances(
        ImageId=image["ImageId"], InstanceType="t3.micro", MinCount=1, MaxCount=1
    )
    return response["Instances"][0]["InstanceId"]


@pytest.fixture
def ec2_manager(ec2_client) -> EC2Manager:
    return EC2Manager(region="us-east-1")


def test_ec2_manager_initialization(ec2_manager) -> None:
    assert ec2_manager.region == "us-east-1"
    assert ec2_manager.ec2_client is not None


def test_region_falls_back_to_default(ec2_client) -> None:
    assert EC2Manager().region == "us-east-1"


def test_describe_running_instance(ec2_manager, instance_id) -> None:
    instance = ec2_manager.describe_instance(instance_id)

    assert instance.instance_id == instance_id
    assert instance.status is InstanceStatus.RUNNING


def test_describe_unknown_instance(ec2_manager, instance_id) -> None:
    with pytest.raises(InstanceNotFoundError) as exc_info:
        ec2_manager.describe_instance("i-1234567890abcdef0")

    assert exc_info.value.instance_id == "i-1234567890abcdef0"


def test_stop_then_start(ec2_manager, instance_id) -> None:
    stop = ec2_manager.stop_instance(instance_id)

    assert stop.instance_id == instance_id
    assert stop.previous_state == "running"
    assert stop.current_state in ("stopping", "stopped")
    assert ec2_manager.describe_instance(instance_id).status is InstanceStatus.STOPPED

    start = ec2_manager.start_instance(instance_id)

    assert start.previous_state in ("stopped", "stopping")
    assert start.current_state in ("pending", "running")
    assert ec2_manager.describe_instance(instance_id).status is InstanceStatus.RUNNING


def test_start_unknown_instance_raises_api_error(ec2_manager, instance_id) -> None:
    with pytest.raises(ProviderAPIError):
        ec2_manager.start_instance("i-1234567890abcdef0")


def test_empty_reservations_mean_not_found(ec2_manager, monkeypatch) -> None:
    monkeypatch.setattr(
        ec2_manager.ec2_client,
        "describe_instances",
        lambda **kwargs: {"Reservations": []},
    )

    with pytest.raises(InstanceNotFoundError):
        ec2_manager.describe_instance("i-0123456789abcdef0")


def test_extract_instance_from_response() -> None:
    response = {"Reservations": [{"Instances": [{"InstanceId": "i-1"}]}]}

    assert extract_instance_from_response(response) == {"InstanceId": "i-1"}

    with pytest.raises(ValueError):
        extract_instance_from_response({"Reservations": [{"Instances": []}]})


class TestHandleAwsErrors:
    def test_client_error(self) -> None:
        error = ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}},
            "StopInstances",
        )

        with pytest.raises(ProviderAPIError) as exc_info:
            with handle_aws_errors():
                raise error

        assert exc_info.value.error_code == "UnauthorizedOperation"
        assert exc_info.value.operation == "StopInstances"
        assert str(exc_info.value) == "denied"

    def test_no_credentials(self) -> None:
        with pytest.raises(ProviderCredentialsError):
            with handle_aws_errors():
                raise NoCredentialsError()

    def test_endpoint_connection(self) -> None:
        with pytest.raises(ProviderConnectionError):
            with handle_aws_errors():
                raise EndpointConnectionError(endpoint_url="https://ec2.example")


def test_unacknowledged_stop_is_an_api_error() -> None:
    client = MagicMock()
    client.stop_instances.return_value = {"StoppingInstances": []}
    ec2_manager = EC2Manager(
        region="us-east-1", boto3_client_factory=lambda *args, **kwargs: client
    )

    with pytest.raises(ProviderAPIError, match="No state change") as exc_info:
        ec2_manager.stop_instance("i-0123456789abcdef0")

    assert exc_info.value.error_code == "UnexpectedResponse"

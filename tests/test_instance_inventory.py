"""
Tests for the EC2 instance inventory.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from runcost.core.aws_client import AWSClient
from runcost.core.exceptions import ResourceFetchError
from runcost.inventory.instance_inventory import (
    InstanceInventory,
    InstanceResource,
    InstanceState,
)


class TestInstanceState:
    """Tests for InstanceState mapping."""

    def test_known_states(self):
        assert InstanceState.from_api("running") is InstanceState.RUNNING
        assert InstanceState.from_api("shutting-down") is InstanceState.SHUTTING_DOWN

    def test_unknown_state(self):
        assert InstanceState.from_api("hibernating") is InstanceState.UNKNOWN
        assert InstanceState.from_api(None) is InstanceState.UNKNOWN


class TestInstanceResource:
    """Tests for InstanceResource snapshots."""

    def test_from_api(self):
        payload = {
            "InstanceId": "i-0abc",
            "InstanceType": "m5.large",
            "State": {"Code": 16, "Name": "running"},
            "LaunchTime": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            "Tags": [{"Key": "env", "Value": "prod"}, {"Key": "Name", "Value": "api"}],
        }
        resource = InstanceResource.from_api(payload, "eu-west-1")

        assert resource.instance_id == "i-0abc"
        assert resource.instance_type == "m5.large"
        assert resource.state is InstanceState.RUNNING
        assert resource.region == "eu-west-1"
        assert resource.name == "api"
        assert resource.display_name == "api"

    def test_from_api_without_tags_and_naive_time(self):
        payload = {
            "InstanceId": "i-0def",
            "InstanceType": "t3.micro",
            "State": {"Name": "stopped"},
            "LaunchTime": datetime(2024, 5, 1, 12, 0),
        }
        resource = InstanceResource.from_api(payload, "us-east-1")

        assert resource.name is None
        assert resource.display_name == "N/A"
        assert resource.launch_time.tzinfo is timezone.utc

    def test_is_immutable(self, make_instance):
        resource = make_instance()
        with pytest.raises(AttributeError):
            resource.instance_type = "m5.large"


class TestInstanceInventory:
    """Tests for InstanceInventory class."""

    def test_empty_region(self, aws_client):
        """Test listing a region with no instances."""
        inventory = InstanceInventory(aws_client)
        assert inventory.list_instances() == []
        assert inventory.get_resource_type() == "ec2_instance"

    def test_lists_instances(self, aws_client, ec2_client, running_instance):
        """Test listing a launched instance."""
        instances = InstanceInventory(aws_client).list_instances()

        assert len(instances) == 1
        instance = instances[0]
        assert instance.instance_id == running_instance
        assert instance.instance_type == "t3.micro"
        assert instance.state is InstanceState.RUNNING
        assert instance.name == "web-1"
        assert instance.region == "us-east-1"
        assert instance.launch_time.tzinfo is not None

    def test_flattens_reservations(self, aws_client, ec2_client):
        """Test that instances from several reservations are all returned."""
        for _ in range(3):
            ec2_client.run_instances(
                ImageId="ami-12345678", MinCount=2, MaxCount=2, InstanceType="t3.small"
            )

        instances = InstanceInventory(aws_client).list_instances()
        assert len(instances) == 6
        assert len({i.instance_id for i in instances}) == 6

    def test_stopped_instance_state(self, aws_client, ec2_client, running_instance):
        """Test that stopped instances are reported as stopped."""
        ec2_client.stop_instances(InstanceIds=[running_instance])

        instances = InstanceInventory(aws_client).list_instances()
        assert instances[0].state is InstanceState.STOPPED

    def test_only_lists_own_region(self, mock_aws_environment, ec2_client, running_instance):
        """Test that instances of other regions are not listed."""
        inventory = InstanceInventory(AWSClient(region="eu-west-1"))
        assert inventory.list_instances() == []

    def test_request_failure_raises_fetch_error(self):
        """Test that API failures surface as ResourceFetchError with the region."""
        ec2 = MagicMock()
        ec2.get_paginator.return_value.paginate.side_effect = ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}},
            "DescribeInstances",
        )
        client = MagicMock(region="ap-south-1")
        client.get_ec2_client.return_value = ec2

        with pytest.raises(ResourceFetchError) as exc_info:
            InstanceInventory(client).list_instances()

        assert exc_info.value.region == "ap-south-1"
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_malformed_payload_raises_fetch_error(self):
        """Test that an instance missing LaunchTime surfaces as ResourceFetchError."""
        ec2 = MagicMock()
        ec2.get_paginator.return_value.paginate.return_value = [
            {
                "Reservations": [
                    {
                        "Instances": [
                            {
                                "InstanceId": "i-0abc",
                                "InstanceType": "t3.micro",
                                "State": {"Name": "running"},
                            }
                        ]
                    }
                ]
            }
        ]
        client = MagicMock(region="eu-west-1")
        client.get_ec2_client.return_value = ec2

        with pytest.raises(ResourceFetchError) as exc_info:
            InstanceInventory(client).list_instances()

        assert exc_info.value.region == "eu-west-1"
        assert "LaunchTime" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, KeyError)

"""
Pytest configuration and shared fixtures for testing.
"""

import json
from datetime import datetime, timezone

import boto3
import pytest
from moto import mock_aws

from runcost.core.aws_client import AWSClient
from runcost.inventory.instance_inventory import InstanceResource, InstanceState

AMI_ID = "ami-12345678"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def aws_config_files(tmp_path, monkeypatch):
    """Point botocore at a throwaway config with two named profiles."""
    config = tmp_path / "config"
    config.write_text(
        "[default]\nregion = us-east-1\n\n"
        "[profile production]\nregion = eu-west-1\n"
    )
    credentials = tmp_path / "credentials"
    credentials.write_text(
        "[default]\naws_access_key_id = testing\naws_secret_access_key = testing\n\n"
        "[production]\naws_access_key_id = testing\naws_secret_access_key = testing\n"
    )
    monkeypatch.setenv("AWS_CONFIG_FILE", str(config))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(credentials))
    return tmp_path


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region="us-east-1")


@pytest.fixture
def ec2_client(mock_aws_environment):
    """Create a boto3 EC2 client for setting up test resources."""
    return boto3.client("ec2", region_name="us-east-1")


@pytest.fixture
def running_instance(ec2_client):
    """Launch one tagged t3.micro instance."""
    response = ec2_client.run_instances(
        ImageId=AMI_ID,
        MinCount=1,
        MaxCount=1,
        InstanceType="t3.micro",
        TagSpecifications=[
            {
                "ResourceType": "instance",
                "Tags": [{"Key": "Name", "Value": "web-1"}],
            }
        ],
    )
    return response["Instances"][0]["InstanceId"]


@pytest.fixture
def make_instance():
    """Factory for InstanceResource snapshots."""

    def _make(
        instance_id="i-0000000000000001",
        instance_type="t3.micro",
        state=InstanceState.RUNNING,
        launch_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        region="us-east-1",
        name=None,
    ):
        return InstanceResource(
            instance_id=instance_id,
            instance_type=instance_type,
            state=state,
            launch_time=launch_time,
            region=region,
            name=name,
        )

    return _make


def price_document(usd="0.0104", sku="ABC123"):
    """Minimal Price List product document as the API returns it."""
    return json.dumps(
        {
            "product": {"sku": sku, "attributes": {"instanceType": "t3.micro"}},
            "terms": {
                "OnDemand": {
                    f"{sku}.JRTCKXETXF": {
                        "offerTermCode": "JRTCKXETXF",
                        "priceDimensions": {
                            f"{sku}.JRTCKXETXF.6YS6EN2CT7": {
                                "unit": "Hrs",
                                "pricePerUnit": {"USD": usd},
                            }
                        },
                    }
                }
            },
        }
    )


@pytest.fixture
def price_document_factory():
    return price_document

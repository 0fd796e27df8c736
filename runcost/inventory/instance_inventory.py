"""
EC2 Instance Inventory
======================

Lists every EC2 instance of one region as immutable snapshots.

Classes
-------
InstanceState
    Lifecycle states reported by EC2.
InstanceResource
    Immutable snapshot of one instance.
InstanceInventory
    Region-scoped lister built on the ``describe_instances`` paginator.

Example
-------
>>> from runcost.core import AWSClient
>>> from runcost.inventory import InstanceInventory
>>>
>>> inventory = InstanceInventory(AWSClient(region="eu-west-1"))
>>> for instance in inventory.list_instances():
...     print(instance.instance_id, instance.state.value)

Notes
-----
Results are never cached: every call issues a fresh request and builds new
InstanceResource objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from runcost.core.exceptions import AWSClientError, ResourceFetchError

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "ec2_instance"


class InstanceState(Enum):
    """EC2 instance lifecycle states."""

    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    STOPPING = "stopping"
    STOPPED = "stopped"
    UNKNOWN = "unknown"

    @classmethod
    def from_api(cls, value: Optional[str]) -> InstanceState:
        """Map an API state name to a member, UNKNOWN if unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class InstanceResource:
    """
    Immutable snapshot of one EC2 instance.

    Parameters
    ----------
    instance_id : str
        Instance identifier (e.g. 'i-0abc123').
    instance_type : str
        Instance type (e.g. 't3.micro').
    state : InstanceState
        Lifecycle state at listing time.
    launch_time : datetime
        Timezone-aware launch timestamp.
    region : str
        Region the instance lives in.
    name : str, optional
        Value of the ``Name`` tag, if any.
    """

    instance_id: str
    instance_type: str
    state: InstanceState
    launch_time: datetime
    region: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name tag, or 'N/A' for unnamed instances."""
        return self.name or "N/A"

    @classmethod
    def from_api(cls, instance: Dict[str, Any], region: str) -> InstanceResource:
        """
        Build a snapshot from one ``Instances`` entry of describe_instances.

        Parameters
        ----------
        instance : dict
            Raw instance payload.
        region : str
            Region the payload was listed in.

        Returns
        -------
        InstanceResource
        """
        name = None
        for tag in instance.get("Tags", []):
            if tag.get("Key") == "Name":
                name = tag.get("Value")
                break

        launch_time = instance["LaunchTime"]
        if launch_time.tzinfo is None:
            launch_time = launch_time.replace(tzinfo=timezone.utc)

        return cls(
            instance_id=instance["InstanceId"],
            instance_type=instance["InstanceType"],
            state=InstanceState.from_api(instance.get("State", {}).get("Name")),
            launch_time=launch_time,
            region=region,
            name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "instance_id": self.instance_id,
            "instance_type": self.instance_type,
            "state": self.state.value,
            "launch_time": self.launch_time.isoformat(),
            "region": self.region,
            "name": self.name,
        }


class InstanceInventory:
    """
    Lists all EC2 instances of the client's region.

    Parameters
    ----------
    aws_client : AWSClient
        Client scoped to the region to list.

    Examples
    --------
    >>> inventory = InstanceInventory(AWSClient(region="us-east-1"))
    >>> instances = inventory.list_instances()
    >>> print(f"{len(instances)} instances in {inventory.region}")
    """

    def __init__(self, aws_client) -> None:
        self.aws_client = aws_client
        self.region = aws_client.region

    def get_resource_type(self) -> str:
        return RESOURCE_TYPE

    def list_instances(self) -> List[InstanceResource]:
        """
        Fetch every instance in the region, across all result pages.

        Returns
        -------
        list of InstanceResource
            Instances in listing order; empty if the region has none.

        Raises
        ------
        ResourceFetchError
            If any request fails (auth, network, throttling, bad region)
            or an instance payload is malformed.
        """
        instances: List[InstanceResource] = []

        logger.debug(f"Listing EC2 instances in {self.region}")

        try:
            ec2 = self.aws_client.get_ec2_client()
            paginator = ec2.get_paginator("describe_instances")

            for page in paginator.paginate():
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        instances.append(self._to_resource(instance))

        except (ClientError, BotoCoreError, AWSClientError) as e:
            raise ResourceFetchError(
                f"Failed to describe instances: {e}",
                resource_type=RESOURCE_TYPE,
                region=self.region,
            ) from e

        logger.debug(f"Found {len(instances)} EC2 instances in {self.region}")
        return instances

    def _to_resource(self, instance: Dict[str, Any]) -> InstanceResource:
        try:
            return InstanceResource.from_api(instance, self.region)
        except (KeyError, TypeError, AttributeError) as e:
            raise ResourceFetchError(
                f"Malformed instance payload: missing or invalid {e}",
                resource_type=RESOURCE_TYPE,
                region=self.region,
            ) from e

    def __repr__(self) -> str:
        return f"InstanceInventory(region='{self.region}')"

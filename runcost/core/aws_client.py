"""
AWS Client Module
=================

Wrapper around boto3 that owns one session per (profile, region) and the
botocore configuration every request is sent with.

Classes
-------
AWSClient
    Region-scoped client factory with retry and timeout settings.

Example
-------
>>> from runcost.core.aws_client import AWSClient
>>>
>>> client = AWSClient(region="us-east-1", profile="production")
>>> ec2 = client.get_ec2_client()
>>> pricing = client.with_region("us-east-1").get_pricing_client()

Notes
-----
Sessions and service clients are created on first access and cached. A
boto3 session is not thread-safe, so each scan worker builds its own
AWSClient rather than sharing one.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)

from runcost.core.config import DEFAULT_MAX_RETRIES, DEFAULT_REQUEST_TIMEOUT
from runcost.core.exceptions import (
    AWSClientError,
    CredentialsError,
    RegionError,
    ServiceError,
)

logger = logging.getLogger(__name__)


class AWSClient:
    """
    Region-scoped AWS client wrapper.

    Parameters
    ----------
    region : str, default="us-east-1"
        AWS region to connect to.
    profile : str, optional
        Named profile from the shared AWS config/credentials files.
    max_retries : int, default=3
        botocore retry attempts for failed API calls.
    timeout : int, default=25
        Connect and read timeout in seconds for each request.

    Examples
    --------
    >>> client = AWSClient(region="eu-west-1", profile="production")
    >>> client.get_ec2_client().describe_instances()

    Raises
    ------
    CredentialsError
        If the profile or credentials cannot be found.
    RegionError
        If the region is missing or invalid.
    ServiceError
        If a service client cannot be created.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        profile: Optional[str] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.region = region
        self.profile = profile
        self.max_retries = max_retries
        self.timeout = timeout

        self._session: Optional[boto3.Session] = None
        self._clients: dict[str, Any] = {}
        self._config = self._create_config()

        logger.debug(f"Initialized AWSClient for {region} (profile={profile})")

    def _create_config(self) -> Config:
        """Build the botocore config shared by every client of this instance."""
        return Config(
            retries={
                "max_attempts": self.max_retries,
                "mode": "standard",
            },
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
        )

    @property
    def session(self) -> boto3.Session:
        """
        Get or create the boto3 session (lazy initialization).

        Returns
        -------
        boto3.Session
            The configured AWS session.
        """
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        try:
            session_kwargs = {"region_name": self.region}
            if self.profile:
                session_kwargs["profile_name"] = self.profile

            session = boto3.Session(**session_kwargs)
            logger.debug(f"Created boto3 session for region {self.region}")
            return session

        except ProfileNotFound:
            raise CredentialsError(
                f"AWS profile '{self.profile}' not found",
                details={
                    "profile": self.profile,
                    "hint": "Check ~/.aws/credentials for available profiles",
                },
            )
        except NoRegionError:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                region=self.region,
            )
        except Exception as e:
            logger.debug("Failed to create AWS session", exc_info=True)
            raise AWSClientError(
                f"Failed to create AWS session: {e}",
                region=self.region,
            )

    def _get_client(self, service_name: str) -> Any:
        """
        Get or create a boto3 client for the specified service.

        Parameters
        ----------
        service_name : str
            Name of the AWS service (e.g., 'ec2', 'pricing').

        Returns
        -------
        botocore.client.BaseClient
            Cached client for this region.
        """
        if service_name in self._clients:
            return self._clients[service_name]

        try:
            client = self.session.client(service_name, config=self._config)
        except NoCredentialsError:
            raise CredentialsError(
                "AWS credentials not found",
                details={
                    "hint": (
                        "Configure credentials using 'aws configure' or set "
                        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY environment variables"
                    ),
                },
            )
        except AWSClientError:
            raise
        except Exception as e:
            raise ServiceError(
                f"Failed to create {service_name} client: {e}",
                service=service_name,
                region=self.region,
            )

        self._clients[service_name] = client
        logger.debug(f"Created {service_name} client for {self.region}")
        return client

    def get_ec2_client(self) -> Any:
        """
        Get the EC2 client.

        Example
        -------
        >>> ec2 = client.get_ec2_client()
        >>> paginator = ec2.get_paginator("describe_instances")
        """
        return self._get_client("ec2")

    def get_pricing_client(self) -> Any:
        """
        Get the Price List API client.

        The Price List API is only served from a few regions; callers should
        use a client created for the pricing region.
        """
        return self._get_client("pricing")

    def with_region(self, region: str) -> AWSClient:
        """
        Create a new AWSClient for a different region.

        The new client inherits profile, retries and timeout and shares no
        session or cached clients with this one.

        Example
        -------
        >>> eu_client = AWSClient(region="us-east-1").with_region("eu-west-1")
        >>> eu_client.region
        'eu-west-1'
        """
        return AWSClient(
            region=region,
            profile=self.profile,
            max_retries=self.max_retries,
            timeout=self.timeout,
        )

    def __enter__(self) -> AWSClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._clients.clear()
        self._session = None

    def __repr__(self) -> str:
        return (
            f"AWSClient(region='{self.region}', "
            f"profile={self.profile!r}, "
            f"max_retries={self.max_retries})"
        )

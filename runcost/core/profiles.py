"""
Credential Profiles
===================

Discovers the named AWS profiles available on this machine and turns a
profile name into a ready :class:`AWSClient`.

Profiles come from botocore's view of the shared config and credentials
files (``~/.aws/config``, ``~/.aws/credentials`` or the files pointed to by
``AWS_CONFIG_FILE`` / ``AWS_SHARED_CREDENTIALS_FILE``).
"""

from __future__ import annotations

import logging
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError

from runcost.core.aws_client import AWSClient
from runcost.core.config import DEFAULT_REGION, Settings
from runcost.core.exceptions import AWSClientError, ConfigError, CredentialsError

logger = logging.getLogger(__name__)


class CredentialResolver:
    """
    Lists profiles and resolves one into an AWSClient.

    Parameters
    ----------
    settings : Settings, optional
        Retry and timeout settings applied to resolved clients.

    Example
    -------
    >>> resolver = CredentialResolver()
    >>> resolver.list_profiles()
    ['default', 'production']
    >>> client = resolver.resolve("production")
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    def list_profiles(self) -> List[str]:
        """
        Return the configured profile names, sorted.

        Raises
        ------
        ConfigError
            If the shared config files cannot be parsed.
        """
        try:
            profiles = boto3.Session().available_profiles
        except BotoCoreError as e:
            raise ConfigError(f"Failed to read AWS configuration: {e}")

        profiles = sorted(set(profiles))
        logger.debug(f"Found {len(profiles)} AWS profile(s)")
        return profiles

    def resolve(
        self,
        profile: Optional[str],
        region: str = DEFAULT_REGION,
    ) -> AWSClient:
        """
        Build an AWSClient for ``profile`` after checking the profile exists.

        Parameters
        ----------
        profile : str or None
            Profile name; None uses the default credential chain.
        region : str
            Region for the returned client.

        Returns
        -------
        AWSClient
            Client whose session has already been created.

        Raises
        ------
        ConfigError
            If the profile does not exist or its configuration is broken.
        """
        client = AWSClient(
            region=region,
            profile=profile,
            max_retries=self.settings.max_retries,
            timeout=self.settings.request_timeout,
        )
        try:
            # Create the session now so a bad profile fails here, not mid-scan
            client.session
        except CredentialsError as e:
            raise ConfigError(e.message, details=e.details)
        except AWSClientError as e:
            raise ConfigError(f"Unable to load AWS configuration: {e.message}")

        logger.info(f"Using AWS profile {profile or '(default chain)'}")
        return client

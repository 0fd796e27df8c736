"""
Runtime Settings
================

Default tunables for runcost and their ``RUNCOST_*`` environment overrides.

Precedence is: CLI option > environment variable > default below.

Environment Variables
---------------------
RUNCOST_DEFAULT_REGION
    Region used for the bootstrap client (region discovery).
RUNCOST_PRICING_REGION
    Region hosting the AWS Price List API endpoint.
RUNCOST_MAX_WORKERS
    Maximum concurrent region listings during a scan.
RUNCOST_DISCOVERY_TIMEOUT
    Deadline in seconds for listing all regions.
RUNCOST_SCAN_TIMEOUT
    Deadline in seconds for the parallel region scan.
RUNCOST_REQUEST_TIMEOUT
    Per-request connect/read timeout in seconds.
RUNCOST_MAX_RETRIES
    botocore retry attempts per request.
RUNCOST_LOG_LEVEL
    Default log level.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from runcost.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RUNCOST_"

DEFAULT_REGION = "us-east-1"
PRICING_REGION = "us-east-1"
DEFAULT_MAX_WORKERS = 10
DEFAULT_DISCOVERY_TIMEOUT = 30
DEFAULT_SCAN_TIMEOUT = 300
DEFAULT_REQUEST_TIMEOUT = 25
DEFAULT_MAX_RETRIES = 3

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """
    Tunables for a runcost run.

    Parameters
    ----------
    default_region : str
        Region for the bootstrap client.
    pricing_region : str
        Region of the Price List API endpoint.
    max_workers : int
        Concurrency cap for the region scan (>= 1).
    discovery_timeout : int
        Seconds allowed for region discovery (>= 1).
    scan_timeout : int
        Seconds allowed for the whole region scan (>= 1).
    request_timeout : int
        botocore connect/read timeout per request (>= 1).
    max_retries : int
        botocore retry attempts (>= 0).
    log_level : str
        Default log level name.
    """

    default_region: str = DEFAULT_REGION
    pricing_region: str = PRICING_REGION
    max_workers: int = DEFAULT_MAX_WORKERS
    discovery_timeout: int = DEFAULT_DISCOVERY_TIMEOUT
    scan_timeout: int = DEFAULT_SCAN_TIMEOUT
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range."""
        if self.max_workers < 1:
            raise ConfigError(
                f"max_workers must be >= 1, got {self.max_workers}"
            )
        if self.discovery_timeout < 1:
            raise ConfigError(
                f"discovery_timeout must be >= 1, got {self.discovery_timeout}"
            )
        if self.scan_timeout < 1:
            raise ConfigError(
                f"scan_timeout must be >= 1, got {self.scan_timeout}"
            )
        if self.request_timeout < 1:
            raise ConfigError(
                f"request_timeout must be >= 1, got {self.request_timeout}"
            )
        if self.max_retries < 0:
            raise ConfigError(
                f"max_retries must be >= 0, got {self.max_retries}"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(
                f"Unknown log level: {self.log_level}",
                details={"allowed": list(_LOG_LEVELS)},
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Build settings from defaults overlaid with ``RUNCOST_*`` variables.

        Parameters
        ----------
        environ : mapping, optional
            Environment to read. Defaults to ``os.environ``.

        Returns
        -------
        Settings
            Validated settings.

        Raises
        ------
        ConfigError
            If a variable cannot be parsed or is out of range.

        Example
        -------
        >>> Settings.from_env({"RUNCOST_MAX_WORKERS": "4"}).max_workers
        4
        """
        env = os.environ if environ is None else environ
        values = {}

        for f in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            if f.type in (int, "int"):
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    raise ConfigError(
                        f"{ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}"
                    )
            else:
                values[f.name] = raw

        if values:
            logger.debug(f"Settings overridden from environment: {sorted(values)}")

        return cls(**values)

    def with_overrides(self, **overrides) -> Settings:
        """
        Return a copy with the given fields replaced, ignoring None values.

        Used to apply CLI options, which default to None when not given.

        Example
        -------
        >>> Settings().with_overrides(max_workers=4, log_level=None).max_workers
        4
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

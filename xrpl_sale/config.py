"""Client configuration module."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from xrpl_sale.errors import ConfigurationError

PRODUCTION_URL = "https://api.xrpl.sale/v1"
TESTNET_URL = "https://api-testnet.xrpl.sale/v1"

ENV_PREFIX = "XRPLSALE_"


class Environment(str, Enum):
    """XRPL.Sale deployment to talk to."""

    PRODUCTION = "production"
    TESTNET = "testnet"

    @property
    def base_url(self) -> str:
        return TESTNET_URL if self is Environment.TESTNET else PRODUCTION_URL

    @classmethod
    def parse(cls, value: Union[str, "Environment"]) -> "Environment":
        """Parse an environment name, case-insensitively.

        ``test`` is accepted as an alias for ``testnet``.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "test":
            name = "testnet"
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"Unknown environment: {value!r}") from None


FLOAT_FIELDS = ("connect_timeout", "read_timeout", "write_timeout", "retry_delay")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw value (often a string from env or a config file) to the field's type.

    Raises:
        TypeError, ValueError: If the value cannot be converted
    """
    if name in FLOAT_FIELDS:
        return float(value)
    if name == "max_retries":
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"max_retries must be a whole number, got {value!r}")
        return int(value)
    if name == "debug":
        return _parse_bool(value) if isinstance(value, str) else bool(value)
    return value


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the XRPL.Sale client.

    Attributes:
        api_key: API key sent as ``X-API-Key`` while no bearer token is set
        environment: Production or testnet deployment
        base_url: Explicit API base URL, overrides ``environment``
        connect_timeout: Connection timeout in seconds
        read_timeout: Socket read timeout in seconds
        write_timeout: Socket timeout while sending a request body, in seconds
        max_retries: Maximum retry attempts for transient failures
        retry_delay: Base delay between retries (exponential backoff)
        webhook_secret: Shared secret for webhook signatures
        debug: Log request and response bodies
    """

    api_key: Optional[str] = None
    environment: Environment = Environment.PRODUCTION
    base_url: Optional[str] = None
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    write_timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    webhook_secret: Optional[str] = None
    debug: bool = False

    def __post_init__(self):
        object.__setattr__(self, "environment", Environment.parse(self.environment))
        if self.base_url:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        for name in FLOAT_FIELDS + ("max_retries",):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.max_retries, int):
            raise ConfigurationError(f"max_retries must be an integer, got {self.max_retries!r}")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay must be non-negative")
        for name in ("connect_timeout", "read_timeout", "write_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")

    @property
    def resolved_base_url(self) -> str:
        """Base URL requests are sent to."""
        return self.base_url or self.environment.base_url

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "ClientConfig":
        """Create config from environment variables.

        Environment Variables:
            XRPLSALE_API_KEY: API key
            XRPLSALE_ENVIRONMENT: ``production`` (default) or ``testnet``
            XRPLSALE_BASE_URL: Optional base URL override
            XRPLSALE_CONNECT_TIMEOUT: Optional connect timeout (seconds)
            XRPLSALE_READ_TIMEOUT: Optional read timeout (seconds)
            XRPLSALE_WRITE_TIMEOUT: Optional write timeout (seconds)
            XRPLSALE_MAX_RETRIES: Optional max retries
            XRPLSALE_RETRY_DELAY: Optional base retry delay (seconds)
            XRPLSALE_WEBHOOK_SECRET: Optional webhook secret
            XRPLSALE_DEBUG: Optional debug flag

        Returns:
            ClientConfig instance

        Raises:
            ConfigurationError: If a variable cannot be parsed or is out of range
        """
        values = {}
        for name in cls.__dataclass_fields__:
            value = os.getenv(prefix + name.upper())
            if value is not None:
                values[name] = value
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ClientConfig":
        """Create a ClientConfig instance from a dictionary.

        Keys that are not configuration fields are ignored. String values,
        as read from environment variables or config files, are converted to
        the field types.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            ClientConfig instance with values from dictionary

        Raises:
            ConfigurationError: If a value cannot be converted or is out of range
        """
        values = {k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__}
        try:
            values = {name: _coerce(name, value) for name, value in values.items()}
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid XRPL.Sale configuration: {e}") from e
        return cls(**values)

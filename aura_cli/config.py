"""
Configuration management for the Aura CLI.

Settings are read from environment variables, optionally loaded from a
``.env`` file. The resulting :class:`AuraConfig` is passed explicitly to the
gateway, the authentication provider and the operation tracker.
"""

import math
import os
import warnings
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv

from .constants import (
    DEFAULT_AURA_AUTH_URL,
    DEFAULT_AURA_BASE_URL,
    DEFAULT_AURA_BETA_BASE_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_MAX_ATTEMPTS,
    MASKED_VALUE,
    VALID_OUTPUT_VALUES,
)
from .exceptions import ConfigError


class OutputMode(Enum):
    """How command output is rendered."""
    DEFAULT = "default"
    JSON = "json"
    TABLE = "table"


@dataclass(frozen=True)
class PollPolicy:
    """Interval (seconds) and attempt bound for the operation tracker."""
    interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS

    def __post_init__(self):
        if not math.isfinite(self.interval):
            raise ConfigError(f"Poll interval must be a finite number, got {self.interval}")
        if self.interval < 0:
            raise ConfigError(f"Poll interval must not be negative, got {self.interval}")
        if not isinstance(self.max_attempts, int) or self.max_attempts < 1:
            raise ConfigError(
                f"Poll max attempts must be a positive integer, got {self.max_attempts}"
            )

    def override(
        self,
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None
    ) -> "PollPolicy":
        """Return a copy with the given values replaced."""
        return PollPolicy(
            interval=self.interval if interval is None else interval,
            max_attempts=self.max_attempts if max_attempts is None else max_attempts
        )


def load_env_vars() -> None:
    """
    Load environment variables from a .env file in the working directory.

    Values already present in the environment are never overridden. File load
    errors (e.g., permission issues) are ignored with a warning.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    try:
        load_dotenv(env_path, override=False)
    except OSError:
        warnings.warn(
            f"Skipping .env load due to access error at {env_path}", UserWarning
        )


def parse_bool(value: Union[str, bool, None]) -> bool:
    """
    Parse a boolean-ish environment string.

    Args:
        value: String value ('true', 'false', '1', '0', etc.) or bool

    Returns:
        bool: Parsed boolean value (None and unknown strings are False)
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return False


def parse_output_mode(value: Union[str, OutputMode]) -> OutputMode:
    """
    Parse an output mode name.

    Raises:
        ConfigError: If the value is not one of default, json, table
    """
    if isinstance(value, OutputMode):
        return value
    try:
        return OutputMode(value.strip().lower())
    except ValueError:
        raise ConfigError(
            f"invalid output value specified: {value}. "
            f"Must be one of {', '.join(VALID_OUTPUT_VALUES)}"
        ) from None


def _env_number(var_name: str, default: str, cast):
    raw = os.getenv(var_name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Environment variable '{var_name}' is not a number: {raw}") from None


class AuraConfig:
    """Aura management API configuration."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        auth_url: Optional[str] = None,
        output: Optional[Union[str, OutputMode]] = None,
        default_tenant: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token: Optional[str] = None,
        poll_policy: Optional[PollPolicy] = None,
        beta_enabled: Optional[bool] = None
    ):
        """
        Initialize from explicit values, falling back to environment variables.

        Args:
            base_url: Management API base URL (AURA_BASE_URL)
            auth_url: OAuth token endpoint (AURA_AUTH_URL)
            output: Output mode (AURA_OUTPUT)
            default_tenant: Tenant used when a command needs one (AURA_DEFAULT_TENANT)
            client_id: OAuth client id (AURA_CLIENT_ID)
            client_secret: OAuth client secret (AURA_CLIENT_SECRET)
            token: Pre-issued bearer token (AURA_TOKEN)
            poll_policy: Polling policy (AURA_POLL_INTERVAL, AURA_POLL_MAX_ATTEMPTS)
            beta_enabled: Use the beta API base URL by default (AURA_BETA_ENABLED)
        """
        load_env_vars()

        if beta_enabled is None:
            beta_enabled = parse_bool(os.getenv('AURA_BETA_ENABLED', 'false'))
        self.beta_enabled = beta_enabled

        default_base = DEFAULT_AURA_BETA_BASE_URL if beta_enabled else DEFAULT_AURA_BASE_URL
        self.base_url = (base_url or os.getenv('AURA_BASE_URL') or default_base).rstrip('/')
        self.auth_url = auth_url or os.getenv('AURA_AUTH_URL') or DEFAULT_AURA_AUTH_URL
        self.output = parse_output_mode(output or os.getenv('AURA_OUTPUT') or OutputMode.DEFAULT)
        self.default_tenant = default_tenant or os.getenv('AURA_DEFAULT_TENANT', '')

        self.client_id = client_id or os.getenv('AURA_CLIENT_ID', '')
        self.client_secret = client_secret or os.getenv('AURA_CLIENT_SECRET', '')
        self.token = token or os.getenv('AURA_TOKEN', '')

        if poll_policy is None:
            poll_policy = PollPolicy(
                interval=_env_number('AURA_POLL_INTERVAL', str(DEFAULT_POLL_INTERVAL), float),
                max_attempts=_env_number('AURA_POLL_MAX_ATTEMPTS', str(DEFAULT_POLL_MAX_ATTEMPTS), int)
            )
        self.poll_policy = poll_policy

        if not self.base_url.startswith(('http://', 'https://')):
            raise ConfigError(f"Base URL must start with http:// or https://, got '{self.base_url}'")

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            mask_secrets: If True, mask client secret and token (default: True)
        """
        secret = MASKED_VALUE if mask_secrets and self.client_secret else self.client_secret
        token = MASKED_VALUE if mask_secrets and self.token else self.token
        return {
            'base-url': self.base_url,
            'auth-url': self.auth_url,
            'output': self.output.value,
            'default-tenant': self.default_tenant,
            'beta-enabled': self.beta_enabled,
            'client-id': self.client_id,
            'client-secret': secret,
            'token': token,
            'poll-interval': self.poll_policy.interval,
            'poll-max-attempts': self.poll_policy.max_attempts,
        }

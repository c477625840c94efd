"""
Authentication providers for the Aura management API.

A provider supplies the bearer token the gateway attaches to every request.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from .config import AuraConfig
from .exceptions import AuthError, TransportError

logger = logging.getLogger(__name__)


class AuthProvider(ABC):
    """Base class for token providers."""

    @abstractmethod
    def get_token(self) -> str:
        """Return a bearer token, raising AuthError when none is available."""
        pass


class StaticTokenProvider(AuthProvider):
    """Provider for a pre-issued token (AURA_TOKEN)."""

    def __init__(self, token: str):
        self.token = token

    def get_token(self) -> str:
        if not self.token or not self.token.strip():
            raise AuthError("No access token configured. Set AURA_TOKEN")
        return self.token.strip()


class ClientCredentialsProvider(AuthProvider):
    """
    OAuth2 client-credentials provider.

    Exchanges a client id and secret for an access token at the auth URL.
    The token is kept in memory for the lifetime of the process only.
    """

    def __init__(self, client_id: str, client_secret: str, auth_url: str,
                 session: Optional[requests.Session] = None):
        """
        Initialize provider.

        Args:
            client_id: OAuth client id
            client_secret: OAuth client secret
            auth_url: Token endpoint URL
            session: Optional requests session (created if not provided)
        """
        if not client_id or not client_secret:
            raise AuthError(
                "Client credentials are required. Set AURA_CLIENT_ID and AURA_CLIENT_SECRET"
            )
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_url = auth_url
        self.session = session or requests.Session()
        self.access_token: Optional[str] = None

    def _request_token(self) -> str:
        """Request a new access token from the token endpoint."""
        logger.debug("Requesting access token from %s", self.auth_url)
        try:
            response = self.session.post(
                self.auth_url,
                data={'grant_type': 'client_credentials'},
                auth=(self.client_id, self.client_secret),
                headers={'Content-Type': 'application/x-www-form-urlencoded'}
            )
        except requests.RequestException as e:
            raise TransportError('POST', self.auth_url, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise AuthError(
                f"Failed to obtain access token (HTTP {response.status_code}). "
                f"Check AURA_CLIENT_ID and AURA_CLIENT_SECRET"
            )

        try:
            token = response.json().get('access_token')
        except (ValueError, AttributeError):
            token = None

        if not token:
            raise AuthError("No access token in token endpoint response")

        return token

    def get_token(self) -> str:
        if not self.access_token:
            self.access_token = self._request_token()
            logger.debug("Access token obtained")
        return self.access_token


def get_auth_provider(config: AuraConfig) -> AuthProvider:
    """
    Factory function to get the auth provider for a configuration.

    A pre-issued token wins over client credentials.

    Raises:
        AuthError: If neither a token nor client credentials are configured
    """
    if config.token:
        return StaticTokenProvider(config.token)
    if config.client_id and config.client_secret:
        return ClientCredentialsProvider(config.client_id, config.client_secret, config.auth_url)
    raise AuthError(
        "No credentials configured. Set AURA_TOKEN, or AURA_CLIENT_ID and AURA_CLIENT_SECRET"
    )

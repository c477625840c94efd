"""Pytest configuration and fixtures."""

import json
import os
import pytest
import requests
from unittest.mock import patch, MagicMock

from aura_cli.auth import StaticTokenProvider
from aura_cli.config import AuraConfig
from aura_cli.gateway import ResourceGateway


def _without_aura_vars():
    return {k: v for k, v in os.environ.items() if not k.startswith('AURA_')}


@pytest.fixture
def clean_env():
    """Environment without any AURA_* variables."""
    with patch.dict(os.environ, _without_aura_vars(), clear=True):
        yield


@pytest.fixture
def mock_env():
    """Mock environment variables for a fully configured CLI."""
    env_vars = _without_aura_vars()
    env_vars.update({
        "AURA_BASE_URL": "https://api.test.io/v1",
        "AURA_AUTH_URL": "https://api.test.io/oauth/token",
        "AURA_CLIENT_ID": "test-client-id",
        "AURA_CLIENT_SECRET": "test-client-secret",
        "AURA_DEFAULT_TENANT": "tenant-1",
        "AURA_OUTPUT": "json",
        "AURA_POLL_INTERVAL": "5",
        "AURA_POLL_MAX_ATTEMPTS": "10",
    })
    with patch.dict(os.environ, env_vars, clear=True):
        yield env_vars


def _make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b''
    elif isinstance(body, bytes):
        response._content = body
    elif isinstance(body, str):
        response._content = body.encode('utf-8')
    else:
        response._content = json.dumps(body).encode('utf-8')
    return response


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects with a given status and body."""
    return _make_response


@pytest.fixture
def mock_session():
    """Mock requests session."""
    return MagicMock()


@pytest.fixture
def gateway(clean_env, mock_session):
    """Gateway with a static token and a mocked session."""
    config = AuraConfig(base_url="https://api.test.io/v1")
    return ResourceGateway(
        config,
        auth_provider=StaticTokenProvider("test-token"),
        session=mock_session,
        user_agent="aura-cli/1.0.0"
    )

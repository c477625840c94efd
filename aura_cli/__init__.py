"""
Aura CLI - Command Line Client for the Aura Management API

This library provides the pieces behind the ``aura-cli`` command for
provisioning and administering managed graph database resources.

Key Features:
- Resource gateway with consistent error semantics across endpoints
- Bounded polling of long-running operations (instance creation, restore, ...)
- Ordered field projection and JSON/table output
- OAuth2 client-credentials authentication
"""

__version__ = "1.0.0"

from .config import AuraConfig, OutputMode, PollPolicy
from .auth import (
    AuthProvider,
    ClientCredentialsProvider,
    StaticTokenProvider,
    get_auth_provider
)
from .exceptions import (
    AuraError,
    AuthError,
    ConfigError,
    MalformedErrorResponse,
    MalformedResponse,
    OperationFailed,
    PollTimeout,
    RemoteError,
    TransportError
)
from .gateway import Request, ResourceGateway, build_url
from .projection import project, project_all, project_data
from .tracker import (
    OperationState,
    OperationTracker,
    StatusRules,
    poll_instance
)
from .resources import (
    CustomerManagedKeysApi,
    DataApisApi,
    GraphAnalyticsSessionsApi,
    InstancesApi,
    SnapshotsApi,
    TenantsApi,
    build_data_api_body,
    build_instance_create_body,
    build_session_create_body
)

__all__ = [
    # Configuration
    'AuraConfig',
    'OutputMode',
    'PollPolicy',
    # Authentication
    'AuthProvider',
    'ClientCredentialsProvider',
    'StaticTokenProvider',
    'get_auth_provider',
    # Errors
    'AuraError',
    'AuthError',
    'ConfigError',
    'MalformedErrorResponse',
    'MalformedResponse',
    'OperationFailed',
    'PollTimeout',
    'RemoteError',
    'TransportError',
    # Gateway
    'Request',
    'ResourceGateway',
    'build_url',
    # Projection
    'project',
    'project_all',
    'project_data',
    # Operation tracking
    'OperationState',
    'OperationTracker',
    'StatusRules',
    'poll_instance',
    # Resource APIs
    'CustomerManagedKeysApi',
    'DataApisApi',
    'GraphAnalyticsSessionsApi',
    'InstancesApi',
    'SnapshotsApi',
    'TenantsApi',
    'build_data_api_body',
    'build_instance_create_body',
    'build_session_create_body',
]

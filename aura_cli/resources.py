"""
Resource APIs

Path builders over the gateway for each management API resource. Every call
returns ``(data, status_code)`` unchanged from the gateway; deciding what a
200 or 202 means is left to the caller.
"""

from typing import Any, Dict, List, Optional, Tuple

from .constants import FREE_DB_DEFAULTS, FREE_DB_TYPE
from .gateway import ResourceGateway, ResponseData

Response = Tuple[ResponseData, int]


def build_instance_create_body(
    name: str,
    instance_type: str,
    tenant_id: str,
    version: str = "5",
    region: Optional[str] = None,
    memory: Optional[str] = None,
    cloud_provider: Optional[str] = None,
    customer_managed_key_id: Optional[str] = None,
    vector_optimized: bool = False,
    graph_analytics_plugin: bool = False
) -> Dict[str, Any]:
    """
    Build the body of an instance create request.

    Free instances always get the free tier memory, region, cloud provider
    and version. ``graph_analytics_plugin`` is only sent for professional
    instances.

    Raises:
        ValueError: If an option is not allowed for the instance type
    """
    if instance_type == FREE_DB_TYPE:
        for option, value in (('memory', memory), ('region', region), ('cloud_provider', cloud_provider)):
            if value:
                raise ValueError(
                    f"'{option}' must not be set when the instance type is '{FREE_DB_TYPE}'"
                )
    elif not (memory and region and cloud_provider):
        raise ValueError(
            f"'memory', 'region' and 'cloud_provider' are required for instance type '{instance_type}'"
        )

    if version not in ("4", "5"):
        raise ValueError(f"Invalid version '{version}': must be one of '4' or '5'")

    if graph_analytics_plugin and instance_type != "professional-db":
        raise ValueError("'graph_analytics_plugin' can only be set for instance type 'professional-db'")

    if not tenant_id:
        raise ValueError("A tenant id is required. Pass one or set AURA_DEFAULT_TENANT")

    body: Dict[str, Any] = {
        'version': version,
        'region': region,
        'name': name,
        'type': instance_type,
        'tenant_id': tenant_id,
        'cloud_provider': cloud_provider,
    }

    if instance_type == FREE_DB_TYPE:
        body.update(FREE_DB_DEFAULTS)
    else:
        body['memory'] = memory
        body['vector_optimized'] = vector_optimized

    if instance_type == "professional-db":
        body['graph_analytics_plugin'] = graph_analytics_plugin

    if customer_managed_key_id:
        body['customer_managed_key_id'] = customer_managed_key_id

    return body


class _ResourceApi:
    """Base for resource APIs sharing one gateway."""

    def __init__(self, gateway: ResourceGateway):
        self.gateway = gateway


class InstancesApi(_ResourceApi):
    """Aura instances."""

    def list(self, tenant_id: Optional[str] = None) -> Response:
        query = {'tenantId': tenant_id} if tenant_id else None
        return self.gateway.get('/instances', query=query)

    def get(self, instance_id: str) -> Response:
        return self.gateway.get(f'/instances/{instance_id}')

    def create(self, body: Dict[str, Any]) -> Response:
        return self.gateway.post('/instances', body=body)

    def update(self, instance_id: str, body: Dict[str, Any]) -> Response:
        """Rename and/or resize an instance."""
        if not body:
            raise ValueError("At least one of 'name' or 'memory' must be given")
        return self.gateway.patch(f'/instances/{instance_id}', body=body)

    def delete(self, instance_id: str) -> Response:
        return self.gateway.delete(f'/instances/{instance_id}')

    def pause(self, instance_id: str) -> Response:
        return self.gateway.post(f'/instances/{instance_id}/pause')

    def resume(self, instance_id: str) -> Response:
        return self.gateway.post(f'/instances/{instance_id}/resume')


class SnapshotsApi(_ResourceApi):
    """Snapshots of an instance."""

    def list(self, instance_id: str, date: Optional[str] = None) -> Response:
        query = {'date': date} if date else None
        return self.gateway.get(f'/instances/{instance_id}/snapshots', query=query)

    def get(self, instance_id: str, snapshot_id: str) -> Response:
        return self.gateway.get(f'/instances/{instance_id}/snapshots/{snapshot_id}')

    def create(self, instance_id: str) -> Response:
        return self.gateway.post(f'/instances/{instance_id}/snapshots')

    def restore(self, instance_id: str, snapshot_id: str) -> Response:
        return self.gateway.post(f'/instances/{instance_id}/snapshots/{snapshot_id}/restore')


class TenantsApi(_ResourceApi):
    """Tenants (projects)."""

    def list(self) -> Response:
        return self.gateway.get('/tenants')

    def get(self, tenant_id: str) -> Response:
        return self.gateway.get(f'/tenants/{tenant_id}')


class CustomerManagedKeysApi(_ResourceApi):
    """Customer managed encryption keys."""

    def list(self, tenant_id: Optional[str] = None) -> Response:
        query = {'tenantId': tenant_id} if tenant_id else None
        return self.gateway.get('/customer-managed-keys', query=query)

    def get(self, key_id: str) -> Response:
        return self.gateway.get(f'/customer-managed-keys/{key_id}')

    def create(self, body: Dict[str, Any]) -> Response:
        return self.gateway.post('/customer-managed-keys', body=body)

    def delete(self, key_id: str) -> Response:
        return self.gateway.delete(f'/customer-managed-keys/{key_id}')


def build_data_api_body(
    name: Optional[str] = None,
    type_definitions: Optional[str] = None,
    instance_username: Optional[str] = None,
    instance_password: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the body of a GraphQL Data API create or update request.

    Only the given values are included. ``type_definitions`` must already be
    base64 encoded.
    """
    body: Dict[str, Any] = {}
    if name:
        body['name'] = name
    if type_definitions:
        body['type_definitions'] = type_definitions
    aura_instance = {}
    if instance_username:
        aura_instance['username'] = instance_username
    if instance_password:
        aura_instance['password'] = instance_password
    if aura_instance:
        body['aura_instance'] = aura_instance
    return body


def allowed_origins(data_api: Dict[str, Any]) -> List[str]:
    """Read the CORS allowed origins of a GraphQL Data API."""
    security = data_api.get('security') or {}
    cors_policy = security.get('cors_policy') or {}
    return list(cors_policy.get('allowed_origins') or [])


def add_allowed_origin(data_api: Dict[str, Any], origin: str) -> List[str]:
    """
    Return the allowed origins with ``origin`` appended.

    Raises:
        ValueError: If the origin is already allowed
    """
    origins = allowed_origins(data_api)
    if origin in origins:
        raise ValueError(f'Origin "{origin}" already exists in allowed origins')
    origins.append(origin)
    return origins


def remove_allowed_origin(data_api: Dict[str, Any], origin: str) -> List[str]:
    """
    Return the allowed origins without ``origin``.

    Raises:
        ValueError: If the origin is not allowed
    """
    origins = allowed_origins(data_api)
    if origin not in origins:
        raise ValueError(f'Origin "{origin}" not found in allowed origins')
    return [o for o in origins if o != origin]


def cors_policy_body(origins: List[str]) -> Dict[str, Any]:
    """Body of a PATCH replacing the CORS allowed origins."""
    return {'security': {'cors_policy': {'allowed_origins': origins}}}


class DataApisApi(_ResourceApi):
    """GraphQL Data APIs of an instance, with their authentication providers."""

    @staticmethod
    def _path(instance_id: str, data_api_id: Optional[str] = None) -> str:
        path = f'/instances/{instance_id}/data-apis/graphql'
        return f'{path}/{data_api_id}' if data_api_id else path

    def list(self, instance_id: str) -> Response:
        return self.gateway.get(self._path(instance_id))

    def get(self, instance_id: str, data_api_id: str) -> Response:
        return self.gateway.get(self._path(instance_id, data_api_id))

    def create(self, instance_id: str, body: Dict[str, Any]) -> Response:
        return self.gateway.post(self._path(instance_id), body=body)

    def update(self, instance_id: str, data_api_id: str, body: Dict[str, Any]) -> Response:
        if not body:
            raise ValueError("Nothing to update")
        return self.gateway.patch(self._path(instance_id, data_api_id), body=body)

    def delete(self, instance_id: str, data_api_id: str) -> Response:
        return self.gateway.delete(self._path(instance_id, data_api_id))

    def pause(self, instance_id: str, data_api_id: str) -> Response:
        return self.gateway.post(f'{self._path(instance_id, data_api_id)}/pause')

    def resume(self, instance_id: str, data_api_id: str) -> Response:
        return self.gateway.post(f'{self._path(instance_id, data_api_id)}/resume')

    def list_auth_providers(self, instance_id: str, data_api_id: str) -> Response:
        return self.gateway.get(f'{self._path(instance_id, data_api_id)}/auth-providers')

    def get_auth_provider(self, instance_id: str, data_api_id: str, provider_id: str) -> Response:
        return self.gateway.get(
            f'{self._path(instance_id, data_api_id)}/auth-providers/{provider_id}'
        )

    def update_auth_provider(
        self,
        instance_id: str,
        data_api_id: str,
        provider_id: str,
        body: Dict[str, Any]
    ) -> Response:
        if not body:
            raise ValueError("Nothing to update")
        return self.gateway.patch(
            f'{self._path(instance_id, data_api_id)}/auth-providers/{provider_id}',
            body=body
        )


def build_session_create_body(
    name: str,
    memory: str,
    tenant_id: str,
    instance_id: Optional[str] = None,
    cloud_location: Optional[str] = None,
    ttl: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the body of a graph analytics session create request.

    A session is either attached to an instance or placed in a cloud
    location, never both.

    Raises:
        ValueError: If the placement or the tenant is missing
    """
    if bool(instance_id) == bool(cloud_location):
        raise ValueError("Exactly one of 'instance_id' or 'cloud_location' must be set")
    if not tenant_id:
        raise ValueError("A tenant id is required. Pass one or set AURA_DEFAULT_TENANT")

    body: Dict[str, Any] = {'name': name, 'memory': memory, 'tenant_id': tenant_id}
    if instance_id:
        body['instance_id'] = instance_id
    if cloud_location:
        body['cloud_location'] = cloud_location
    if ttl:
        body['ttl'] = ttl
    return body


class GraphAnalyticsSessionsApi(_ResourceApi):
    """Graph analytics sessions."""

    def list(self, tenant_id: Optional[str] = None, instance_id: Optional[str] = None) -> Response:
        query = []
        if tenant_id:
            query.append(('tenantId', tenant_id))
        if instance_id:
            query.append(('instanceId', instance_id))
        return self.gateway.get('/graph-analytics/sessions', query=query or None)

    def get(self, session_id: str) -> Response:
        return self.gateway.get(f'/graph-analytics/sessions/{session_id}')

    def create(self, body: Dict[str, Any]) -> Response:
        return self.gateway.post('/graph-analytics/sessions', body=body)

    def delete(self, session_id: str) -> Response:
        return self.gateway.delete(f'/graph-analytics/sessions/{session_id}')

"""
Command-line interface for the Aura management API.

One subcommand per resource verb. Commands build a request through a
resource API, render the projected response and, with ``--await``, hand the
resource to the operation tracker. This module is the only place where
library errors are turned into messages and exit codes.
"""

import base64
import json
import logging
import math
from typing import Any, Callable, Dict, Optional

import click

from . import __version__
from .config import AuraConfig
from .constants import (
    AUTH_PROVIDER_FIELDS,
    CMK_GET_FIELDS,
    CMK_LIST_FIELDS,
    CMK_STATUS_PENDING,
    DATA_API_CREATE_FIELDS,
    DATA_API_FIELDS,
    DATA_API_STATUS_CREATING,
    INSTANCE_CREATE_FIELDS,
    INSTANCE_GET_FIELDS,
    INSTANCE_LIST_FIELDS,
    INSTANCE_STATUS_CREATING,
    INSTANCE_UPDATE_FIELDS,
    SESSION_GET_FIELDS,
    SESSION_LIST_FIELDS,
    SESSION_STATUS_CREATING,
    SNAPSHOT_FIELDS,
    SNAPSHOT_STATUS_PENDING,
    TENANT_GET_FIELDS,
    TENANT_LIST_FIELDS,
    VALID_OUTPUT_VALUES,
)
from .exceptions import AuraError, MalformedResponse
from .gateway import ResourceGateway
from .output import render
from .resources import (
    CustomerManagedKeysApi,
    DataApisApi,
    GraphAnalyticsSessionsApi,
    InstancesApi,
    SnapshotsApi,
    TenantsApi,
    add_allowed_origin,
    build_data_api_body,
    build_instance_create_body,
    build_session_create_body,
    cors_policy_body,
    remove_allowed_origin,
)
from .tracker import (
    CUSTOMER_MANAGED_KEY_RULES,
    DATA_API_PAUSED_RULES,
    DATA_API_READY_RULES,
    GRAPH_ANALYTICS_SESSION_RULES,
    INSTANCE_PAUSED_RULES,
    INSTANCE_RUNNING_RULES,
    SNAPSHOT_RULES,
    OperationTracker,
    StatusRules,
)

INSTANCE_TYPES = [
    "free-db", "professional-db", "professional-ds", "enterprise-db",
    "enterprise-ds", "business-critical",
]
CLOUD_PROVIDERS = ["gcp", "aws", "azure"]
SNAPSHOT_RESTORE_FIELDS = [
    "id", "name", "status", "tenant_id", "connection_url", "cloud_provider",
    "type", "region", "memory",
]

HTTP_OK = 200
HTTP_ACCEPTED = 202


class CliState:
    """Per-invocation state. Configuration and gateway are built on first use."""

    def __init__(self, base_url: Optional[str] = None, auth_url: Optional[str] = None,
                 output: Optional[str] = None):
        self.base_url = base_url
        self.auth_url = auth_url
        self.output = output
        self._config: Optional[AuraConfig] = None
        self._gateway: Optional[ResourceGateway] = None

    @property
    def config(self) -> AuraConfig:
        if self._config is None:
            self._config = AuraConfig(
                base_url=self.base_url,
                auth_url=self.auth_url,
                output=self.output
            )
        return self._config

    @property
    def gateway(self) -> ResourceGateway:
        if self._gateway is None:
            self._gateway = ResourceGateway(self.config)
        return self._gateway

    def render(self, data: Any, fields) -> None:
        render(data, fields, self.config.output)

    def await_status(
        self,
        fetch: Callable[[], Any],
        rules: StatusRules,
        starting_status: Optional[str],
        label: str,
        poll_interval: Optional[float] = None,
        poll_max_attempts: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Poll until a terminal status if the starting status is transitional."""
        if not rules.needs_polling(starting_status):
            click.echo(f"{label} Status: {starting_status}")
            return None

        policy = self.config.poll_policy.override(poll_interval, poll_max_attempts)
        click.echo(f"Waiting for {label.lower()} to be ready...")
        tracker = OperationTracker(
            fetch,
            rules,
            policy,
            on_status=lambda status, attempt: click.echo(f"{label} Status: {status}")
        )
        return tracker.track()


class AuraGroup(click.Group):
    """Root group that turns library errors into click errors (exit code 1)."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except AuraError as e:
            raise click.ClickException(str(e)) from e


class FiniteFloatRange(click.FloatRange):
    """FloatRange that also rejects NaN and infinity."""

    def convert(self, value, param, ctx):
        rv = super().convert(value, param, ctx)
        if not math.isfinite(rv):
            self.fail(f"{value!r} is not a finite number.", param, ctx)
        return rv


def await_options(f):
    """Add --await and the poll policy overrides to a command."""
    f = click.option('--poll-max-attempts', type=click.IntRange(min=1), default=None,
                     help="Maximum number of status checks while awaiting.")(f)
    f = click.option('--poll-interval', type=FiniteFloatRange(min=0), default=None,
                     help="Seconds between status checks while awaiting.")(f)
    f = click.option('--await', 'await_', is_flag=True, default=False,
                     help="Wait until the operation reaches a terminal status.")(f)
    return f


def _data_field(data: Any, name: str) -> Any:
    return data.get(name) if isinstance(data, dict) else None


def _resource_id(data: Any, name: str, status_code: int) -> str:
    """Identifier to poll, read from a create response."""
    value = _data_field(data, name)
    if not value:
        raise MalformedResponse(status_code, f"response has no '{name}'")
    return value


@click.group(cls=AuraGroup)
@click.option('--base-url', default=None, help="Management API base URL.")
@click.option('--auth-url', default=None, help="OAuth token endpoint.")
@click.option('--output', type=click.Choice(VALID_OUTPUT_VALUES), default=None,
              help="Format to print console output in.")
@click.option('-v', '--verbose', is_flag=True, default=False, help="Log HTTP requests.")
@click.version_option(__version__, prog_name="aura-cli")
@click.pass_context
def cli(ctx, base_url, auth_url, output, verbose):
    """Programmatically provision and manage your Aura resources."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = CliState(base_url=base_url, auth_url=auth_url, output=output)


# ====================================================================
# CONFIG
# ====================================================================

@cli.group()
def config():
    """Inspect the effective configuration."""


@config.command('list')
@click.pass_obj
def config_list(state: CliState):
    """Print the effective configuration with secrets masked."""
    click.echo(json.dumps(state.config.to_dict(), indent=2))


# ====================================================================
# INSTANCES
# ====================================================================

@cli.group()
def instance():
    """Manage Aura instances."""


@instance.command('list')
@click.option('--tenant-id', default=None, help="Only list instances of this tenant.")
@click.pass_obj
def instance_list(state: CliState, tenant_id):
    """Return a summary of each instance."""
    data, status_code = InstancesApi(state.gateway).list(tenant_id)
    if status_code == HTTP_OK:
        state.render(data, INSTANCE_LIST_FIELDS)


@instance.command('get')
@click.argument('instance_id')
@click.pass_obj
def instance_get(state: CliState, instance_id):
    """Return instance details."""
    data, status_code = InstancesApi(state.gateway).get(instance_id)
    if status_code == HTTP_OK:
        fields = list(INSTANCE_GET_FIELDS)
        metrics_url = _data_field(data, 'metrics_integration_url')
        if isinstance(metrics_url, str) and metrics_url:
            fields.append('metrics_integration_url')
        state.render(data, fields)


@instance.command('create')
@click.option('--name', required=True, help="Name of the instance.")
@click.option('--type', 'instance_type', required=True, type=click.Choice(INSTANCE_TYPES),
              help="Type of the instance.")
@click.option('--tenant-id', default=None, help="Tenant of the instance (defaults to AURA_DEFAULT_TENANT).")
@click.option('--version', default="5", help="Neo4j version of the instance.")
@click.option('--region', default=None, help="Region hosting the instance.")
@click.option('--memory', default=None, help="Instance memory, e.g. 8GB.")
@click.option('--cloud-provider', type=click.Choice(CLOUD_PROVIDERS), default=None,
              help="Cloud provider hosting the instance.")
@click.option('--customer-managed-key-id', default=None, help="Customer managed key for encryption.")
@click.option('--vector-optimized', is_flag=True, default=False, help="Optimize for vector workloads.")
@click.option('--graph-analytics-plugin', is_flag=True, default=False,
              help="Enable the graph analytics plugin (professional-db only).")
@await_options
@click.pass_obj
def instance_create(state: CliState, name, instance_type, tenant_id, version, region, memory,
                    cloud_provider, customer_managed_key_id, vector_optimized,
                    graph_analytics_plugin, await_, poll_interval, poll_max_attempts):
    """Start the creation of a new instance."""
    try:
        body = build_instance_create_body(
            name=name,
            instance_type=instance_type,
            tenant_id=tenant_id or state.config.default_tenant,
            version=version,
            region=region,
            memory=memory,
            cloud_provider=cloud_provider,
            customer_managed_key_id=customer_managed_key_id,
            vector_optimized=vector_optimized,
            graph_analytics_plugin=graph_analytics_plugin
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    api = InstancesApi(state.gateway)
    data, status_code = api.create(body)

    # Creation is asynchronous and answers 202, 200 is accepted as well
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, INSTANCE_CREATE_FIELDS)

    if await_:
        instance_id = _resource_id(data, 'id', status_code)
        state.await_status(
            lambda: api.get(instance_id)[0],
            INSTANCE_RUNNING_RULES,
            INSTANCE_STATUS_CREATING,
            "Instance",
            poll_interval,
            poll_max_attempts
        )


@instance.command('update')
@click.argument('instance_id')
@click.option('--name', default=None, help="New name of the instance.")
@click.option('--memory', default=None, help="New instance memory, e.g. 16GB.")
@await_options
@click.pass_obj
def instance_update(state: CliState, instance_id, name, memory, await_, poll_interval,
                    poll_max_attempts):
    """Rename and/or resize an instance."""
    body = {}
    if memory:
        body['memory'] = memory
    if name:
        body['name'] = name
    if not body:
        raise click.UsageError("at least one of --name or --memory must be set")

    api = InstancesApi(state.gateway)
    data, status_code = api.update(instance_id, body)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, INSTANCE_UPDATE_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id)[0],
            INSTANCE_RUNNING_RULES,
            _data_field(data, 'status'),
            "Instance",
            poll_interval,
            poll_max_attempts
        )


@instance.command('delete')
@click.argument('instance_id')
@click.pass_obj
def instance_delete(state: CliState, instance_id):
    """Delete an instance."""
    data, status_code = InstancesApi(state.gateway).delete(instance_id)
    if status_code in (HTTP_ACCEPTED, HTTP_OK):
        state.render(data, INSTANCE_UPDATE_FIELDS)


@instance.command('pause')
@click.argument('instance_id')
@await_options
@click.pass_obj
def instance_pause(state: CliState, instance_id, await_, poll_interval, poll_max_attempts):
    """Pause an instance."""
    api = InstancesApi(state.gateway)
    data, status_code = api.pause(instance_id)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, INSTANCE_UPDATE_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id)[0],
            INSTANCE_PAUSED_RULES,
            _data_field(data, 'status'),
            "Instance",
            poll_interval,
            poll_max_attempts
        )


@instance.command('resume')
@click.argument('instance_id')
@await_options
@click.pass_obj
def instance_resume(state: CliState, instance_id, await_, poll_interval, poll_max_attempts):
    """Resume a paused instance."""
    api = InstancesApi(state.gateway)
    data, status_code = api.resume(instance_id)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, INSTANCE_UPDATE_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id)[0],
            INSTANCE_RUNNING_RULES,
            _data_field(data, 'status'),
            "Instance",
            poll_interval,
            poll_max_attempts
        )


# ====================================================================
# SNAPSHOTS
# ====================================================================

@instance.group()
def snapshot():
    """Manage instance snapshots."""


@snapshot.command('list')
@click.option('--instance-id', required=True, help="Instance to list snapshots of.")
@click.option('--date', default=None, help="Only list snapshots taken on this date (YYYY-MM-DD).")
@click.pass_obj
def snapshot_list(state: CliState, instance_id, date):
    """Return the snapshots of an instance."""
    data, status_code = SnapshotsApi(state.gateway).list(instance_id, date)
    if status_code == HTTP_OK:
        state.render(data, SNAPSHOT_FIELDS)


@snapshot.command('get')
@click.argument('snapshot_id')
@click.option('--instance-id', required=True, help="Instance the snapshot belongs to.")
@click.pass_obj
def snapshot_get(state: CliState, snapshot_id, instance_id):
    """Return snapshot details."""
    data, status_code = SnapshotsApi(state.gateway).get(instance_id, snapshot_id)
    if status_code == HTTP_OK:
        state.render(data, SNAPSHOT_FIELDS)


@snapshot.command('create')
@click.option('--instance-id', required=True, help="Instance to snapshot.")
@await_options
@click.pass_obj
def snapshot_create(state: CliState, instance_id, await_, poll_interval, poll_max_attempts):
    """Take an on-demand snapshot."""
    api = SnapshotsApi(state.gateway)
    data, status_code = api.create(instance_id)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, ["snapshot_id"])

    if await_:
        snapshot_id = _resource_id(data, 'snapshot_id', status_code)
        state.await_status(
            lambda: api.get(instance_id, snapshot_id)[0],
            SNAPSHOT_RULES,
            SNAPSHOT_STATUS_PENDING,
            "Snapshot",
            poll_interval,
            poll_max_attempts
        )


@snapshot.command('restore')
@click.argument('snapshot_id')
@click.option('--instance-id', required=True, help="Instance to restore the snapshot into.")
@await_options
@click.pass_obj
def snapshot_restore(state: CliState, snapshot_id, instance_id, await_, poll_interval,
                     poll_max_attempts):
    """Restore a snapshot."""
    data, status_code = SnapshotsApi(state.gateway).restore(instance_id, snapshot_id)
    if status_code != HTTP_ACCEPTED:
        return
    state.render(data, SNAPSHOT_RESTORE_FIELDS)

    if await_:
        instances = InstancesApi(state.gateway)
        state.await_status(
            lambda: instances.get(instance_id)[0],
            INSTANCE_RUNNING_RULES,
            _data_field(data, 'status'),
            "Instance",
            poll_interval,
            poll_max_attempts
        )


# ====================================================================
# TENANTS
# ====================================================================

@cli.group()
def tenant():
    """Inspect tenants."""


@tenant.command('list')
@click.pass_obj
def tenant_list(state: CliState):
    """Return the tenants you have access to."""
    data, status_code = TenantsApi(state.gateway).list()
    if status_code == HTTP_OK:
        state.render(data, TENANT_LIST_FIELDS)


@tenant.command('get')
@click.argument('tenant_id')
@click.pass_obj
def tenant_get(state: CliState, tenant_id):
    """Return tenant details, including available instance configurations."""
    data, status_code = TenantsApi(state.gateway).get(tenant_id)
    if status_code == HTTP_OK:
        state.render(data, TENANT_GET_FIELDS)


# ====================================================================
# CUSTOMER MANAGED KEYS
# ====================================================================

@cli.group('customer-managed-key')
def customer_managed_key():
    """Manage customer managed keys."""


@customer_managed_key.command('list')
@click.option('--tenant-id', default=None, help="Only list keys of this tenant.")
@click.pass_obj
def cmk_list(state: CliState, tenant_id):
    """Return a summary of each customer managed key."""
    data, status_code = CustomerManagedKeysApi(state.gateway).list(tenant_id)
    if status_code == HTTP_OK:
        state.render(data, CMK_LIST_FIELDS)


@customer_managed_key.command('get')
@click.argument('key_id')
@click.pass_obj
def cmk_get(state: CliState, key_id):
    """Return customer managed key details."""
    data, status_code = CustomerManagedKeysApi(state.gateway).get(key_id)
    if status_code == HTTP_OK:
        state.render(data, CMK_GET_FIELDS)


@customer_managed_key.command('create')
@click.option('--name', required=True, help="Name of the key.")
@click.option('--key-id', required=True, help="Key id in the cloud provider's key service.")
@click.option('--region', required=True, help="Region of the key.")
@click.option('--instance-type', required=True, type=click.Choice(INSTANCE_TYPES),
              help="Instance type the key will be used for.")
@click.option('--cloud-provider', required=True, type=click.Choice(CLOUD_PROVIDERS),
              help="Cloud provider of the key.")
@click.option('--tenant-id', default=None, help="Tenant of the key (defaults to AURA_DEFAULT_TENANT).")
@await_options
@click.pass_obj
def cmk_create(state: CliState, name, key_id, region, instance_type, cloud_provider, tenant_id,
               await_, poll_interval, poll_max_attempts):
    """Register a customer managed key."""
    tenant_id = tenant_id or state.config.default_tenant
    if not tenant_id:
        raise click.UsageError("--tenant-id is required when AURA_DEFAULT_TENANT is not set")

    api = CustomerManagedKeysApi(state.gateway)
    data, status_code = api.create({
        'name': name,
        'key_id': key_id,
        'region': region,
        'instance_type': instance_type,
        'cloud_provider': cloud_provider,
        'tenant_id': tenant_id,
    })
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, CMK_GET_FIELDS)

    if await_:
        cmk_id = _resource_id(data, 'id', status_code)
        state.await_status(
            lambda: api.get(cmk_id)[0],
            CUSTOMER_MANAGED_KEY_RULES,
            _data_field(data, 'status') or CMK_STATUS_PENDING,
            "Customer Managed Key",
            poll_interval,
            poll_max_attempts
        )


@customer_managed_key.command('delete')
@click.argument('key_id')
@click.pass_obj
def cmk_delete(state: CliState, key_id):
    """Delete a customer managed key."""
    data, status_code = CustomerManagedKeysApi(state.gateway).delete(key_id)
    if status_code in (HTTP_ACCEPTED, HTTP_OK) and data is not None:
        state.render(data, CMK_GET_FIELDS)


# ====================================================================
# DATA APIS
# ====================================================================

def _encoded_type_definitions(type_definitions: Optional[str], type_definitions_file) -> Optional[str]:
    """Base64 type definitions from the flag, or encoded from the file."""
    if type_definitions and type_definitions_file:
        raise click.UsageError("only one of --type-definitions or --type-definitions-file may be set")
    if type_definitions_file:
        return base64.b64encode(type_definitions_file.read()).decode('ascii')
    return type_definitions


def type_definition_options(f):
    f = click.option('--type-definitions-file', type=click.File('rb'), default=None,
                     help="File with the GraphQL type definitions (encoded for you).")(f)
    f = click.option('--type-definitions', default=None,
                     help="Base64 encoded GraphQL type definitions.")(f)
    return f


@cli.group('data-api')
def data_api():
    """Manage Data APIs."""


@data_api.group()
def graphql():
    """Manage GraphQL Data APIs of an instance."""


@graphql.command('list')
@click.option('--instance-id', required=True, help="Instance serving the Data APIs.")
@click.pass_obj
def graphql_list(state: CliState, instance_id):
    """Return the GraphQL Data APIs of an instance."""
    data, status_code = DataApisApi(state.gateway).list(instance_id)
    if status_code == HTTP_OK:
        state.render(data, DATA_API_FIELDS)


@graphql.command('get')
@click.argument('data_api_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.pass_obj
def graphql_get(state: CliState, data_api_id, instance_id):
    """Return GraphQL Data API details."""
    data, status_code = DataApisApi(state.gateway).get(instance_id, data_api_id)
    if status_code == HTTP_OK:
        state.render(data, DATA_API_FIELDS)


@graphql.command('create')
@click.option('--instance-id', required=True, help="Instance to serve the Data API.")
@click.option('--name', required=True, help="Name of the Data API.")
@type_definition_options
@click.option('--instance-username', required=True, help="Username the Data API connects with.")
@click.option('--instance-password', required=True, help="Password the Data API connects with.")
@await_options
@click.pass_obj
def graphql_create(state: CliState, instance_id, name, type_definitions, type_definitions_file,
                   instance_username, instance_password, await_, poll_interval,
                   poll_max_attempts):
    """Create a GraphQL Data API."""
    type_definitions = _encoded_type_definitions(type_definitions, type_definitions_file)
    if not type_definitions:
        raise click.UsageError("one of --type-definitions or --type-definitions-file must be set")

    api = DataApisApi(state.gateway)
    data, status_code = api.create(instance_id, build_data_api_body(
        name=name,
        type_definitions=type_definitions,
        instance_username=instance_username,
        instance_password=instance_password
    ))
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, DATA_API_CREATE_FIELDS)

    if await_:
        data_api_id = _resource_id(data, 'id', status_code)
        state.await_status(
            lambda: api.get(instance_id, data_api_id)[0],
            DATA_API_READY_RULES,
            DATA_API_STATUS_CREATING,
            "Data API",
            poll_interval,
            poll_max_attempts
        )


@graphql.command('update')
@click.argument('data_api_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--name', default=None, help="New name of the Data API.")
@type_definition_options
@click.option('--instance-username', default=None, help="New username the Data API connects with.")
@click.option('--instance-password', default=None, help="New password the Data API connects with.")
@await_options
@click.pass_obj
def graphql_update(state: CliState, data_api_id, instance_id, name, type_definitions,
                   type_definitions_file, instance_username, instance_password, await_,
                   poll_interval, poll_max_attempts):
    """Update a GraphQL Data API."""
    body = build_data_api_body(
        name=name,
        type_definitions=_encoded_type_definitions(type_definitions, type_definitions_file),
        instance_username=instance_username,
        instance_password=instance_password
    )
    if not body:
        raise click.UsageError("at least one value to update must be set")

    api = DataApisApi(state.gateway)
    data, status_code = api.update(instance_id, data_api_id, body)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, DATA_API_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id, data_api_id)[0],
            DATA_API_READY_RULES,
            _data_field(data, 'status'),
            "Data API",
            poll_interval,
            poll_max_attempts
        )


@graphql.command('delete')
@click.argument('data_api_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.pass_obj
def graphql_delete(state: CliState, data_api_id, instance_id):
    """Delete a GraphQL Data API."""
    data, status_code = DataApisApi(state.gateway).delete(instance_id, data_api_id)
    if status_code in (HTTP_ACCEPTED, HTTP_OK) and data is not None:
        state.render(data, DATA_API_FIELDS)


@graphql.command('pause')
@click.argument('data_api_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@await_options
@click.pass_obj
def graphql_pause(state: CliState, data_api_id, instance_id, await_, poll_interval,
                  poll_max_attempts):
    """Pause a GraphQL Data API."""
    api = DataApisApi(state.gateway)
    data, status_code = api.pause(instance_id, data_api_id)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, DATA_API_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id, data_api_id)[0],
            DATA_API_PAUSED_RULES,
            _data_field(data, 'status'),
            "Data API",
            poll_interval,
            poll_max_attempts
        )


@graphql.command('resume')
@click.argument('data_api_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@await_options
@click.pass_obj
def graphql_resume(state: CliState, data_api_id, instance_id, await_, poll_interval,
                   poll_max_attempts):
    """Resume a paused GraphQL Data API."""
    api = DataApisApi(state.gateway)
    data, status_code = api.resume(instance_id, data_api_id)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, DATA_API_FIELDS)

    if await_:
        state.await_status(
            lambda: api.get(instance_id, data_api_id)[0],
            DATA_API_READY_RULES,
            _data_field(data, 'status'),
            "Data API",
            poll_interval,
            poll_max_attempts
        )


@graphql.group('auth-provider')
def auth_provider():
    """Manage authentication providers of a GraphQL Data API."""


@auth_provider.command('list')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--data-api-id', required=True, help="Data API the providers belong to.")
@click.pass_obj
def auth_provider_list(state: CliState, instance_id, data_api_id):
    """Return the authentication providers of a Data API."""
    data, status_code = DataApisApi(state.gateway).list_auth_providers(instance_id, data_api_id)
    if status_code == HTTP_OK:
        state.render(data, AUTH_PROVIDER_FIELDS)


@auth_provider.command('get')
@click.argument('provider_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--data-api-id', required=True, help="Data API the provider belongs to.")
@click.pass_obj
def auth_provider_get(state: CliState, provider_id, instance_id, data_api_id):
    """Return authentication provider details."""
    data, status_code = DataApisApi(state.gateway).get_auth_provider(
        instance_id, data_api_id, provider_id
    )
    if status_code == HTTP_OK:
        state.render(data, AUTH_PROVIDER_FIELDS)


@auth_provider.command('update')
@click.argument('provider_id')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--data-api-id', required=True, help="Data API the provider belongs to.")
@click.option('--name', default=None, help="New name of the provider.")
@click.option('--enabled', type=click.BOOL, default=None, help="Enable or disable the provider.")
@click.option('--url', default=None, help="New JWKS URL of the provider.")
@click.pass_obj
def auth_provider_update(state: CliState, provider_id, instance_id, data_api_id, name,
                         enabled, url):
    """Update an authentication provider."""
    body: Dict[str, Any] = {}
    if name:
        body['name'] = name
    if enabled is not None:
        body['enabled'] = enabled
    if url:
        body['url'] = url
    if not body:
        raise click.UsageError("at least one of --name, --enabled or --url must be set")

    data, status_code = DataApisApi(state.gateway).update_auth_provider(
        instance_id, data_api_id, provider_id, body
    )
    if status_code in (HTTP_ACCEPTED, HTTP_OK):
        state.render(data, AUTH_PROVIDER_FIELDS)


@graphql.group('cors-policy')
def cors_policy():
    """Manage the CORS policy of a GraphQL Data API."""


@cors_policy.group('allowed-origin')
def allowed_origin():
    """Manage the allowed origins of a GraphQL Data API."""


def _change_allowed_origins(state: CliState, instance_id: str, data_api_id: str, change) -> None:
    """Read the current origins, apply ``change`` and write them back."""
    api = DataApisApi(state.gateway)
    current, _status_code = api.get(instance_id, data_api_id)
    try:
        origins = change(current if isinstance(current, dict) else {})
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    data, status_code = api.update(instance_id, data_api_id, cors_policy_body(origins))
    if status_code in (HTTP_ACCEPTED, HTTP_OK):
        click.echo(f"New allowed origins: {json.dumps(origins)}")
        state.render(data, DATA_API_FIELDS)


@allowed_origin.command('add')
@click.argument('origin')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--data-api-id', required=True, help="Data API to update.")
@click.pass_obj
def allowed_origin_add(state: CliState, origin, instance_id, data_api_id):
    """Allow a new origin."""
    _change_allowed_origins(
        state, instance_id, data_api_id, lambda data: add_allowed_origin(data, origin)
    )


@allowed_origin.command('remove')
@click.argument('origin')
@click.option('--instance-id', required=True, help="Instance serving the Data API.")
@click.option('--data-api-id', required=True, help="Data API to update.")
@click.pass_obj
def allowed_origin_remove(state: CliState, origin, instance_id, data_api_id):
    """Stop allowing an origin."""
    _change_allowed_origins(
        state, instance_id, data_api_id, lambda data: remove_allowed_origin(data, origin)
    )


# ====================================================================
# GRAPH ANALYTICS
# ====================================================================

@cli.group('graph-analytics')
def graph_analytics():
    """Relates to Aura Graph Analytics."""


@graph_analytics.group()
def session():
    """Manage graph analytics sessions."""


@session.command('list')
@click.option('--tenant-id', default=None, help="Only list sessions of this tenant.")
@click.option('--instance-id', default=None, help="Only list sessions attached to this instance.")
@click.pass_obj
def session_list(state: CliState, tenant_id, instance_id):
    """Return a summary of each session."""
    data, status_code = GraphAnalyticsSessionsApi(state.gateway).list(tenant_id, instance_id)
    if status_code == HTTP_OK:
        state.render(data, SESSION_LIST_FIELDS)


@session.command('get')
@click.argument('session_id')
@click.pass_obj
def session_get(state: CliState, session_id):
    """Return session details."""
    data, status_code = GraphAnalyticsSessionsApi(state.gateway).get(session_id)
    if status_code == HTTP_OK:
        state.render(data, SESSION_GET_FIELDS)


@session.command('create')
@click.option('--name', required=True, help="Name of the session.")
@click.option('--memory', required=True, help="Session memory, e.g. 8GB.")
@click.option('--tenant-id', default=None, help="Tenant of the session (defaults to AURA_DEFAULT_TENANT).")
@click.option('--instance-id', default=None, help="Instance to attach the session to.")
@click.option('--cloud-location', default=None, help="Cloud location of a standalone session.")
@click.option('--ttl', default=None, help="Idle time before the session is deleted, e.g. 1h.")
@await_options
@click.pass_obj
def session_create(state: CliState, name, memory, tenant_id, instance_id, cloud_location, ttl,
                   await_, poll_interval, poll_max_attempts):
    """Create a graph analytics session."""
    try:
        body = build_session_create_body(
            name=name,
            memory=memory,
            tenant_id=tenant_id or state.config.default_tenant,
            instance_id=instance_id,
            cloud_location=cloud_location,
            ttl=ttl
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    api = GraphAnalyticsSessionsApi(state.gateway)
    data, status_code = api.create(body)
    if status_code not in (HTTP_ACCEPTED, HTTP_OK):
        return
    state.render(data, SESSION_GET_FIELDS)

    if await_:
        session_id = _resource_id(data, 'id', status_code)
        state.await_status(
            lambda: api.get(session_id)[0],
            GRAPH_ANALYTICS_SESSION_RULES,
            _data_field(data, 'status') or SESSION_STATUS_CREATING,
            "Session",
            poll_interval,
            poll_max_attempts
        )


@session.command('delete')
@click.argument('session_id')
@click.pass_obj
def session_delete(state: CliState, session_id):
    """Delete a graph analytics session."""
    data, status_code = GraphAnalyticsSessionsApi(state.gateway).delete(session_id)
    if status_code in (HTTP_ACCEPTED, HTTP_OK) and data is not None:
        state.render(data, SESSION_GET_FIELDS)


def main():
    """Console script entry point."""
    cli(prog_name="aura-cli")

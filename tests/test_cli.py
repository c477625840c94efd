"""Tests for the command-line interface."""

import base64
import json
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from aura_cli import __version__
from aura_cli.cli import cli
from aura_cli.exceptions import RemoteError, TransportError


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def mock_gateway(mock_env):
    """Patch the gateway used by commands and return the instance commands talk to."""
    with patch('aura_cli.cli.ResourceGateway') as gateway_cls:
        yield gateway_cls.return_value


def _json_block(output):
    """Parse the leading JSON document of command output."""
    decoder = json.JSONDecoder()
    document, _end = decoder.raw_decode(output.lstrip())
    return document


class TestRootCommand:
    """Tests for root options and configuration commands."""

    def test_version(self, runner):
        """Test --version prints the client version."""
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_list_masks_secrets(self, runner, mock_env):
        """Test that config list never prints the client secret."""
        result = runner.invoke(cli, ['config', 'list'])

        assert result.exit_code == 0
        config = json.loads(result.output)
        assert config['client-secret'] == '***MASKED***'
        assert config['base-url'] == 'https://api.test.io/v1'
        assert 'test-client-secret' not in result.output

    def test_invalid_output_env(self, runner, mock_env):
        """Test that an invalid AURA_OUTPUT is a configuration error."""
        result = runner.invoke(cli, ['config', 'list'], env={'AURA_OUTPUT': 'yaml'})

        assert result.exit_code == 1
        assert "invalid output value specified: yaml" in result.output

    def test_missing_credentials(self, runner, clean_env):
        """Test that commands fail with exit code 1 when no credentials are set."""
        result = runner.invoke(cli, ['instance', 'list'])

        assert result.exit_code == 1
        assert "No credentials configured" in result.output


class TestInstanceCommands:
    """Tests for instance commands."""

    def test_list_projects_fields(self, runner, mock_gateway):
        """Test that list prints projected instances in order."""
        mock_gateway.get.return_value = ([
            {'id': 'abc', 'name': 'db', 'tenant_id': 't1', 'cloud_provider': 'gcp', 'region': 'x'},
        ], 200)

        result = runner.invoke(cli, ['instance', 'list', '--tenant-id', 't1'])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            'data': [{'id': 'abc', 'name': 'db', 'tenant_id': 't1', 'cloud_provider': 'gcp'}]
        }
        mock_gateway.get.assert_called_once_with('/instances', query={'tenantId': 't1'})

    def test_list_table_output(self, runner, mock_gateway):
        """Test table output selected on the command line."""
        mock_gateway.get.return_value = ([{'id': 'abc', 'name': 'db'}], 200)

        result = runner.invoke(cli, ['--output', 'table', 'instance', 'list'])

        assert result.exit_code == 0
        assert 'abc' in result.output
        assert 'cloud_provider' in result.output

    def test_get_adds_metrics_url(self, runner, mock_gateway):
        """Test that the metrics integration URL is shown when present."""
        mock_gateway.get.return_value = (
            {'id': 'abc', 'name': 'db', 'metrics_integration_url': 'https://metrics.test.io'}, 200
        )

        result = runner.invoke(cli, ['instance', 'get', 'abc'])

        assert result.exit_code == 0
        assert json.loads(result.output)['data']['metrics_integration_url'] == 'https://metrics.test.io'

    def test_remote_error_messages(self, runner, mock_gateway):
        """Test that all remote messages reach the user and exit code is 1."""
        mock_gateway.get.side_effect = RemoteError(404, ['A', 'B'])

        result = runner.invoke(cli, ['instance', 'get', 'abc'])

        assert result.exit_code == 1
        assert "Error: A; B" in result.output

    def test_transport_error(self, runner, mock_gateway):
        """Test that transport failures are reported with exit code 1."""
        mock_gateway.get.side_effect = TransportError('GET', 'https://api.test.io/v1/instances', 'refused')

        result = runner.invoke(cli, ['instance', 'list'])

        assert result.exit_code == 1
        assert "refused" in result.output

    def test_create_free_db_uses_default_tenant(self, runner, mock_gateway):
        """Test that create sends the free tier body for the default tenant."""
        mock_gateway.post.return_value = ({'id': 'abc', 'name': 'db', 'status': 'creating'}, 202)

        result = runner.invoke(cli, ['instance', 'create', '--name', 'db', '--type', 'free-db'])

        assert result.exit_code == 0
        _args, kwargs = mock_gateway.post.call_args
        assert kwargs['body']['tenant_id'] == 'tenant-1'
        assert kwargs['body']['memory'] == '1GB'
        assert _json_block(result.output)['data']['id'] == 'abc'

    def test_create_free_db_rejects_memory(self, runner, mock_gateway):
        """Test that invalid create options are usage errors sent nowhere."""
        result = runner.invoke(
            cli, ['instance', 'create', '--name', 'db', '--type', 'free-db', '--memory', '8GB']
        )

        assert result.exit_code == 2
        mock_gateway.post.assert_not_called()

    def test_create_await_until_running(self, runner, mock_gateway):
        """Test that --await polls until the instance is running."""
        mock_gateway.post.return_value = ({'id': 'abc', 'status': 'creating'}, 202)
        mock_gateway.get.side_effect = [
            ({'id': 'abc', 'status': 'creating'}, 200),
            ({'id': 'abc', 'status': 'running'}, 200),
        ]

        result = runner.invoke(cli, [
            'instance', 'create', '--name', 'db', '--type', 'free-db',
            '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 0
        assert "Waiting for instance to be ready..." in result.output
        assert "Instance Status: running" in result.output
        assert mock_gateway.get.call_count == 2
        mock_gateway.get.assert_called_with('/instances/abc')

    def test_create_await_failure(self, runner, mock_gateway):
        """Test that a failure status ends the command with exit code 1."""
        mock_gateway.post.return_value = ({'id': 'abc', 'status': 'creating'}, 202)
        mock_gateway.get.return_value = ({'id': 'abc', 'status': 'loading failed'}, 200)

        result = runner.invoke(cli, [
            'instance', 'create', '--name', 'db', '--type', 'free-db',
            '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 1
        assert "loading failed" in result.output

    def test_create_await_timeout(self, runner, mock_gateway):
        """Test that the attempt bound from the command line is honored."""
        mock_gateway.post.return_value = ({'id': 'abc', 'status': 'creating'}, 202)
        mock_gateway.get.return_value = ({'id': 'abc', 'status': 'creating'}, 200)

        result = runner.invoke(cli, [
            'instance', 'create', '--name', 'db', '--type', 'free-db',
            '--await', '--poll-interval', '0', '--poll-max-attempts', '2'
        ])

        assert result.exit_code == 1
        assert "Gave up waiting after 2 attempts" in result.output
        assert mock_gateway.get.call_count == 2

    def test_update_requires_a_change(self, runner, mock_gateway):
        """Test that update without flags is a usage error."""
        result = runner.invoke(cli, ['instance', 'update', 'abc'])

        assert result.exit_code == 2
        mock_gateway.patch.assert_not_called()

    def test_pause_await_already_paused(self, runner, mock_gateway):
        """Test that no polling happens when the returned status is terminal."""
        mock_gateway.post.return_value = ({'id': 'abc', 'status': 'paused'}, 202)

        result = runner.invoke(cli, ['instance', 'pause', 'abc', '--await'])

        assert result.exit_code == 0
        assert "Instance Status: paused" in result.output
        mock_gateway.get.assert_not_called()


class TestAwaitGuards:
    """Tests for poll settings and identifiers used by --await."""

    @pytest.mark.parametrize("value", ['nan', 'inf'])
    def test_non_finite_poll_interval_flag(self, runner, mock_gateway, value):
        """Test that a non-finite --poll-interval is a usage error."""
        result = runner.invoke(cli, [
            'instance', 'create', '--name', 'db', '--type', 'free-db',
            '--await', '--poll-interval', value
        ])

        assert result.exit_code == 2
        assert "not a finite number" in result.output
        mock_gateway.post.assert_not_called()

    @pytest.mark.parametrize("value", ['nan', 'inf'])
    def test_non_finite_poll_interval_env(self, runner, mock_gateway, value):
        """Test that a non-finite AURA_POLL_INTERVAL ends the command with exit code 1."""
        result = runner.invoke(
            cli,
            ['instance', 'create', '--name', 'db', '--type', 'free-db', '--await'],
            env={'AURA_POLL_INTERVAL': value}
        )

        assert result.exit_code == 1
        assert "finite" in result.output
        assert isinstance(result.exception, SystemExit)
        mock_gateway.post.assert_not_called()

    def test_create_without_id_is_not_polled(self, runner, mock_gateway):
        """Test that a create response without an id fails instead of polling."""
        mock_gateway.post.return_value = ({'name': 'db', 'status': 'creating'}, 202)

        result = runner.invoke(cli, [
            'instance', 'create', '--name', 'db', '--type', 'free-db',
            '--await', '--poll-interval', '0', '--poll-max-attempts', '2'
        ])

        assert result.exit_code == 1
        assert "response has no 'id'" in result.output
        mock_gateway.get.assert_not_called()

    def test_snapshot_create_without_id_is_not_polled(self, runner, mock_gateway):
        """Test that a snapshot response without snapshot_id fails instead of polling."""
        mock_gateway.post.return_value = ({}, 202)

        result = runner.invoke(cli, [
            'instance', 'snapshot', 'create', '--instance-id', 'abc', '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 1
        assert "response has no 'snapshot_id'" in result.output
        mock_gateway.get.assert_not_called()


class TestOtherCommands:
    """Tests for snapshot, tenant and customer managed key commands."""

    def test_snapshot_restore_only_on_accepted(self, runner, mock_gateway):
        """Test that restore prints nothing unless the API answers 202."""
        mock_gateway.post.return_value = ({'id': 'abc', 'status': 'restoring'}, 200)

        result = runner.invoke(cli, ['instance', 'snapshot', 'restore', 's1', '--instance-id', 'abc'])

        assert result.exit_code == 0
        assert result.output == ''

    def test_snapshot_create_await(self, runner, mock_gateway):
        """Test that snapshot creation is awaited until completed."""
        mock_gateway.post.return_value = ({'snapshot_id': 's1'}, 202)
        mock_gateway.get.side_effect = [
            ({'snapshot_id': 's1', 'status': 'in progress'}, 200),
            ({'snapshot_id': 's1', 'status': 'completed'}, 200),
        ]

        result = runner.invoke(cli, [
            'instance', 'snapshot', 'create', '--instance-id', 'abc', '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 0
        assert "Snapshot Status: completed" in result.output
        mock_gateway.get.assert_called_with('/instances/abc/snapshots/s1')

    def test_tenant_get(self, runner, mock_gateway):
        """Test tenant details projection."""
        mock_gateway.get.return_value = (
            {'id': 't1', 'name': 'Team', 'instance_configurations': [], 'extra': True}, 200
        )

        result = runner.invoke(cli, ['tenant', 'get', 't1'])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            'data': {'id': 't1', 'name': 'Team', 'instance_configurations': []}
        }

    def test_cmk_create_requires_tenant(self, runner, mock_gateway):
        """Test that a customer managed key needs a tenant."""
        result = runner.invoke(cli, [
            'customer-managed-key', 'create', '--name', 'k', '--key-id', 'arn:key',
            '--region', 'us-east-1', '--instance-type', 'enterprise-db', '--cloud-provider', 'aws'
        ], env={'AURA_DEFAULT_TENANT': None})

        assert result.exit_code == 2
        mock_gateway.post.assert_not_called()


class TestDataApiCommands:
    """Tests for GraphQL Data API commands."""

    def test_create_encodes_type_definitions_file(self, runner, mock_gateway):
        """Test that a type definitions file is sent base64 encoded."""
        mock_gateway.post.return_value = ({'id': 'd1', 'name': 'api', 'status': 'creating'}, 202)

        with runner.isolated_filesystem():
            with open('schema.graphql', 'w') as f:
                f.write('type Movie { title: String }')
            result = runner.invoke(cli, [
                'data-api', 'graphql', 'create', '--instance-id', 'abc', '--name', 'api',
                '--type-definitions-file', 'schema.graphql',
                '--instance-username', 'neo4j', '--instance-password', 'pw'
            ])

        assert result.exit_code == 0
        args, kwargs = mock_gateway.post.call_args
        assert args[0] == '/instances/abc/data-apis/graphql'
        assert kwargs['body'] == {
            'name': 'api',
            'type_definitions': base64.b64encode(b'type Movie { title: String }').decode('ascii'),
            'aura_instance': {'username': 'neo4j', 'password': 'pw'},
        }

    def test_create_requires_type_definitions(self, runner, mock_gateway):
        """Test that type definitions are required."""
        result = runner.invoke(cli, [
            'data-api', 'graphql', 'create', '--instance-id', 'abc', '--name', 'api',
            '--instance-username', 'neo4j', '--instance-password', 'pw'
        ])

        assert result.exit_code == 2
        mock_gateway.post.assert_not_called()

    def test_create_await_until_ready(self, runner, mock_gateway):
        """Test that --await polls the Data API until ready."""
        mock_gateway.post.return_value = ({'id': 'd1', 'status': 'creating'}, 202)
        mock_gateway.get.side_effect = [
            ({'id': 'd1', 'status': 'creating'}, 200),
            ({'id': 'd1', 'status': 'ready'}, 200),
        ]

        result = runner.invoke(cli, [
            'data-api', 'graphql', 'create', '--instance-id', 'abc', '--name', 'api',
            '--type-definitions', 'dHlwZQ==', '--instance-username', 'neo4j',
            '--instance-password', 'pw', '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 0
        assert "Data API Status: ready" in result.output
        mock_gateway.get.assert_called_with('/instances/abc/data-apis/graphql/d1')

    def test_remove_allowed_origin(self, runner, mock_gateway):
        """Test that removing an origin patches the remaining ones."""
        mock_gateway.get.return_value = ({
            'id': 'd1', 'name': 'api', 'status': 'ready', 'url': 'https://d1.graphql.test.io/graphql',
            'security': {'cors_policy': {'allowed_origins': ['https://a.com', 'https://b.com', 'https://c.com']}},
        }, 200)
        mock_gateway.patch.return_value = ({
            'id': 'd1', 'name': 'api', 'status': 'ready', 'url': 'https://d1.graphql.test.io/graphql',
            'security': {'cors_policy': {'allowed_origins': ['https://a.com', 'https://b.com']}},
        }, 202)

        result = runner.invoke(cli, [
            'data-api', 'graphql', 'cors-policy', 'allowed-origin', 'remove', 'https://c.com',
            '--instance-id', 'abc', '--data-api-id', 'd1'
        ])

        assert result.exit_code == 0
        mock_gateway.patch.assert_called_once_with(
            '/instances/abc/data-apis/graphql/d1',
            body={'security': {'cors_policy': {'allowed_origins': ['https://a.com', 'https://b.com']}}}
        )
        first_line, rest = result.output.split('\n', 1)
        assert first_line == 'New allowed origins: ["https://a.com", "https://b.com"]'
        assert json.loads(rest) == {'data': {
            'id': 'd1', 'name': 'api', 'status': 'ready', 'url': 'https://d1.graphql.test.io/graphql'
        }}

    def test_remove_unknown_origin(self, runner, mock_gateway):
        """Test that removing an origin that is not allowed fails without patching."""
        mock_gateway.get.return_value = (
            {'id': 'd1', 'security': {'cors_policy': {'allowed_origins': []}}}, 200
        )

        result = runner.invoke(cli, [
            'data-api', 'graphql', 'cors-policy', 'allowed-origin', 'remove', 'https://c.com',
            '--instance-id', 'abc', '--data-api-id', 'd1'
        ])

        assert result.exit_code == 1
        assert 'Error: Origin "https://c.com" not found in allowed origins' in result.output
        mock_gateway.patch.assert_not_called()

    def test_allowed_origin_requires_ids(self, runner, mock_gateway):
        """Test that instance and Data API ids are required."""
        result = runner.invoke(cli, [
            'data-api', 'graphql', 'cors-policy', 'allowed-origin', 'add', 'https://c.com'
        ])

        assert result.exit_code == 2
        mock_gateway.get.assert_not_called()

    def test_auth_provider_update(self, runner, mock_gateway):
        """Test that an authentication provider can be disabled."""
        mock_gateway.patch.return_value = ({'id': 'p1', 'name': 'key', 'type': 'api-key', 'enabled': False}, 200)

        result = runner.invoke(cli, [
            'data-api', 'graphql', 'auth-provider', 'update', 'p1',
            '--instance-id', 'abc', '--data-api-id', 'd1', '--enabled', 'false'
        ])

        assert result.exit_code == 0
        mock_gateway.patch.assert_called_once_with(
            '/instances/abc/data-apis/graphql/d1/auth-providers/p1', body={'enabled': False}
        )
        assert json.loads(result.output)['data']['enabled'] is False

    def test_auth_provider_update_requires_a_change(self, runner, mock_gateway):
        """Test that update without values is a usage error."""
        result = runner.invoke(cli, [
            'data-api', 'graphql', 'auth-provider', 'update', 'p1',
            '--instance-id', 'abc', '--data-api-id', 'd1'
        ])

        assert result.exit_code == 2
        mock_gateway.patch.assert_not_called()


class TestGraphAnalyticsCommands:
    """Tests for graph analytics session commands."""

    def test_create_attached_session(self, runner, mock_gateway):
        """Test creating a session attached to an instance for the default tenant."""
        mock_gateway.post.return_value = ({'id': 's1', 'name': 'gds', 'status': 'Creating'}, 202)

        result = runner.invoke(cli, [
            'graph-analytics', 'session', 'create', '--name', 'gds', '--memory', '8GB',
            '--instance-id', 'abc'
        ])

        assert result.exit_code == 0
        mock_gateway.post.assert_called_once_with('/graph-analytics/sessions', body={
            'name': 'gds', 'memory': '8GB', 'tenant_id': 'tenant-1', 'instance_id': 'abc'
        })

    def test_create_requires_placement(self, runner, mock_gateway):
        """Test that a session needs an instance or a cloud location."""
        result = runner.invoke(cli, [
            'graph-analytics', 'session', 'create', '--name', 'gds', '--memory', '8GB'
        ])

        assert result.exit_code == 2
        mock_gateway.post.assert_not_called()

    def test_create_await_failure(self, runner, mock_gateway):
        """Test that a failed session ends the command with exit code 1."""
        mock_gateway.post.return_value = ({'id': 's1', 'status': 'Creating'}, 202)
        mock_gateway.get.return_value = ({'id': 's1', 'status': 'Failed'}, 200)

        result = runner.invoke(cli, [
            'graph-analytics', 'session', 'create', '--name', 'gds', '--memory', '8GB',
            '--cloud-location', 'gcp-europe-west1', '--await', '--poll-interval', '0'
        ])

        assert result.exit_code == 1
        assert "Operation failed with status 'Failed'" in result.output
        mock_gateway.get.assert_called_with('/graph-analytics/sessions/s1')

    def test_list_filters(self, runner, mock_gateway):
        """Test listing sessions of an instance."""
        mock_gateway.get.return_value = ([{'id': 's1', 'name': 'gds', 'host': 'x'}], 200)

        result = runner.invoke(cli, ['graph-analytics', 'session', 'list', '--instance-id', 'abc'])

        assert result.exit_code == 0
        mock_gateway.get.assert_called_once_with('/graph-analytics/sessions', query=[('instanceId', 'abc')])
        assert json.loads(result.output) == {'data': [{'id': 's1', 'name': 'gds'}]}

"""
Basic usage example for the Aura CLI library.

This example creates a free instance and waits until it is running.
Credentials are read from AURA_CLIENT_ID / AURA_CLIENT_SECRET (or AURA_TOKEN).
"""

from aura_cli import (
    AuraConfig,
    AuraError,
    InstancesApi,
    ResourceGateway,
    build_instance_create_body,
    poll_instance
)


def main():
    """Create a free instance and wait for it."""

    config = AuraConfig()
    instances = InstancesApi(ResourceGateway(config))

    body = build_instance_create_body(
        name="example-instance",
        instance_type="free-db",
        tenant_id=config.default_tenant
    )

    print("Creating instance...")
    try:
        created, _status_code = instances.create(body)
        print(f"Instance {created['id']} accepted, status: {created['status']}")

        instance = poll_instance(
            instances,
            created['id'],
            config.poll_policy,
            on_status=lambda status, attempt: print(f"  [{attempt}] {status}")
        )
    except AuraError as e:
        print(f"\nFailed: {e}")
        return

    print("\n" + "=" * 60)
    print("Instance Ready")
    print("=" * 60)
    print(f"ID: {instance['id']}")
    print(f"Connection URL: {instance.get('connection_url', '')}")


if __name__ == "__main__":
    main()

"""
Constants for the Aura CLI.

Centralizes default endpoints, polling defaults, status values and the field
lists each command projects for display.
"""

# API Endpoints
DEFAULT_AURA_BASE_URL = "https://api.neo4j.io/v1"
DEFAULT_AURA_BETA_BASE_URL = "https://api.neo4j.io/v1beta5"
DEFAULT_AURA_AUTH_URL = "https://api.neo4j.io/oauth/token"

# Polling (interval in seconds)
DEFAULT_POLL_INTERVAL = 20
DEFAULT_POLL_MAX_ATTEMPTS = 60

# HTTP Headers
AUTHORIZATION_BEARER_PREFIX = "Bearer"
CONTENT_TYPE_JSON = "application/json"
USER_AGENT_PRODUCT = "aura-cli"

# Output modes
OUTPUT_DEFAULT = "default"
OUTPUT_JSON = "json"
OUTPUT_TABLE = "table"
VALID_OUTPUT_VALUES = (OUTPUT_DEFAULT, OUTPUT_JSON, OUTPUT_TABLE)

# Instance Status Values
INSTANCE_STATUS_CREATING = "creating"
INSTANCE_STATUS_RUNNING = "running"
INSTANCE_STATUS_PAUSING = "pausing"
INSTANCE_STATUS_PAUSED = "paused"
INSTANCE_STATUS_RESUMING = "resuming"
INSTANCE_STATUS_RESTORING = "restoring"
INSTANCE_STATUS_UPDATING = "updating"
INSTANCE_STATUS_OVERWRITING = "overwriting"
INSTANCE_STATUS_LOADING = "loading"
INSTANCE_STATUS_LOADING_FAILED = "loading failed"
INSTANCE_STATUS_DESTROYING = "destroying"

# Snapshot Status Values
SNAPSHOT_STATUS_PENDING = "pending"
SNAPSHOT_STATUS_IN_PROGRESS = "in progress"
SNAPSHOT_STATUS_COMPLETED = "completed"
SNAPSHOT_STATUS_FAILED = "failed"

# Customer Managed Key Status Values
CMK_STATUS_PENDING = "pending"
CMK_STATUS_READY = "ready"
CMK_STATUS_ERROR = "error"

# Data API statuses
DATA_API_STATUS_CREATING = "creating"
DATA_API_STATUS_READY = "ready"
DATA_API_STATUS_UPDATING = "updating"
DATA_API_STATUS_PAUSING = "pausing"
DATA_API_STATUS_PAUSED = "paused"
DATA_API_STATUS_RESUMING = "resuming"
DATA_API_STATUS_ERROR = "error"

# Graph analytics session statuses
SESSION_STATUS_CREATING = "Creating"
SESSION_STATUS_READY = "Ready"
SESSION_STATUS_FAILED = "Failed"

# Free tier defaults applied on instance creation
FREE_DB_TYPE = "free-db"
FREE_DB_DEFAULTS = {
    "memory": "1GB",
    "region": "europe-west1",
    "cloud_provider": "gcp",
    "version": "5",
}

# Fields projected for display
INSTANCE_LIST_FIELDS = ["id", "name", "tenant_id", "cloud_provider"]
INSTANCE_GET_FIELDS = [
    "id", "name", "tenant_id", "status", "connection_url", "cloud_provider",
    "region", "type", "memory", "storage", "customer_managed_key_id",
]
INSTANCE_CREATE_FIELDS = [
    "id", "name", "tenant_id", "connection_url", "username", "password",
    "cloud_provider", "region", "type",
]
INSTANCE_UPDATE_FIELDS = [
    "id", "name", "tenant_id", "status", "connection_url", "cloud_provider",
    "region", "type", "memory",
]
SNAPSHOT_FIELDS = ["snapshot_id", "instance_id", "status", "timestamp", "profile"]
TENANT_LIST_FIELDS = ["id", "name"]
TENANT_GET_FIELDS = ["id", "name", "instance_configurations"]
CMK_LIST_FIELDS = ["id", "name", "tenant_id"]
CMK_GET_FIELDS = [
    "id", "name", "tenant_id", "status", "created", "cloud_provider",
    "key_id", "region", "type",
]
DATA_API_FIELDS = ["id", "name", "status", "url"]
DATA_API_CREATE_FIELDS = ["id", "name", "status", "url", "authentication_providers"]
AUTH_PROVIDER_FIELDS = ["id", "name", "type", "enabled", "url"]
SESSION_LIST_FIELDS = ["id", "name", "status", "memory", "instance_id", "tenant_id", "expiry_date"]
SESSION_GET_FIELDS = [
    "id", "name", "status", "memory", "instance_id", "tenant_id", "cloud_location",
    "host", "expiry_date", "created_at", "ttl",
]

# Secret masking
MASKED_VALUE = "***MASKED***"

"""
Asynchronous Operation Tracker

Polls a resource until its ``status`` field reaches a terminal value or the
poll policy's attempt budget runs out. Fetches are strictly sequential.
Errors raised by the fetch function propagate immediately and are never
counted as a pending attempt.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional

from .config import PollPolicy
from .constants import (
    CMK_STATUS_ERROR,
    CMK_STATUS_PENDING,
    CMK_STATUS_READY,
    DATA_API_STATUS_CREATING,
    DATA_API_STATUS_ERROR,
    DATA_API_STATUS_PAUSED,
    DATA_API_STATUS_PAUSING,
    DATA_API_STATUS_READY,
    DATA_API_STATUS_RESUMING,
    DATA_API_STATUS_UPDATING,
    INSTANCE_STATUS_CREATING,
    INSTANCE_STATUS_LOADING,
    INSTANCE_STATUS_LOADING_FAILED,
    INSTANCE_STATUS_OVERWRITING,
    INSTANCE_STATUS_PAUSED,
    INSTANCE_STATUS_PAUSING,
    INSTANCE_STATUS_RESTORING,
    INSTANCE_STATUS_RESUMING,
    INSTANCE_STATUS_RUNNING,
    INSTANCE_STATUS_UPDATING,
    SESSION_STATUS_CREATING,
    SESSION_STATUS_FAILED,
    SESSION_STATUS_READY,
    SNAPSHOT_STATUS_COMPLETED,
    SNAPSHOT_STATUS_FAILED,
    SNAPSHOT_STATUS_IN_PROGRESS,
    SNAPSHOT_STATUS_PENDING,
)
from .exceptions import OperationFailed, PollTimeout

logger = logging.getLogger(__name__)


class OperationState(Enum):
    """State of a tracked operation."""
    PENDING = "pending"
    TERMINAL_SUCCESS = "terminal_success"
    TERMINAL_FAILURE = "terminal_failure"


@dataclass(frozen=True)
class StatusRules:
    """
    Status values of one resource kind.

    ``pending`` only decides whether polling is started at all. Once started,
    any status that is neither a success nor a failure value is treated as
    still pending.
    """
    pending: FrozenSet[str]
    success: FrozenSet[str]
    failure: FrozenSet[str] = field(default_factory=frozenset)

    def classify(self, status: Optional[str]) -> OperationState:
        if status in self.success:
            return OperationState.TERMINAL_SUCCESS
        if status in self.failure:
            return OperationState.TERMINAL_FAILURE
        return OperationState.PENDING

    def needs_polling(self, starting_status: Optional[str]) -> bool:
        """Whether a resource returned with this status should be awaited."""
        return starting_status in self.pending


INSTANCE_RUNNING_RULES = StatusRules(
    pending=frozenset({
        INSTANCE_STATUS_CREATING,
        INSTANCE_STATUS_RESUMING,
        INSTANCE_STATUS_RESTORING,
        INSTANCE_STATUS_UPDATING,
        INSTANCE_STATUS_OVERWRITING,
        INSTANCE_STATUS_LOADING,
    }),
    success=frozenset({INSTANCE_STATUS_RUNNING}),
    failure=frozenset({INSTANCE_STATUS_LOADING_FAILED})
)

INSTANCE_PAUSED_RULES = StatusRules(
    pending=frozenset({INSTANCE_STATUS_PAUSING}),
    success=frozenset({INSTANCE_STATUS_PAUSED})
)

SNAPSHOT_RULES = StatusRules(
    pending=frozenset({SNAPSHOT_STATUS_PENDING, SNAPSHOT_STATUS_IN_PROGRESS}),
    success=frozenset({SNAPSHOT_STATUS_COMPLETED}),
    failure=frozenset({SNAPSHOT_STATUS_FAILED})
)

CUSTOMER_MANAGED_KEY_RULES = StatusRules(
    pending=frozenset({CMK_STATUS_PENDING}),
    success=frozenset({CMK_STATUS_READY}),
    failure=frozenset({CMK_STATUS_ERROR})
)

DATA_API_READY_RULES = StatusRules(
    pending=frozenset({
        DATA_API_STATUS_CREATING,
        DATA_API_STATUS_UPDATING,
        DATA_API_STATUS_RESUMING,
    }),
    success=frozenset({DATA_API_STATUS_READY}),
    failure=frozenset({DATA_API_STATUS_ERROR})
)

DATA_API_PAUSED_RULES = StatusRules(
    pending=frozenset({DATA_API_STATUS_PAUSING}),
    success=frozenset({DATA_API_STATUS_PAUSED}),
    failure=frozenset({DATA_API_STATUS_ERROR})
)

GRAPH_ANALYTICS_SESSION_RULES = StatusRules(
    pending=frozenset({SESSION_STATUS_CREATING}),
    success=frozenset({SESSION_STATUS_READY}),
    failure=frozenset({SESSION_STATUS_FAILED})
)


def extract_status(resource: Any) -> Optional[str]:
    """Read the status field of a decoded resource, if any."""
    if isinstance(resource, dict):
        return resource.get('status')
    return None


class OperationTracker:
    """
    Bounded poller for long-running operations.

    Args:
        fetch: Returns the current resource (usually a gateway GET)
        rules: Status values of the resource kind
        policy: Interval and attempt bound
        sleep: Called with the interval between fetches (injectable for tests)
        on_status: Called with (status, attempt) whenever the observed status changes
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        rules: StatusRules,
        policy: PollPolicy,
        sleep: Callable[[float], None] = time.sleep,
        on_status: Optional[Callable[[Optional[str], int], None]] = None
    ):
        self.fetch = fetch
        self.rules = rules
        self.policy = policy
        self.sleep = sleep
        self.on_status = on_status

        self.attempts = 0
        self.last_status: Optional[str] = None
        self.state = OperationState.PENDING

    def track(self) -> Dict[str, Any]:
        """
        Poll until a terminal status.

        Returns:
            The resource as last fetched, once its status is a success value

        Raises:
            OperationFailed: A failure status was observed
            PollTimeout: max_attempts fetches returned non-terminal statuses
        """
        self.attempts = 0
        self.last_status = None
        self.state = OperationState.PENDING

        while True:
            resource = self.fetch()
            self.attempts += 1
            status = extract_status(resource)

            if self.attempts == 1 or status != self.last_status:
                logger.debug("Attempt %d/%d: status %r", self.attempts, self.policy.max_attempts, status)
                if self.on_status:
                    self.on_status(status, self.attempts)
            self.last_status = status

            self.state = self.rules.classify(status)
            if self.state is OperationState.TERMINAL_SUCCESS:
                return resource
            if self.state is OperationState.TERMINAL_FAILURE:
                raise OperationFailed(status, resource)

            if self.attempts >= self.policy.max_attempts:
                raise PollTimeout(status, self.attempts)

            self.sleep(self.policy.interval)


def poll_instance(
    instances_api,
    instance_id: str,
    policy: PollPolicy,
    rules: StatusRules = INSTANCE_RUNNING_RULES,
    sleep: Callable[[float], None] = time.sleep,
    on_status: Optional[Callable[[Optional[str], int], None]] = None
) -> Dict[str, Any]:
    """
    Wait for an instance to reach a terminal status.

    Args:
        instances_api: An InstancesApi (anything with ``get(instance_id)``)
        instance_id: Instance to poll
        policy: Poll policy
        rules: Status rules (running by default, INSTANCE_PAUSED_RULES for pause)

    Returns:
        Final instance resource
    """
    def fetch():
        data, _status_code = instances_api.get(instance_id)
        return data

    tracker = OperationTracker(fetch, rules, policy, sleep=sleep, on_status=on_status)
    return tracker.track()

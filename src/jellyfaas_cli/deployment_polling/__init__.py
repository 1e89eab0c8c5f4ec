"""Deployment polling exports."""

from .deployment_poller import (
    DeploymentPoller,
    StatusClient,
    all_complete,
    build_operation_handles,
    mark_status,
    pending_handles,
)
from .polling_outcomes import (
    DEPLOYED_STATUS,
    HandleSnapshot,
    OperationHandle,
    PollOutcome,
    PollProgress,
    PollSessionResult,
)

__all__ = [
    "DEPLOYED_STATUS",
    "DeploymentPoller",
    "HandleSnapshot",
    "OperationHandle",
    "PollOutcome",
    "PollProgress",
    "PollSessionResult",
    "StatusClient",
    "all_complete",
    "build_operation_handles",
    "mark_status",
    "pending_handles",
]

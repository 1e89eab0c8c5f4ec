"""Deploy execution exports."""

from .deploy_contracts import DeployOutcome, DeployRequest
from .deploy_use_case import DeployExecutionError, execute_deploy

__all__ = [
    "DeployRequest",
    "DeployOutcome",
    "DeployExecutionError",
    "execute_deploy",
]

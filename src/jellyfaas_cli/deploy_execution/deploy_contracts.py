"""Deploy execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jellyfaas_cli.deployment_polling.polling_outcomes import PollSessionResult
from jellyfaas_cli.platform_api.api_models import DeployedFunction


@dataclass(frozen=True)
class DeployRequest:
    """Input contract for one deployment."""

    archive_path: Path
    wait: bool = False


@dataclass(frozen=True)
class DeployOutcome:
    """Output contract for one deployment."""

    function_name: str
    deployed: DeployedFunction
    poll_result: PollSessionResult | None = None

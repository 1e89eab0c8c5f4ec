"""Deployment polling domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEPLOYED_STATUS = "DEPLOYED"


class PollOutcome(str, Enum):
    """Terminal outcome of one polling session."""

    SUCCEEDED = "succeeded"
    ABORTED = "aborted"
    EXHAUSTED = "exhausted"


@dataclass
class OperationHandle:
    """One deployment operation under observation."""

    operation_id: str
    function_id: str
    poll_url: str
    complete: bool = False


@dataclass(frozen=True)
class PollProgress:
    """Progress report for an operation that is not deployed yet."""

    round_number: int
    max_rounds: int
    operation_id: str
    status: str


@dataclass(frozen=True)
class HandleSnapshot:
    operation_id: str
    complete: bool


@dataclass(frozen=True)
class PollSessionResult:
    """Outcome of waiting for a set of deployment operations."""

    outcome: PollOutcome
    rounds: int
    handles: tuple[HandleSnapshot, ...]
    reason: str | None = None

    @property
    def is_success(self) -> bool:
        return self.outcome == PollOutcome.SUCCEEDED

    @staticmethod
    def succeeded(rounds: int, handles: tuple[HandleSnapshot, ...]) -> PollSessionResult:
        return PollSessionResult(outcome=PollOutcome.SUCCEEDED, rounds=rounds, handles=handles)

    @staticmethod
    def aborted(
        rounds: int, handles: tuple[HandleSnapshot, ...], error: Exception
    ) -> PollSessionResult:
        return PollSessionResult(
            outcome=PollOutcome.ABORTED, rounds=rounds, handles=handles, reason=str(error)
        )

    @staticmethod
    def exhausted(rounds: int, handles: tuple[HandleSnapshot, ...]) -> PollSessionResult:
        pending = [handle.operation_id for handle in handles if not handle.complete]
        return PollSessionResult(
            outcome=PollOutcome.EXHAUSTED,
            rounds=rounds,
            handles=handles,
            reason=f"Operations still pending after {rounds} rounds: {', '.join(pending)}",
        )

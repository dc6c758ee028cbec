"""
Saga types: steps, chains, outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable
from enum import Enum

from medicart._types import Call, Compensator

# ═══════════════════════════════════════════════════════════════════════════════
# Compensation Policy
# ═══════════════════════════════════════════════════════════════════════════════


class Compensation(str, Enum):
    """What happens to completed steps when a later step fails."""

    SKIP = "skip"
    """Leave completed steps in place (e.g. the order stays pending)."""

    ALL_ON_FAILURE = "all_on_failure"
    """Run every recorded compensator, newest first."""


# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single saga step.

    When the action succeeds its compensator is recorded; whether it ever
    runs is decided by the ``Compensation`` policy of the run.
    """

    name: str
    action: Call[T, E]
    compensate: Compensator[T] | None = None

    def then[U, E2](
        self,
        f: Callable[[T], SagaStep[U, E2]],
    ) -> Then[T, U, E, E2]:
        """Chain another step that needs this step's value."""
        return Then(self, f)


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """Sequential composition: ``f`` builds the next step from ``inner``'s value."""

    inner: SagaStep[T, E]
    f: Callable[[T], SagaStep[U, E2]]


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """Failure of one step, plus what the rollback did about it."""

    error: E
    step_failed: str
    steps_completed: int
    compensators_run: int = 0
    compensators_failed: int = 0

    @property
    def rollback_complete(self) -> bool:
        return self.compensators_failed == 0


__all__ = (
    "Compensation",
    "SagaStep",
    "Then",
    "SagaResult",
    "SagaError",
)

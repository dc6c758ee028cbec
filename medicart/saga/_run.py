"""
Saga execution with policy-driven rollback.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from medicart._types import Result, Ok, Error, Call, Compensator
from medicart.saga._types import (
    Compensation,
    SagaStep,
    SagaResult,
    SagaError,
    Then,
)

logger = structlog.get_logger()

# ═══════════════════════════════════════════════════════════════════════════════
# Recorded Compensator
# ═══════════════════════════════════════════════════════════════════════════════

type RecordedCompensator = tuple[str, Any, Compensator[Any]]

# ═══════════════════════════════════════════════════════════════════════════════
# step()
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    name: str,
    action: Call[T, E],
    compensate: Compensator[T] | None = None,
) -> SagaStep[T, E]:
    """
    Create a named saga step.

    Example:
        from medicart import saga as S
        from combinators import lift as L

        place = S.step(
            "create_order",
            L.catching_async(lambda: api.place_order(address_id), on_error=...),
            compensate=lambda order: api.cancel_order(order.id),
        )
    """
    return SagaStep(name=name, action=action, compensate=compensate)


# ═══════════════════════════════════════════════════════════════════════════════
# run_step() / run_compensators()
# ═══════════════════════════════════════════════════════════════════════════════


async def run_step[T, E](
    saga_step: SagaStep[T, E],
    compensators: list[RecordedCompensator],
) -> Result[T, E]:
    """Execute one step, recording its compensator on success."""
    result = await saga_step.action
    match result:
        case Ok(value):
            if saga_step.compensate is not None:
                compensators.append((saga_step.name, value, saga_step.compensate))
            logger.debug("saga_step_succeeded", step=saga_step.name)
            return Ok(value)
        case Error(e):
            logger.info("saga_step_failed", step=saga_step.name, error=str(e))
            return Error(e)


async def run_compensators(
    compensators: list[RecordedCompensator],
    policy: Compensation,
) -> tuple[int, int]:
    """Run compensators newest first. Returns (run, failed); never raises."""
    if not compensators:
        return 0, 0
    if policy is Compensation.SKIP:
        logger.info(
            "compensation_skipped",
            steps=[name for name, _, _ in compensators],
        )
        return 0, 0

    ran = 0
    failed = 0
    for name, value, compensate in reversed(compensators):
        try:
            await compensate(value)
            ran += 1
            logger.info("compensator_ran", step=name)
        except Exception as e:
            failed += 1
            logger.error("compensator_failed", step=name, error=str(e))
    return ran, failed


async def _rollback[E](
    error: E,
    failed_step: str,
    completed: int,
    compensators: list[RecordedCompensator],
    policy: Compensation,
) -> Error[SagaError[E]]:
    ran, failed = await run_compensators(compensators, policy)
    return Error(SagaError(
        error=error,
        step_failed=failed_step,
        steps_completed=completed,
        compensators_run=ran,
        compensators_failed=failed,
    ))


# ═══════════════════════════════════════════════════════════════════════════════
# run() / run_chain()
# ═══════════════════════════════════════════════════════════════════════════════


async def run[T, E](
    saga_step: SagaStep[T, E],
    policy: Compensation = Compensation.SKIP,
) -> Result[SagaResult[T], SagaError[E]]:
    """Execute a single step. A lone failing step has nothing to compensate."""
    compensators: list[RecordedCompensator] = []
    match await run_step(saga_step, compensators):
        case Ok(value):
            return Ok(SagaResult(value, 1, len(compensators)))
        case Error(e):
            return await _rollback(e, saga_step.name, 0, compensators, policy)


async def run_chain[T, U, E, E2](
    chain: Then[T, U, E, E2],
    policy: Compensation = Compensation.SKIP,
    *,
    before_next: Callable[[T], None] | None = None,
) -> Result[SagaResult[U], SagaError[E | E2]]:
    """
    Execute ``inner``, then the step built from its value.

    ``before_next`` is called with the first value before the second step
    starts. If the second step fails, recorded compensators run according to
    ``policy``.

    Example:
        result = await S.run_chain(
            S.step("create_order", place).then(
                lambda order: S.step("process_payment", pay(order))
            ),
            S.Compensation.ALL_ON_FAILURE,
        )
    """
    compensators: list[RecordedCompensator] = []

    match await run_step(chain.inner, compensators):
        case Error(e):
            return await _rollback(e, chain.inner.name, 0, compensators, policy)
        case Ok(first):
            pass

    if before_next is not None:
        before_next(first)
    next_step = chain.f(first)

    match await run_step(next_step, compensators):
        case Ok(final):
            return Ok(SagaResult(final, 2, len(compensators)))
        case Error(e2):
            return await _rollback(e2, next_step.name, 1, compensators, policy)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "step",
    "run_step",
    "run_compensators",
    "run",
    "run_chain",
)

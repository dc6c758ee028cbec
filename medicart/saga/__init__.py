"""
Saga: ordered external calls with recorded compensation.

    from medicart import saga as S

    chain = S.step("create_order", place, cancel).then(
        lambda order: S.step("process_payment", pay(order))
    )
    result = await S.run_chain(chain, S.Compensation.SKIP)
"""

from __future__ import annotations

from medicart.saga._types import (
    Compensation,
    SagaStep,
    Then,
    SagaResult,
    SagaError,
)
from medicart.saga._run import (
    step,
    run_step,
    run_compensators,
    run,
    run_chain,
)

__all__ = (
    "Compensation",
    "SagaStep",
    "Then",
    "SagaResult",
    "SagaError",
    "step",
    "run_step",
    "run_compensators",
    "run",
    "run_chain",
)

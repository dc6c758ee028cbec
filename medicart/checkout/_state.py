"""
Flow states and the one table of allowed transitions.
"""

from __future__ import annotations

from enum import Enum


class FlowState(str, Enum):
    SELECTING_METHOD = "selecting_method"
    CAPTURING_DETAILS = "capturing_details"
    CREATING_ORDER = "creating_order"
    PROCESSING_PAYMENT = "processing_payment"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]

    @property
    def in_flight(self) -> bool:
        return self in (FlowState.CREATING_ORDER, FlowState.PROCESSING_PAYMENT)


TRANSITIONS: dict[FlowState, frozenset[FlowState]] = {
    FlowState.SELECTING_METHOD: frozenset({
        FlowState.CAPTURING_DETAILS,
        FlowState.ABANDONED,
    }),
    FlowState.CAPTURING_DETAILS: frozenset({
        FlowState.CREATING_ORDER,
        FlowState.SELECTING_METHOD,
        FlowState.FAILED,
        FlowState.ABANDONED,
    }),
    FlowState.CREATING_ORDER: frozenset({
        FlowState.PROCESSING_PAYMENT,
        FlowState.FAILED,
        FlowState.ABANDONED,
    }),
    FlowState.PROCESSING_PAYMENT: frozenset({
        FlowState.SUCCEEDED,
        FlowState.FAILED,
        FlowState.ABANDONED,
    }),
    FlowState.FAILED: frozenset({
        FlowState.CAPTURING_DETAILS,
        FlowState.SELECTING_METHOD,
        FlowState.ABANDONED,
    }),
    FlowState.SUCCEEDED: frozenset(),
    FlowState.ABANDONED: frozenset(),
}


class StateTransitionError(Exception):
    """A transition missing from TRANSITIONS was attempted."""

    def __init__(self, current: FlowState, target: FlowState) -> None:
        super().__init__(f"Invalid transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


def is_valid_transition(current: FlowState, target: FlowState) -> bool:
    return target in TRANSITIONS[current]


__all__ = (
    "FlowState",
    "TRANSITIONS",
    "StateTransitionError",
    "is_valid_transition",
)

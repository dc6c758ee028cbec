"""
SubmissionGuard: at most one payment attempt in flight, none after success.

In-memory pending/completed records keyed by attempt id. ``begin`` is a
check-and-set with no await in between, so two submits scheduled on the same
loop cannot both pass it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

import structlog

from medicart._types import Result, Ok, Error
from medicart.errors import CheckoutError, Errors

logger = structlog.get_logger()


class RecordState(Enum):
    """
    Lifecycle:
        PENDING → COMPLETED (paid)
                → (deleted on failure, so the user may retry)
    """

    PENDING = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    key: str
    state: RecordState
    created_at: datetime


class SubmissionGuard:
    def __init__(self) -> None:
        self._records: dict[str, SubmissionRecord] = {}

    def get(self, key: str) -> SubmissionRecord | None:
        return self._records.get(key)

    def is_pending(self, key: str) -> bool:
        record = self._records.get(key)
        return record is not None and record.state is RecordState.PENDING

    def begin(self, key: str) -> Result[SubmissionRecord, CheckoutError]:
        match self._records.get(key):
            case SubmissionRecord(state=RecordState.PENDING):
                logger.warning("submission_refused", attempt_id=key, reason="in_flight")
                return Error(Errors.in_flight())
            case SubmissionRecord(state=RecordState.COMPLETED):
                logger.warning("submission_refused", attempt_id=key, reason="completed")
                return Error(Errors.already_completed())
            case _:
                record = SubmissionRecord(key, RecordState.PENDING, datetime.now())
                self._records[key] = record
                return Ok(record)

    def complete(self, key: str) -> None:
        record = self._records.get(key)
        created = record.created_at if record is not None else datetime.now()
        self._records[key] = SubmissionRecord(key, RecordState.COMPLETED, created)

    def fail(self, key: str) -> None:
        """Forget a failed attempt so it can be retried."""
        self._records.pop(key, None)


__all__ = ("RecordState", "SubmissionRecord", "SubmissionGuard")

"""Timesheet period status state machine.

Valid transitions::

    draft -> submitted -> signed -> countersigned -> locked

No backwards transitions, no skipped states, and ``locked`` is terminal.
Functions here only decide; writing the new status and milestone timestamp
is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from .models import TimesheetStatus

logger = logging.getLogger(__name__)

StatusLike = Union[TimesheetStatus, str]

STATUS_ORDER = (
    TimesheetStatus.DRAFT,
    TimesheetStatus.SUBMITTED,
    TimesheetStatus.SIGNED,
    TimesheetStatus.COUNTERSIGNED,
    TimesheetStatus.LOCKED,
)

STATUS_TRANSITIONS: Mapping[TimesheetStatus, Optional[TimesheetStatus]] = {
    TimesheetStatus.DRAFT: TimesheetStatus.SUBMITTED,
    TimesheetStatus.SUBMITTED: TimesheetStatus.SIGNED,
    TimesheetStatus.SIGNED: TimesheetStatus.COUNTERSIGNED,
    TimesheetStatus.COUNTERSIGNED: TimesheetStatus.LOCKED,
    TimesheetStatus.LOCKED: None,
}

# Timestamp field stamped on entering each state.
MILESTONE_FIELDS: Mapping[TimesheetStatus, str] = {
    TimesheetStatus.SUBMITTED: "submitted_at",
    TimesheetStatus.SIGNED: "signed_at",
    TimesheetStatus.COUNTERSIGNED: "countersigned_at",
    TimesheetStatus.LOCKED: "locked_at",
}


@dataclass(frozen=True)
class StatusTransition:
    valid: bool
    message: str
    timestamp_field: Optional[str] = None
    update_data: Dict[str, Any] = field(default_factory=dict)


def _as_status(value: StatusLike) -> Optional[TimesheetStatus]:
    try:
        return TimesheetStatus(value)
    except ValueError:
        return None


def get_next_status(current: StatusLike) -> Optional[TimesheetStatus]:
    status = _as_status(current)
    return STATUS_TRANSITIONS.get(status) if status is not None else None


def can_transition_to(current: StatusLike, target: StatusLike) -> bool:
    target_status = _as_status(target)
    return target_status is not None and get_next_status(current) == target_status


def validate_status_transition(current: StatusLike, target: StatusLike) -> StatusTransition:
    current_status = _as_status(current)
    target_status = _as_status(target)
    if current_status is None or target_status is None:
        unknown = current if current_status is None else target
        return StatusTransition(valid=False, message=f"Unknown timesheet status '{unknown}'.")

    allowed_next = STATUS_TRANSITIONS[current_status]
    if allowed_next is None:
        return StatusTransition(
            valid=False,
            message=(
                f"Cannot transition from '{current_status.value}' — this is a terminal state. "
                "Locked timesheets cannot be modified."
            ),
        )

    if target_status != allowed_next:
        return StatusTransition(
            valid=False,
            message=(
                f"Invalid transition from '{current_status.value}' to '{target_status.value}'. "
                f"The only allowed transition is '{current_status.value}' → '{allowed_next.value}'."
            ),
        )

    return StatusTransition(
        valid=True,
        message=f"Valid transition: '{current_status.value}' → '{target_status.value}'.",
    )


def transition_status(
    current: StatusLike,
    target: StatusLike,
    *,
    at: Optional[datetime] = None,
) -> StatusTransition:
    """Validate a transition and describe the write it implies.

    On success ``update_data`` holds the new status and the milestone
    timestamp (``at``, default now in UTC) under ``timestamp_field``.
    """
    validation = validate_status_transition(current, target)
    if not validation.valid:
        logger.info("Rejected timesheet status transition: %s", validation.message)
        return validation

    target_status = TimesheetStatus(target)
    timestamp_field = MILESTONE_FIELDS[target_status]
    stamped_at = at or datetime.now(timezone.utc)
    return StatusTransition(
        valid=True,
        message=validation.message,
        timestamp_field=timestamp_field,
        update_data={"status": target_status, timestamp_field: stamped_at},
    )

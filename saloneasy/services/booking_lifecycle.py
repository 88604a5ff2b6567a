"""
Allowed booking status transitions.

pending -> confirmed | cancelled
confirmed -> completed | cancelled
completed and cancelled are terminal.
"""
from typing import Dict, FrozenSet, Union

from saloneasy.core.errors import InvalidStatusTransition
from saloneasy.schemas.booking import ACTIVE_BOOKING_STATUSES, BookingStatus

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def is_active(status: Union[str, BookingStatus]) -> bool:
    return BookingStatus(status) in ACTIVE_BOOKING_STATUSES


def ensure_transition(current: Union[str, BookingStatus], target: Union[str, BookingStatus]) -> BookingStatus:
    """Return ``target`` as a BookingStatus, or raise if the move is not allowed."""
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    if target_status not in TRANSITIONS[current_status]:
        raise InvalidStatusTransition(
            f"Cannot change booking status from {current_status.value} to {target_status.value}"
        )
    return target_status


def ensure_active(current: Union[str, BookingStatus], action: str) -> None:
    """Reschedule and cancel are only valid while the booking holds its slot."""
    current_status = BookingStatus(current)
    if current_status not in ACTIVE_BOOKING_STATUSES:
        raise InvalidStatusTransition(f"Cannot {action} a {current_status.value} booking")

from fastapi import HTTPException, status

from app.models.domain import NotificationEvent, OrderStatus

# approve/reject are the only actions guarded by status; a decision is final for both.
ORDER_STATE_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {
        OrderStatus.DETAILS_SUBMITTED,
        OrderStatus.APPROVED,
        OrderStatus.REJECTED,
    },
    OrderStatus.DETAILS_SUBMITTED: {OrderStatus.APPROVED, OrderStatus.REJECTED},
    OrderStatus.APPROVED: set(),
    OrderStatus.REJECTED: set(),
}

DECIDED: set[OrderStatus] = {OrderStatus.APPROVED, OrderStatus.REJECTED}


def is_valid_transition(current: OrderStatus, next_status: OrderStatus) -> bool:
    return next_status == current or next_status in ORDER_STATE_TRANSITIONS.get(current, set())


def ensure_valid_transition(current: OrderStatus, next_status: OrderStatus) -> None:
    if not is_valid_transition(current, next_status):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid state transition: {current.value} -> {next_status.value}",
        )


def status_after_details(current: OrderStatus) -> OrderStatus:
    """Details never overwrite an approval decision already recorded in ``status``."""
    if current in DECIDED:
        return current
    return OrderStatus.DETAILS_SUBMITTED


def notification_event_for_status(status_value: OrderStatus) -> NotificationEvent:
    return {
        OrderStatus.APPROVED: NotificationEvent.APPROVED,
        OrderStatus.REJECTED: NotificationEvent.REJECTED,
        OrderStatus.DETAILS_SUBMITTED: NotificationEvent.DETAILS_RECEIVED,
    }[status_value]

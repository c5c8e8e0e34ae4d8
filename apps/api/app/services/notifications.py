"""Notification recording.

Nothing is delivered: a notification is an append-only record on the order saying
what would have been sent to the customer, and through which channel.
"""

from fastapi import HTTPException, status

from app.models.domain import (
    Notification,
    NotificationChannel,
    NotificationEvent,
    Order,
    OrderStatus,
    new_notification_id,
    now_utc,
)
from app.observability import log_event, metrics_store
from app.services.store import OrderStore, document_patch

_TEMPLATES: dict[NotificationEvent, str] = {
    NotificationEvent.APPROVED: (
        "Hello {name},\n\nGreat news! Your jersey order ({order_id}) has been approved and "
        "is now in production.\n\nWe will notify you once it's ready for pickup/delivery."
        "\n\nThank you for your order!"
    ),
    NotificationEvent.REJECTED: (
        "Hello {name},\n\nWe regret to inform you that your jersey order ({order_id}) has "
        "been rejected.\n\nPlease contact us for more information.\n\nThank you for your "
        "understanding."
    ),
    NotificationEvent.DETAILS_RECEIVED: (
        "Hello {name},\n\nThank you for submitting your jersey details for order "
        "{order_id}.\n\nWe will review your details and notify you of the approval status "
        "soon.\n\nThank you for your order!"
    ),
}

_IN_PROGRESS_TEMPLATE = (
    "Hello {name},\n\nYour jersey order ({order_id}) is currently being processed. We will "
    "notify you once it's ready.\n\nThank you for your order!"
)


def message_for_event(order: Order, event: NotificationEvent) -> str:
    template = _TEMPLATES.get(event, _IN_PROGRESS_TEMPLATE)
    return template.format(name=order.customer_name, order_id=order.id)


def default_message_for_status(order: Order) -> str:
    """Prefilled text for a staff-initiated notification, keyed on the current status."""
    if order.status == OrderStatus.APPROVED:
        return message_for_event(order, NotificationEvent.APPROVED)
    if order.status == OrderStatus.REJECTED:
        return message_for_event(order, NotificationEvent.REJECTED)
    return _IN_PROGRESS_TEMPLATE.format(name=order.customer_name, order_id=order.id)


def build_notification(
    order: Order,
    *,
    event: NotificationEvent,
    channel: NotificationChannel = NotificationChannel.EMAIL,
    message: str | None = None,
    auto_generated: bool = False,
) -> Notification:
    return Notification(
        id=new_notification_id(),
        order_id=order.id,
        type=channel,
        event=event,
        message=message or message_for_event(order, event),
        sent_date=now_utc(),
        status="sent",
        auto_generated=auto_generated,
    )


def record_notification(store: OrderStore, order: Order, notification: Notification) -> Order:
    updated = store.update(
        order.id, document_patch(notifications=[*order.notifications, notification])
    )
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    metrics_store.increment("notifications_recorded_total")
    log_event(
        f"notification_recorded:{notification.event.value}",
        order_id=order.id,
        notification_id=notification.id,
    )
    return updated


def record_auto_notification(store: OrderStore, order: Order, event: NotificationEvent) -> Order:
    notification = build_notification(order, event=event, auto_generated=True)
    return record_notification(store, order, notification)

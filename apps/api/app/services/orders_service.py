from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException, status

from app.config import settings
from app.integrations.url_shortener import UrlShortenerProtocol
from app.models.domain import (
    Notification,
    NotificationChannel,
    NotificationEvent,
    Order,
    OrderStatus,
    now_utc,
)
from app.observability import log_event, metrics_store
from app.services.detail_form import validate_submission
from app.services.link_codec import build_shareable_url
from app.services.notifications import (
    build_notification,
    default_message_for_status,
    record_auto_notification,
    record_notification,
)
from app.services.state_machine import (
    ensure_valid_transition,
    notification_event_for_status,
    status_after_details,
)
from app.services.store import OrderFilter, OrderStore, document_patch

_DECISION_DATE_FIELDS = {
    OrderStatus.APPROVED: "approved_date",
    OrderStatus.REJECTED: "rejected_date",
}


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")


def _update(store: OrderStore, order_id: str, partial: Mapping[str, Any]) -> Order:
    order = store.update(order_id, partial)
    if order is None:
        raise _not_found()
    return order


def create_order(store: OrderStore, fields: Mapping[str, Any]) -> Order:
    order = store.create(document_patch(**fields))
    metrics_store.increment("orders_created_total")
    log_event("order_created", order_id=order.id)
    return order


def get_order(store: OrderStore, order_id: str) -> Order:
    order = store.read(order_id)
    if order is None:
        raise _not_found()
    return order


def list_orders(
    store: OrderStore,
    order_filter: OrderFilter,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Order], int]:
    orders = store.list(order_filter)
    offset = (page - 1) * page_size
    return orders[offset : offset + page_size], len(orders)


def update_order(store: OrderStore, order_id: str, changes: Mapping[str, Any]) -> Order:
    order = get_order(store, order_id)
    quantity = changes.get("jersey_quantity")
    if quantity is not None and quantity != order.jersey_quantity and order.details_submitted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Jersey quantity cannot change once details are submitted",
        )
    if not changes:
        return order

    updated = _update(store, order_id, document_patch(**changes))
    log_event("order_updated", order_id=order_id)
    return updated


def delete_order(store: OrderStore, order_id: str) -> None:
    if not store.delete(order_id):
        raise _not_found()
    log_event("order_deleted", order_id=order_id)


def _decide(store: OrderStore, order_id: str, decision: OrderStatus) -> Order:
    order = get_order(store, order_id)
    if order.status == decision:
        return order

    ensure_valid_transition(order.status, decision)
    updated = _update(
        store,
        order_id,
        document_patch(status=decision, **{_DECISION_DATE_FIELDS[decision]: now_utc()}),
    )
    metrics_store.increment(f"orders_{decision.value}_total")
    log_event(f"order_{decision.value}", order_id=order_id)
    return record_auto_notification(store, updated, notification_event_for_status(decision))


def approve_order(store: OrderStore, order_id: str) -> Order:
    return _decide(store, order_id, OrderStatus.APPROVED)


def reject_order(store: OrderStore, order_id: str) -> Order:
    return _decide(store, order_id, OrderStatus.REJECTED)


def submit_details(store: OrderStore, order_id: str, raw_fields: Mapping[str, Any]) -> Order:
    """Attach validated jersey details and record the ``details_received`` notification.

    An order that was already approved or rejected keeps that status; only the details
    and their submission date are added.
    """
    order = get_order(store, order_id)
    if order.details_submitted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Details already submitted for this order",
        )

    details = validate_submission(raw_fields, order.jersey_quantity)
    next_status = status_after_details(order.status)
    ensure_valid_transition(order.status, next_status)

    updated = _update(
        store,
        order_id,
        document_patch(
            customer_details=details,
            details_submitted_date=now_utc(),
            status=next_status,
        ),
    )
    metrics_store.increment("order_details_submitted_total")
    log_event("order_details_submitted", order_id=order_id)
    return record_auto_notification(store, updated, NotificationEvent.DETAILS_RECEIVED)


def generate_link(
    store: OrderStore,
    order_id: str,
    base_address: str,
    *,
    regenerate: bool = False,
) -> tuple[Order, bool]:
    """Return the order with its shareable link and whether a new link was built."""
    order = get_order(store, order_id)
    if order.unique_link and not regenerate:
        return order, False

    link = build_shareable_url(
        order,
        base_address,
        page_path=settings.customer_page_path,
        embed_payload=settings.embed_link_payload,
    )
    changes: dict[str, Any] = {"unique_link": link}
    if order.short_link is not None:
        # A short link points at the previous long link.
        changes["short_link"] = None

    updated = _update(store, order_id, document_patch(**changes))
    metrics_store.increment("order_links_generated_total")
    log_event("order_link_generated", order_id=order_id)
    return updated, True


def attach_short_link(
    store: OrderStore,
    order_id: str,
    long_url: str,
    shortener: UrlShortenerProtocol,
) -> Order | None:
    short_url = shortener.shorten(long_url)
    if short_url is None:
        return None

    order = store.read(order_id)
    if order is None or order.unique_link != long_url:
        log_event("short_link_discarded", order_id=order_id)
        return None

    updated = store.update(order_id, document_patch(short_link=short_url))
    log_event("short_link_attached", order_id=order_id)
    return updated


def send_notification(
    store: OrderStore,
    order_id: str,
    *,
    channel: NotificationChannel = NotificationChannel.EMAIL,
    message: str | None = None,
) -> Notification:
    order = get_order(store, order_id)
    text = (message or "").strip() or default_message_for_status(order)
    notification = build_notification(
        order,
        event=NotificationEvent.MANUAL,
        channel=channel,
        message=text,
    )
    record_notification(store, order, notification)
    return notification


def list_notifications(store: OrderStore, order_id: str) -> list[Notification]:
    return list(get_order(store, order_id).notifications)

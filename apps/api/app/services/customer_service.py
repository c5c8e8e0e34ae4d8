"""Resolve the order shown on the customer detail-collection page.

Resolution order: an embedded payload whose id matches the requested order, then the
order store, then a synthetic order when those are enabled.
"""

import logging
import random
from datetime import datetime

from fastapi import HTTPException, status

from app.config import settings
from app.models.domain import Order
from app.observability import log_event, metrics_store
from app.schemas.customer import CustomerNotice, CustomerOrderResponse, CustomerOrderView
from app.services.detail_form import render_schema, summarize_details
from app.services.link_codec import OrderSnapshot, PayloadDecodeError, decode_payload
from app.services.store import OrderStore
from app.services.synthetic_orders import demo_order, synthesize_order

DEMO_NOTICE = CustomerNotice(
    kind="demo",
    title="Demo Mode",
    message=(
        "You are viewing a demo of the Jersey Details Collection form. In a real scenario, "
        "this would be accessed via a unique order link."
    ),
)
SIMULATED_NOTICE = CustomerNotice(
    kind="demo",
    title="Demo Mode",
    message="This is a simulated order for testing purposes.",
)
LIVE_NOTICE = CustomerNotice(
    kind="live",
    title="Live Order",
    message="Your order has been successfully loaded. Please provide your jersey details below.",
)


def order_from_snapshot(snapshot: OrderSnapshot) -> Order:
    return Order(
        id=snapshot.id,
        customer_name=snapshot.customer_name,
        customer_email=snapshot.customer_email,
        customer_phone=snapshot.customer_phone,
        jersey_quantity=snapshot.jersey_quantity,
        status=snapshot.status,
        special_instructions=snapshot.special_instructions,
        created_date=datetime.fromisoformat(snapshot.created_date.replace("Z", "+00:00")),
    )


def _order_from_payload(order_id: str, payload: str) -> Order | None:
    try:
        snapshot = decode_payload(payload, expected_id=order_id)
        return order_from_snapshot(snapshot)
    except (PayloadDecodeError, ValueError):
        metrics_store.increment("payload_decode_failures_total")
        log_event("payload_decode_failed", order_id=order_id, level=logging.WARNING)
        return None


def build_view(order: Order, source: str, notice: CustomerNotice | None) -> CustomerOrderView:
    submitted = order.details_submitted
    return CustomerOrderView(
        order=CustomerOrderResponse.from_order(order),
        source=source,
        notice=notice,
        form=None if submitted else render_schema(order.jersey_quantity),
        summary=summarize_details(order.customer_details) if submitted else None,
        can_submit=not submitted and source in ("payload", "store"),
    )


def load_customer_view(
    store: OrderStore,
    order_id: str | None,
    payload: str | None = None,
    rng: random.Random | None = None,
) -> CustomerOrderView:
    if not order_id:
        if not settings.synthetic_orders_enabled:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return build_view(demo_order(), "demo", DEMO_NOTICE)

    if payload:
        order = _order_from_payload(order_id, payload)
        if order is not None:
            log_event("customer_order_loaded:payload", order_id=order_id)
            return build_view(order, "payload", None)

    order = store.read(order_id)
    if order is not None:
        log_event("customer_order_loaded:store", order_id=order_id)
        return build_view(order, "store", None)

    if not settings.synthetic_orders_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    synthetic = synthesize_order(order_id, rng)
    metrics_store.increment("synthetic_orders_served_total")
    log_event("customer_order_loaded:synthetic", order_id=order_id)
    notice = LIVE_NOTICE if synthetic.order_type == "live" else SIMULATED_NOTICE
    return build_view(synthetic, "synthetic", notice)

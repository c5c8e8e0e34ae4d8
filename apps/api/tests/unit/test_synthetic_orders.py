import random
from datetime import timedelta

import pytest

from app.models.domain import OrderStatus, now_utc
from app.services.synthetic_orders import (
    DEMO_ORDER_ID,
    LIVE_PREFIX,
    classify_order_id,
    demo_order,
    synthesize_order,
)


@pytest.mark.parametrize(
    ("order_id", "prefix"),
    [
        ("ORD-123", "ORD-"),
        ("JERSEY-9", "JERSEY-"),
        ("CUST-1", "CUST-"),
        ("DEMO-42", "DEMO-"),
        ("ABC-1", LIVE_PREFIX),
        ("ord-123", LIVE_PREFIX),
    ],
)
def test_classify_order_id(order_id, prefix):
    assert classify_order_id(order_id) == prefix


def test_synthesized_order_is_plausible_and_flagged():
    order = synthesize_order("DEMO-7", random.Random(7))

    assert order.id == "DEMO-7"
    assert order.order_type == "simulated"
    assert order.status == OrderStatus.PENDING
    assert 1 <= order.jersey_quantity <= 10
    assert order.customer_phone.startswith("+1-555-")
    assert 1000 <= int(order.customer_phone.rsplit("-", 1)[1]) <= 9999
    assert now_utc() - order.created_date <= timedelta(days=30)
    assert order.customer_details is None


def test_unknown_prefix_is_a_live_order():
    assert synthesize_order("XYZ-1", random.Random(1)).order_type == "live"


def test_synthesis_is_deterministic_for_a_seeded_rng():
    first = synthesize_order("ORD-1", random.Random(3))
    second = synthesize_order("ORD-1", random.Random(3))

    assert (first.customer_name, first.jersey_quantity) == (
        second.customer_name,
        second.jersey_quantity,
    )


def test_demo_order_is_fixed():
    order = demo_order()

    assert order.id == DEMO_ORDER_ID == "ORD-001"
    assert order.customer_name == "John Doe"
    assert order.jersey_quantity == 2
    assert order.order_type == "simulated"

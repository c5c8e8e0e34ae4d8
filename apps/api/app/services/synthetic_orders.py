"""Synthetic orders for the customer page when no real order can be resolved.

These exist so the detail-collection form can be exercised without a backend. They are
flagged to the viewer and never written to an order store.
"""

import random
from datetime import timedelta

from app.models.domain import OrderStatus, SyntheticOrder, now_utc

SIMULATED_PREFIXES: tuple[str, ...] = ("ORD-", "JERSEY-", "CUST-", "DEMO-")
LIVE_PREFIX = "LIVE-"

DEMO_ORDER_ID = "ORD-001"

_CUSTOMERS: tuple[tuple[str, str], ...] = (
    ("Sarah Johnson", "sarah.johnson@email.com"),
    ("Michael Chen", "michael.chen@company.com"),
    ("Emily Rodriguez", "emily.rodriguez@team.org"),
    ("David Thompson", "david.thompson@sports.com"),
    ("Lisa Anderson", "lisa.anderson@club.net"),
    ("James Wilson", "james.wilson@group.com"),
    ("Maria Garcia", "maria.garcia@league.org"),
    ("Robert Brown", "robert.brown@association.com"),
    ("Jennifer Davis", "jennifer.davis@union.net"),
    ("Christopher Lee", "christopher.lee@federation.com"),
    ("Amanda Taylor", "amanda.taylor@alliance.org"),
    ("Daniel Martinez", "daniel.martinez@coalition.com"),
)

_SPECIAL_INSTRUCTIONS: tuple[str, ...] = (
    "Please ensure high quality materials are used.",
    "Rush order - needed for upcoming tournament.",
    "Standard quality materials are acceptable.",
    "Premium materials preferred for durability.",
    "Custom sizing required for team uniforms.",
    "Bulk order - please maintain consistency.",
    "Special color requirements - contact if unclear.",
    "Standard processing time is acceptable.",
)


def classify_order_id(order_id: str) -> str:
    for prefix in SIMULATED_PREFIXES:
        if order_id.startswith(prefix):
            return prefix
    return LIVE_PREFIX


def synthesize_order(order_id: str, rng: random.Random | None = None) -> SyntheticOrder:
    rng = rng or random.Random()
    name, email = rng.choice(_CUSTOMERS)
    created = now_utc() - timedelta(days=rng.randrange(30))
    return SyntheticOrder(
        id=order_id,
        customer_name=name,
        customer_email=email,
        customer_phone=f"+1-555-{rng.randint(1000, 9999)}",
        jersey_quantity=rng.randint(1, 10),
        status=OrderStatus.PENDING,
        special_instructions=rng.choice(_SPECIAL_INSTRUCTIONS),
        created_date=created,
        order_type="live" if classify_order_id(order_id) == LIVE_PREFIX else "simulated",
    )


def demo_order() -> SyntheticOrder:
    """The fixed order shown when the customer page is opened without an order id."""
    return SyntheticOrder(
        id=DEMO_ORDER_ID,
        customer_name="John Doe",
        customer_email="john.doe@example.com",
        customer_phone="+1-555-0123",
        jersey_quantity=2,
        status=OrderStatus.PENDING,
        special_instructions="Please ensure high quality materials are used.",
        created_date=now_utc(),
        order_type="simulated",
    )

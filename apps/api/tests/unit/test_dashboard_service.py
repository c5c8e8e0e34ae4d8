from datetime import date, datetime, timezone

from app.config import settings
from app.models.domain import Order
from app.services.dashboard_service import revenue_per_month


def _order(created: datetime, quantity: int) -> Order:
    return Order(
        id=f"ORD-{created:%Y%m%d}-{quantity}",
        customer_name="Ada Obi",
        customer_email="ada@example.com",
        customer_phone="+1-555-0100",
        jersey_quantity=quantity,
        created_date=created,
    )


def test_revenue_spans_twelve_months_across_year_boundary():
    orders = [
        _order(datetime(2026, 2, 3, tzinfo=timezone.utc), 2),
        _order(datetime(2026, 2, 20, tzinfo=timezone.utc), 1),
        _order(datetime(2025, 12, 31, tzinfo=timezone.utc), 4),
        _order(datetime(2025, 2, 28, tzinfo=timezone.utc), 10),
    ]

    series = revenue_per_month(orders, date(2026, 2, 15))

    assert [point.month for point in series][:2] == ["2025-03", "2025-04"]
    assert series[-1].month == "2026-02"
    assert series[-1].revenue == 3 * 25
    assert series[-3].month == "2025-12"
    assert series[-3].revenue == 4 * 25
    assert sum(point.revenue for point in series) == 7 * 25


def test_revenue_uses_configured_unit_price(monkeypatch):
    monkeypatch.setattr(settings, "jersey_unit_price", 40)

    order = _order(datetime(2026, 10, 1, tzinfo=timezone.utc), 3)

    series = revenue_per_month([order], date(2026, 10, 19))

    assert series[-1].revenue == 120

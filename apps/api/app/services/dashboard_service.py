from collections import Counter
from datetime import date, timedelta

from app.config import settings
from app.models.domain import Order, OrderStatus, now_utc
from app.schemas.dashboard import (
    CustomerOrderCount,
    DailyOrderCount,
    DashboardStatsResponse,
    MonthlyRevenue,
)
from app.schemas.order import OrderResponse
from app.services.store import OrderFilter, OrderStore

RECENT_ORDERS_LIMIT = 10
TOP_CUSTOMERS_LIMIT = 5
REVENUE_MONTHS = 12


def _trailing_months(today: date, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``count`` months, oldest first, ending with today's."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    return months[::-1]


def revenue_per_month(orders: list[Order], today: date) -> list[MonthlyRevenue]:
    jerseys = Counter()
    for order in orders:
        jerseys[(order.created_date.year, order.created_date.month)] += order.jersey_quantity
    return [
        MonthlyRevenue(
            month=f"{year:04d}-{month:02d}",
            revenue=jerseys.get((year, month), 0) * settings.jersey_unit_price,
        )
        for year, month in _trailing_months(today, REVENUE_MONTHS)
    ]


def dashboard_stats(store: OrderStore, days: int = 7) -> DashboardStatsResponse:
    orders = store.list(OrderFilter(sort="date_desc"))
    status_counts = {order_status.value: 0 for order_status in OrderStatus}
    for order in orders:
        status_counts[order.status.value] += 1

    today = now_utc().date()
    per_day = Counter(order.created_date.date() for order in orders)
    orders_over_time = [
        DailyOrderCount(day=day, count=per_day.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]

    customers = Counter(order.customer_name for order in orders)
    top_customers = [
        CustomerOrderCount(customer_name=name, count=count)
        for name, count in customers.most_common(TOP_CUSTOMERS_LIMIT)
    ]

    return DashboardStatsResponse(
        total_orders=len(orders),
        pending_orders=status_counts[OrderStatus.PENDING.value],
        approved_orders=status_counts[OrderStatus.APPROVED.value],
        rejected_orders=status_counts[OrderStatus.REJECTED.value],
        details_submitted_orders=sum(1 for order in orders if order.details_submitted),
        status_counts=status_counts,
        orders_over_time=orders_over_time,
        revenue_per_month=revenue_per_month(orders, today),
        top_customers=top_customers,
        recent_orders=[
            OrderResponse.from_order(order) for order in orders[:RECENT_ORDERS_LIMIT]
        ],
    )

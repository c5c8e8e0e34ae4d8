from datetime import date

from app.schemas.common import ApiModel
from app.schemas.order import OrderResponse


class DailyOrderCount(ApiModel):
    day: date
    count: int


class CustomerOrderCount(ApiModel):
    customer_name: str
    count: int


class MonthlyRevenue(ApiModel):
    month: str
    revenue: int


class DashboardStatsResponse(ApiModel):
    total_orders: int
    pending_orders: int
    approved_orders: int
    rejected_orders: int
    details_submitted_orders: int
    status_counts: dict[str, int]
    orders_over_time: list[DailyOrderCount]
    revenue_per_month: list[MonthlyRevenue]
    top_customers: list[CustomerOrderCount]
    recent_orders: list[OrderResponse]

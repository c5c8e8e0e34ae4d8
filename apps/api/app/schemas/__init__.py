from app.schemas.customer import CustomerNotice, CustomerOrderView, DetailSummaryRequest
from app.schemas.dashboard import DashboardStatsResponse
from app.schemas.order import (
    LinkRequest,
    LinkResponse,
    NotificationCreateRequest,
    NotificationResponse,
    OrderCreateRequest,
    OrderResponse,
    OrdersListResponse,
    OrderUpdateRequest,
)

__all__ = [
    "OrderCreateRequest",
    "OrderUpdateRequest",
    "OrderResponse",
    "OrdersListResponse",
    "LinkRequest",
    "LinkResponse",
    "NotificationCreateRequest",
    "NotificationResponse",
    "CustomerNotice",
    "CustomerOrderView",
    "DetailSummaryRequest",
    "DashboardStatsResponse",
]

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, Request, Response, status

from app.auth.dependencies import StaffContext, require_staff
from app.config import settings
from app.dependencies import get_order_store, get_shortener, order_store_scope
from app.integrations.url_shortener import UrlShortenerProtocol
from app.models.domain import OrderStatus
from app.schemas.order import (
    LinkRequest,
    LinkResponse,
    NotificationCreateRequest,
    NotificationResponse,
    NotificationsListResponse,
    OrderCreateRequest,
    OrderResponse,
    OrdersListResponse,
    OrderUpdateRequest,
)
from app.services.orders_service import (
    approve_order,
    attach_short_link,
    create_order,
    delete_order,
    generate_link,
    get_order,
    list_notifications,
    list_orders,
    reject_order,
    send_notification,
    submit_details,
    update_order,
)
from app.services.store import CreatedWithin, OrderFilter, OrderSort, OrderStore

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


def _base_address(request: Request) -> str:
    return settings.public_base_url.strip() or str(request.base_url)


def _shorten_in_background(
    order_id: str, long_url: str, shortener: UrlShortenerProtocol
) -> None:
    with order_store_scope() as store:
        attach_short_link(store, order_id, long_url, shortener)


@router.post("", response_model=OrderResponse, summary="Create order", status_code=201)
def create_order_endpoint(
    payload: OrderCreateRequest,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    order = create_order(store, payload.model_dump(exclude_unset=True))
    return OrderResponse.from_order(order)


@router.get("", response_model=OrdersListResponse, summary="List orders")
def list_orders_endpoint(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None),
    created_within: CreatedWithin = Query(default="all", alias="createdWithin"),
    has_details: bool | None = Query(default=None, alias="hasDetails"),
    sort: OrderSort = Query(default="date_desc"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrdersListResponse:
    order_filter = OrderFilter(
        status=status_filter,
        search=search,
        created_within=created_within,
        has_details=has_details,
        sort=sort,
    )
    items, total = list_orders(store, order_filter, page=page, page_size=page_size)
    return OrdersListResponse(
        items=[OrderResponse.from_order(order) for order in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order")
def get_order_endpoint(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    return OrderResponse.from_order(get_order(store, order_id))


@router.patch("/{order_id}", response_model=OrderResponse, summary="Update order")
def update_order_endpoint(
    order_id: str,
    payload: OrderUpdateRequest,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    order = update_order(store, order_id, payload.model_dump(exclude_unset=True))
    return OrderResponse.from_order(order)


@router.delete("/{order_id}", status_code=204, summary="Delete order")
def delete_order_endpoint(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> Response:
    delete_order(store, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{order_id}/approve", response_model=OrderResponse, summary="Approve order")
def approve_order_endpoint(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    return OrderResponse.from_order(approve_order(store, order_id))


@router.post("/{order_id}/reject", response_model=OrderResponse, summary="Reject order")
def reject_order_endpoint(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    return OrderResponse.from_order(reject_order(store, order_id))


@router.post(
    "/{order_id}/details",
    response_model=OrderResponse,
    summary="Enter jersey details on behalf of the customer",
)
def submit_details_endpoint(
    order_id: str,
    raw_fields: dict[str, Any] = Body(...),
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> OrderResponse:
    return OrderResponse.from_order(submit_details(store, order_id, raw_fields))


@router.post("/{order_id}/link", response_model=LinkResponse, summary="Generate shareable link")
def generate_link_endpoint(
    order_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: LinkRequest | None = None,
    store: OrderStore = Depends(get_order_store),
    shortener: UrlShortenerProtocol = Depends(get_shortener),
    _staff: StaffContext = Depends(require_staff),
) -> LinkResponse:
    options = payload or LinkRequest()
    order, created = generate_link(
        store, order_id, _base_address(request), regenerate=options.regenerate
    )
    shortening = options.shorten and order.short_link is None
    if shortening:
        background_tasks.add_task(_shorten_in_background, order.id, order.unique_link, shortener)

    return LinkResponse(
        order_id=order.id,
        unique_link=order.unique_link,
        short_link=order.short_link,
        created=created,
        shortening=shortening,
    )


@router.get(
    "/{order_id}/notifications",
    response_model=NotificationsListResponse,
    summary="List recorded notifications",
)
def list_notifications_endpoint(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> NotificationsListResponse:
    items = list_notifications(store, order_id)
    return NotificationsListResponse(
        items=[NotificationResponse.model_validate(item.model_dump()) for item in items]
    )


@router.post(
    "/{order_id}/notifications",
    response_model=NotificationResponse,
    status_code=201,
    summary="Record a manual notification",
)
def send_notification_endpoint(
    order_id: str,
    payload: NotificationCreateRequest,
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> NotificationResponse:
    notification = send_notification(
        store, order_id, channel=payload.type, message=payload.message
    )
    return NotificationResponse.model_validate(notification.model_dump())

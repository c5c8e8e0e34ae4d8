from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, Query

from app.dependencies import get_order_store
from app.schemas.customer import CustomerOrderView, DetailSummaryRequest
from app.services.customer_service import build_view, load_customer_view
from app.services.detail_form import DetailSummary, summarize_fields
from app.services.orders_service import submit_details
from app.services.store import OrderStore

router = APIRouter(prefix="/api/v1/customer", tags=["customer"])


@router.get("/orders", response_model=CustomerOrderView, summary="Load the customer order page")
def customer_order_endpoint(
    order: str | None = Query(default=None),
    payload: str | None = Query(default=None),
    action: Literal["details"] | None = Query(default=None),
    store: OrderStore = Depends(get_order_store),
) -> CustomerOrderView:
    return load_customer_view(store, order, payload)


@router.post(
    "/orders/{order_id}/details",
    response_model=CustomerOrderView,
    summary="Submit jersey details",
)
def customer_submit_details_endpoint(
    order_id: str,
    raw_fields: dict[str, Any] = Body(...),
    store: OrderStore = Depends(get_order_store),
) -> CustomerOrderView:
    order = submit_details(store, order_id, raw_fields)
    return build_view(order, "store", None)


@router.post("/summary", response_model=DetailSummary, summary="Live counters for a detail form")
def customer_summary_endpoint(payload: DetailSummaryRequest) -> DetailSummary:
    return summarize_fields(payload.form_values, payload.quantity, include_empty=True)

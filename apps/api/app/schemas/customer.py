from typing import Any, Literal

from pydantic import Field, field_validator

from app.schemas.common import ApiModel
from app.schemas.order import OrderResponse, check_jersey_quantity
from app.services.detail_form import DetailSummary, JerseyFormGroup

OrderSource = Literal["payload", "store", "synthetic", "demo"]


class CustomerNotice(ApiModel):
    kind: Literal["demo", "live"]
    title: str
    message: str


class CustomerOrderResponse(OrderResponse):
    order_type: Literal["live", "simulated"] | None = None


class CustomerOrderView(ApiModel):
    order: CustomerOrderResponse
    source: OrderSource
    notice: CustomerNotice | None = None
    form: list[JerseyFormGroup] | None = None
    summary: DetailSummary | None = None
    can_submit: bool


class DetailSummaryRequest(ApiModel):
    quantity: int = Field(ge=1)
    form_values: dict[str, Any] = {}

    @field_validator("quantity")
    @classmethod
    def cap_quantity(cls, value: int) -> int:
        return check_jersey_quantity(value)

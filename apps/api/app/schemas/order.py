from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from app.config import settings
from app.models.domain import (
    JerseyDetail,
    Notification,
    NotificationChannel,
    NotificationEvent,
    Order,
    OrderStatus,
)
from app.schemas.common import ApiModel, Page

_REQUIRED_ON_UPDATE = ("customer_name", "customer_email", "customer_phone", "jersey_quantity")


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def check_jersey_quantity(value: int | None) -> int | None:
    if value is not None and value > settings.max_jersey_quantity:
        raise ValueError(f"jersey quantity cannot exceed {settings.max_jersey_quantity}")
    return value


class OrderCreateRequest(ApiModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=1, max_length=50)
    jersey_quantity: int = Field(ge=1)
    special_instructions: str | None = None

    @field_validator(
        "customer_name", "customer_email", "customer_phone", "special_instructions", mode="before"
    )
    @classmethod
    def strip_strings(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("jersey_quantity")
    @classmethod
    def cap_quantity(cls, value: int) -> int:
        return check_jersey_quantity(value)


class OrderUpdateRequest(ApiModel):
    customer_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer_email: str | None = Field(default=None, min_length=1, max_length=255)
    customer_phone: str | None = Field(default=None, min_length=1, max_length=50)
    jersey_quantity: int | None = Field(default=None, ge=1)
    special_instructions: str | None = None

    @field_validator(
        "customer_name", "customer_email", "customer_phone", "special_instructions", mode="before"
    )
    @classmethod
    def strip_strings(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("jersey_quantity")
    @classmethod
    def cap_quantity(cls, value: int | None) -> int | None:
        return check_jersey_quantity(value)

    @model_validator(mode="after")
    def reject_null_required(self) -> "OrderUpdateRequest":
        for name in _REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class OrderResponse(ApiModel):
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    jersey_quantity: int
    special_instructions: str | None = None
    status: OrderStatus
    details_submitted: bool
    created_date: datetime
    updated_date: datetime | None = None
    approved_date: datetime | None = None
    rejected_date: datetime | None = None
    details_submitted_date: datetime | None = None
    customer_details: list[JerseyDetail] | None = None
    unique_link: str | None = None
    short_link: str | None = None
    notifications: list[Notification] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls.model_validate(
            {**order.model_dump(), "details_submitted": order.details_submitted}
        )


class OrdersListResponse(Page[OrderResponse]):
    pass


class LinkRequest(ApiModel):
    regenerate: bool = False
    shorten: bool = True


class LinkResponse(ApiModel):
    order_id: str
    unique_link: str
    short_link: str | None = None
    created: bool
    shortening: bool


class NotificationCreateRequest(ApiModel):
    type: NotificationChannel = NotificationChannel.EMAIL
    message: str | None = Field(default=None, max_length=5000)


class NotificationResponse(ApiModel):
    id: str
    order_id: str
    type: NotificationChannel
    event: NotificationEvent
    message: str
    sent_date: datetime
    status: str
    auto_generated: bool


class NotificationsListResponse(ApiModel):
    items: list[NotificationResponse]

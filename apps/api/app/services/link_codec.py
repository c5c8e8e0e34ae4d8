"""Shareable customer links.

A link addresses an order by id and may carry a ``payload`` token: a base64 encoding
of the UTF-8 JSON snapshot of the order, so the customer page can render even when it
cannot reach the order store.
"""

from __future__ import annotations

import base64
import binascii
import json
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.config import settings
from app.models.domain import Order, OrderStatus, format_timestamp


class PayloadDecodeError(Exception):
    pass


class OrderSnapshot(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    jersey_quantity: int = Field(ge=1)
    status: OrderStatus
    special_instructions: str = ""
    created_date: str

    @field_validator("jersey_quantity")
    @classmethod
    def cap_quantity(cls, value: int) -> int:
        # Same cap as staff-created orders.
        if value > settings.max_jersey_quantity:
            raise ValueError(f"jersey quantity cannot exceed {settings.max_jersey_quantity}")
        return value


def snapshot_order(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        id=order.id,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        jersey_quantity=order.jersey_quantity,
        status=order.status,
        special_instructions=order.special_instructions or "",
        created_date=format_timestamp(order.created_date),
    )


def encode_payload(source: Order | OrderSnapshot) -> str:
    snapshot = source if isinstance(source, OrderSnapshot) else snapshot_order(source)
    data = snapshot.model_dump(mode="json", by_alias=True)
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_payload(token: str, expected_id: str | None = None) -> OrderSnapshot:
    # A token pasted without URL quoting arrives with "+" turned into spaces.
    cleaned = token.strip().replace(" ", "+")
    padded = cleaned + "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        snapshot = OrderSnapshot.model_validate(json.loads(raw.decode("utf-8")))
    except (binascii.Error, ValueError) as err:
        raise PayloadDecodeError("Malformed order payload") from err

    if expected_id is not None and snapshot.id != expected_id:
        raise PayloadDecodeError("Payload does not belong to the requested order")
    return snapshot


def build_shareable_url(
    order: Order,
    base_address: str,
    *,
    page_path: str = "customer.html",
    embed_payload: bool = True,
) -> str:
    params = {"order": order.id, "action": "details"}
    if embed_payload:
        params["payload"] = encode_payload(order)
    return f"{base_address.rstrip('/')}/{page_path.lstrip('/')}?{urlencode(params)}"

import enum
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_ID_ALPHABET = string.digits + string.ascii_uppercase


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    DETAILS_SUBMITTED = "details_submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class JerseyType(str, enum.Enum):
    PLAYER = "Player Jersey"
    KEEPER = "Keeper Jersey"
    OFFICIAL = "Official Jersey"
    TRAINING = "Training Jersey"
    WARM_UP = "Warm-up Jersey"


class SizeCategory(str, enum.Enum):
    ADULT = "Adult"
    KIDS = "Kids"
    MUSLIMA = "Muslima"


class Sleeve(str, enum.Enum):
    SHORT = "Short Sleeve"
    LONG = "Long Sleeve"


class Shorts(str, enum.Enum):
    YES = "Yes"
    NO = "No"


class NotificationChannel(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"


class NotificationEvent(str, enum.Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    DETAILS_RECEIVED = "details_received"
    MANUAL = "manual"


JERSEY_SIZES: tuple[str, ...] = ("XS", "S", "M", "L", "XL", "2XL", "3XL", "4XL", "5XL")

SIZES_BY_CATEGORY: dict[SizeCategory, tuple[str, ...]] = {
    SizeCategory.ADULT: JERSEY_SIZES,
    SizeCategory.KIDS: JERSEY_SIZES,
    SizeCategory.MUSLIMA: JERSEY_SIZES,
}

JERSEY_NUMBER_MIN = 1
JERSEY_NUMBER_MAX = 99


class DomainModel(BaseModel):
    """Base for persisted records: snake_case attributes, camelCase documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        # Unset optional fields stay absent so that absence and an explicit null differ.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class JerseyDetail(DomainModel):
    type: JerseyType
    name: str = Field(min_length=1)
    number: int = Field(ge=JERSEY_NUMBER_MIN, le=JERSEY_NUMBER_MAX)
    size_category: SizeCategory
    size: str
    sleeve: Sleeve
    shorts: Shorts
    additional_details: str = ""

    @model_validator(mode="after")
    def check_size_in_category(self) -> "JerseyDetail":
        if self.size not in SIZES_BY_CATEGORY[self.size_category]:
            raise ValueError(f"size {self.size!r} is not offered for {self.size_category.value}")
        return self


class Notification(DomainModel):
    id: str
    order_id: str
    type: NotificationChannel = NotificationChannel.EMAIL
    event: NotificationEvent = NotificationEvent.MANUAL
    message: str
    sent_date: datetime
    status: Literal["sent"] = "sent"
    auto_generated: bool = False


class Order(DomainModel):
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    jersey_quantity: int = Field(ge=1)
    special_instructions: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_date: datetime
    updated_date: datetime | None = None
    approved_date: datetime | None = None
    rejected_date: datetime | None = None
    details_submitted_date: datetime | None = None
    customer_details: list[JerseyDetail] | None = None
    unique_link: str | None = None
    short_link: str | None = None
    notifications: list[Notification] = Field(default_factory=list)

    @property
    def details_submitted(self) -> bool:
        return bool(self.customer_details)


class SyntheticOrder(Order):
    order_type: Literal["live", "simulated"]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id(prefix: str) -> str:
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(5))
    return f"{prefix}{millis}-{suffix}"


def new_order_id() -> str:
    return new_id("ORD-")


def new_notification_id() -> str:
    return new_id("NOTIF-")

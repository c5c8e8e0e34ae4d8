from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Literal, Protocol

from fastapi.encoders import jsonable_encoder
from pydantic.alias_generators import to_camel

from app.config import settings
from app.models.domain import Order, OrderStatus, format_timestamp, new_order_id, now_utc
from app.observability import log_event

CreatedWithin = Literal["all", "today", "week", "month", "year"]
OrderSort = Literal[
    "date_desc", "date_asc", "name_asc", "name_desc", "status_asc", "status_desc"
]

_BUCKET_DAYS: dict[str, int] = {"week": 7, "month": 30, "year": 365}
_IMMUTABLE_KEYS = {"id", "createdDate"}


class StoreError(Exception):
    """The backing store could not complete a read or a write."""


@dataclass(frozen=True)
class OrderFilter:
    status: OrderStatus | None = None
    search: str | None = None
    created_within: CreatedWithin = "all"
    has_details: bool | None = None
    sort: OrderSort = "date_desc"


class OrderStore(Protocol):
    def create(self, fields: Mapping[str, Any]) -> Order: ...

    def read(self, order_id: str) -> Order | None: ...

    def update(self, order_id: str, partial: Mapping[str, Any]) -> Order | None: ...

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]: ...

    def delete(self, order_id: str) -> bool: ...


def document_patch(**fields: Any) -> dict[str, Any]:
    """Build a document-level partial from snake_case keyword arguments."""
    return {
        to_camel(name): jsonable_encoder(value, by_alias=True) for name, value in fields.items()
    }


def new_order_document(fields: Mapping[str, Any]) -> dict[str, Any]:
    payload = {key: value for key, value in fields.items() if key not in _IMMUTABLE_KEYS}
    order = Order.model_validate(
        {
            **payload,
            "id": new_order_id(),
            "status": OrderStatus.PENDING,
            "createdDate": now_utc(),
            "notifications": [],
        }
    )
    return order.to_document()


def merge_document(document: Mapping[str, Any], partial: Mapping[str, Any]) -> dict[str, Any]:
    changes = {
        key: value
        for key, value in jsonable_encoder(dict(partial), by_alias=True).items()
        if key not in _IMMUTABLE_KEYS
    }
    merged = {**document, **changes, "updatedDate": format_timestamp(now_utc())}
    # Round-trip through the model so stored documents stay well-formed.
    return Order.model_validate(merged).to_document()


def created_cutoff(created_within: CreatedWithin, now: datetime) -> datetime | None:
    if created_within == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    days = _BUCKET_DAYS.get(created_within)
    if days is None:
        return None
    return now - timedelta(days=days)


def matches_filter(order: Order, order_filter: OrderFilter, now: datetime | None = None) -> bool:
    if order_filter.status is not None and order.status != order_filter.status:
        return False

    wants_details = order_filter.has_details
    if wants_details is not None and order.details_submitted != wants_details:
        return False

    cutoff = created_cutoff(order_filter.created_within, now or now_utc())
    if cutoff is not None and order.created_date < cutoff:
        return False

    term = (order_filter.search or "").strip().lower()
    if term:
        haystack = (
            order.id,
            order.customer_name,
            order.customer_email,
            order.customer_phone,
        )
        if not any(term in value.lower() for value in haystack):
            return False
    return True


def sort_orders(orders: Iterable[Order], sort: OrderSort) -> list[Order]:
    field, _, direction = sort.partition("_")
    keys = {
        "date": lambda order: order.created_date,
        "name": lambda order: order.customer_name.lower(),
        "status": lambda order: order.status.value,
    }
    return sorted(orders, key=keys[field], reverse=direction == "desc")


class LocalOrderStore:
    """Process-local backend, optionally mirrored to a JSON file on every write."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else None
        self.documents: dict[str, dict[str, Any]] = {}
        # Endpoints run on the threadpool; one writer at a time touches documents and the file.
        self._lock = threading.RLock()
        if self.path is not None and self.path.exists():
            self._load()

    def create(self, fields: Mapping[str, Any]) -> Order:
        document = new_order_document(fields)
        with self._lock:
            self.documents[document["id"]] = document
            self._persist()
        return Order.model_validate(document)

    def read(self, order_id: str) -> Order | None:
        document = self.documents.get(order_id)
        if document is None:
            return None
        return Order.model_validate(document)

    def update(self, order_id: str, partial: Mapping[str, Any]) -> Order | None:
        with self._lock:
            document = self.documents.get(order_id)
            if document is None:
                return None
            merged = merge_document(document, partial)
            self.documents[order_id] = merged
            self._persist()
        return Order.model_validate(merged)

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        order_filter = order_filter or OrderFilter()
        now = now_utc()
        with self._lock:
            documents = list(self.documents.values())
        orders = [Order.model_validate(document) for document in documents]
        return sort_orders(
            (order for order in orders if matches_filter(order, order_filter, now)),
            order_filter.sort,
        )

    def delete(self, order_id: str) -> bool:
        with self._lock:
            if self.documents.pop(order_id, None) is None:
                return False
            self._persist()
        return True

    def clear(self) -> None:
        with self._lock:
            self.documents.clear()
            self._persist()

    def check_writable(self) -> None:
        if self.path is None:
            return
        # _persist creates missing parents, so the nearest existing ancestor decides.
        ancestor = self.path.parent
        while not ancestor.exists() and ancestor != ancestor.parent:
            ancestor = ancestor.parent
        if not ancestor.is_dir() or not os.access(ancestor, os.W_OK):
            raise StoreError(f"Local order store directory {self.path.parent} is not writable")

    def _load(self) -> None:
        assert self.path is not None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as err:
            raise StoreError(f"Could not read local order store at {self.path}") from err
        self.documents = {document["id"]: document for document in raw}

    def _persist(self) -> None:
        if self.path is None:
            return
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(list(self.documents.values())), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as err:
            log_event("local_store_write_failed")
            raise StoreError(f"Could not write local order store at {self.path}") from err


local_store = LocalOrderStore(settings.local_store_path or None)


def reset_local_store() -> None:
    local_store.clear()

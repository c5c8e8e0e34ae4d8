from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.domain import Order
from app.models.order_document import OrderDocument
from app.observability import log_event
from app.services.store import (
    OrderFilter,
    StoreError,
    matches_filter,
    merge_document,
    new_order_document,
    sort_orders,
)


def _apply_index_columns(row: OrderDocument, order: Order) -> None:
    row.status = order.status.value
    row.customer_name = order.customer_name
    row.customer_email = order.customer_email
    row.customer_phone = order.customer_phone
    row.has_details = order.details_submitted
    row.created_date = order.created_date


class SqlOrderStore:
    """Document-store backend: one JSON document per order in ``order_documents``.

    Status, contact fields and the details flag are mirrored into indexed columns
    so that list filters narrow rows in SQL; the date bucket and ordering are then
    applied with the same helpers the local backend uses.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, fields: Mapping[str, Any]) -> Order:
        document = new_order_document(fields)
        order = Order.model_validate(document)
        row = OrderDocument(id=order.id, document=document)
        _apply_index_columns(row, order)
        self.db.add(row)
        self._commit(order.id)
        return order

    def read(self, order_id: str) -> Order | None:
        try:
            row = self.db.get(OrderDocument, order_id)
        except SQLAlchemyError as err:
            raise StoreError("Could not read order") from err
        if row is None:
            return None
        return Order.model_validate(row.document)

    def update(self, order_id: str, partial: Mapping[str, Any]) -> Order | None:
        try:
            row = self.db.get(OrderDocument, order_id)
        except SQLAlchemyError as err:
            raise StoreError("Could not read order") from err
        if row is None:
            return None

        merged = merge_document(row.document, partial)
        order = Order.model_validate(merged)
        row.document = merged
        _apply_index_columns(row, order)
        self._commit(order_id)
        return order

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        order_filter = order_filter or OrderFilter()
        query = select(OrderDocument)
        if order_filter.status is not None:
            query = query.where(OrderDocument.status == order_filter.status.value)
        if order_filter.has_details is not None:
            query = query.where(OrderDocument.has_details == order_filter.has_details)

        term = (order_filter.search or "").strip().lower()
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    func.lower(OrderDocument.id).like(pattern),
                    func.lower(OrderDocument.customer_name).like(pattern),
                    func.lower(OrderDocument.customer_email).like(pattern),
                    func.lower(OrderDocument.customer_phone).like(pattern),
                )
            )

        try:
            rows = list(self.db.scalars(query))
        except SQLAlchemyError as err:
            raise StoreError("Could not list orders") from err

        orders = [Order.model_validate(row.document) for row in rows]
        return sort_orders(
            (order for order in orders if matches_filter(order, order_filter)),
            order_filter.sort,
        )

    def delete(self, order_id: str) -> bool:
        try:
            row = self.db.get(OrderDocument, order_id)
        except SQLAlchemyError as err:
            raise StoreError("Could not read order") from err
        if row is None:
            return False
        self.db.delete(row)
        self._commit(order_id)
        return True

    def _commit(self, order_id: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as err:
            self.db.rollback()
            log_event("order_store_commit_failed", order_id=order_id)
            raise StoreError("Could not write order") from err

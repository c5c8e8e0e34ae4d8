from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import resolved_store_backend
from app.db.session import SessionLocal, get_db
from app.integrations.url_shortener import UrlShortenerProtocol, get_url_shortener
from app.services.db_store import SqlOrderStore
from app.services.store import OrderStore, local_store


def _optional_db() -> Iterator[Session | None]:
    if resolved_store_backend() != "db":
        yield None
        return
    yield from get_db()


def get_order_store(db: Session | None = Depends(_optional_db)) -> OrderStore:
    if db is None:
        return local_store
    return SqlOrderStore(db)


def get_shortener() -> UrlShortenerProtocol:
    return get_url_shortener()


@contextmanager
def order_store_scope() -> Iterator[OrderStore]:
    """Store for work that outlives the request, such as background tasks."""
    if resolved_store_backend() != "db":
        yield local_store
        return
    with SessionLocal() as db:
        yield SqlOrderStore(db)

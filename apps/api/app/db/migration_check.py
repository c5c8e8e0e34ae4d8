from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from app.config import resolved_store_backend, settings
from app.db.base import Base
from app.observability import log_event

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


@dataclass(frozen=True)
class MigrationState:
    current: str | None
    head: str

    @property
    def up_to_date(self) -> bool:
        return self.current == self.head


def get_alembic_head_revision() -> str:
    script = ScriptDirectory.from_config(Config(str(ALEMBIC_INI)))
    return script.get_current_head()


def get_current_db_revision(engine: Engine) -> str | None:
    if not inspect(engine).has_table("alembic_version"):
        return None
    with engine.connect() as connection:
        return connection.execute(
            text("SELECT version_num FROM alembic_version LIMIT 1")
        ).scalar_one_or_none()


def migration_state(engine: Engine) -> MigrationState:
    return MigrationState(current=get_current_db_revision(engine), head=get_alembic_head_revision())


def assert_db_is_up_to_date(engine: Engine) -> None:
    state = migration_state(engine)
    if not state.up_to_date:
        raise RuntimeError(
            "Database schema not up to date "
            f"(current={state.current or 'none'}, head={state.head}). "
            "Run: alembic upgrade head"
        )


def maybe_create_schema(engine: Engine) -> None:
    """Create the order document table directly; development convenience for the db backend."""
    if not settings.auto_create_schema or resolved_store_backend() != "db":
        return

    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    log_event("schema_created")

import os

os.environ.setdefault("JERSEY_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JERSEY_TESTING", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import app.models  # noqa: F401,E402
from app.auth.tokens import issue_session_token  # noqa: E402
from app.config import settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import engine as app_engine  # noqa: E402
from app.dependencies import get_shortener  # noqa: E402
from app.main import app  # noqa: E402
from app.observability import metrics_store  # noqa: E402
from app.services.db_store import SqlOrderStore  # noqa: E402
from app.services.store import LocalOrderStore, reset_local_store  # noqa: E402


class StubShortener:
    def __init__(self, result: str | None = None) -> None:
        self.result = result
        self.calls: list[str] = []

    def shorten(self, long_url: str) -> str | None:
        self.calls.append(long_url)
        return self.result


@pytest.fixture(scope="session", autouse=True)
def enable_testing_mode():
    original = settings.testing
    settings.testing = True
    yield
    settings.testing = original


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield


@pytest.fixture(autouse=True)
def reset_in_memory_store():
    reset_local_store()
    yield


@pytest.fixture(autouse=True)
def reset_metrics_store():
    metrics_store.reset()
    yield


@pytest.fixture
def db_session():
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=app_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(params=["memory", "db"])
def order_store(request, db_session):
    if request.param == "memory":
        return LocalOrderStore()
    return SqlOrderStore(db_session)


@pytest.fixture
def shortener():
    return StubShortener()


@pytest.fixture
def client(shortener):
    app.dependency_overrides[get_shortener] = lambda: shortener
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def staff_headers() -> dict[str, str]:
    token = issue_session_token(settings.staff_username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_backend():
    original = settings.store_backend
    settings.store_backend = "db"
    yield
    settings.store_backend = original


def _jersey_fields(quantity: int, **overrides) -> dict[str, str]:
    fields: dict[str, str] = {}
    for index in range(quantity):
        fields.update(
            {
                f"jersey_{index}_type": "Player Jersey",
                f"jersey_{index}_name": f"Player {index + 1}",
                f"jersey_{index}_number": str(index + 7),
                f"jersey_{index}_size_category": "Adult",
                f"jersey_{index}_size": "M",
                f"jersey_{index}_sleeve": "Short Sleeve",
                f"jersey_{index}_shorts": "Yes",
                f"jersey_{index}_additional": "",
            }
        )
    fields.update(overrides)
    return fields


@pytest.fixture
def jersey_fields():
    return _jersey_fields


@pytest.fixture
def order_payload() -> dict:
    return {
        "customerName": "Amina Yusuf",
        "customerEmail": "amina@example.com",
        "customerPhone": "+234-800-555-0101",
        "jerseyQuantity": 2,
        "specialInstructions": "Club crest on the left chest",
    }

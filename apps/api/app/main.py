import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from app.config import (
    allowed_origins,
    ensure_secure_runtime_settings,
    resolved_store_backend,
    settings,
)
from app.db.migration_check import assert_db_is_up_to_date, maybe_create_schema
from app.db.session import engine
from app.observability import configure_logging, log_event, metrics_store, set_request_id
from app.routers.auth import router as auth_router
from app.routers.customer import router as customer_router
from app.routers.dashboard import router as dashboard_router
from app.routers.health import router as health_router
from app.routers.metrics import router as metrics_router
from app.routers.orders import router as orders_router
from app.services.detail_form import DetailValidationError
from app.services.store import StoreError

STORE_FAILURE_MESSAGE = "Failed to update order. Please try again."


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    ensure_secure_runtime_settings()
    if settings.require_migrations and resolved_store_backend() == "db":
        assert_db_is_up_to_date(engine)
    maybe_create_schema(engine)
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Jersey order intake, customer detail collection and staff review",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    metrics_store.increment("http_requests_total")
    metrics_store.observe("http_request_duration_seconds", elapsed)
    log_event("http_request", order_id=request.path_params.get("order_id"))
    return response


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    metrics_store.increment("store_failures_total")
    log_event(f"store_failure:{exc}", order_id=request.path_params.get("order_id"))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": STORE_FAILURE_MESSAGE},
    )


@app.exception_handler(DetailValidationError)
async def detail_validation_error_handler(
    request: Request, exc: DetailValidationError
) -> JSONResponse:
    metrics_store.increment("detail_validation_failures_total")
    log_event("detail_validation_failed", order_id=request.path_params.get("order_id"))
    return JSONResponse(
        status_code=422,
        content={"detail": exc.to_detail()},
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(customer_router)
app.include_router(dashboard_router)
app.include_router(metrics_router)

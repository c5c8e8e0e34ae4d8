from fastapi import APIRouter, Depends

from app.auth.dependencies import StaffContext, require_staff
from app.models.domain import now_utc
from app.observability import metrics_store
from app.schemas.metrics import MetricsResponse

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", summary="Process metrics", response_model=MetricsResponse)
def metrics_endpoint(_staff: StaffContext = Depends(require_staff)) -> MetricsResponse:
    snapshot = metrics_store.snapshot()
    return MetricsResponse(
        collected_at=now_utc(),
        counters=snapshot.counters,
        timings=snapshot.timings,
    )

from fastapi import APIRouter, Depends

from app.auth.dependencies import StaffContext, require_staff, verify_staff_credentials
from app.auth.tokens import issue_session_token, unauthorized
from app.config import settings
from app.observability import log_event, metrics_store
from app.schemas.auth import LoginRequest, SessionResponse, TokenResponse

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse, summary="Staff login")
def login_endpoint(payload: LoginRequest) -> TokenResponse:
    if not verify_staff_credentials(payload.username, payload.password):
        metrics_store.increment("staff_login_failures_total")
        log_event("staff_login_failed")
        raise unauthorized("Invalid username or password")

    log_event("staff_login")
    return TokenResponse(
        access_token=issue_session_token(payload.username),
        expires_in=settings.session_ttl_s,
    )


@router.get("/session", response_model=SessionResponse, summary="Current staff session")
def session_endpoint(staff: StaffContext = Depends(require_staff)) -> SessionResponse:
    return SessionResponse(username=staff.username, expires_at=staff.expires_at)

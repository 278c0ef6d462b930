from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from .. import schemas

router = APIRouter(prefix="/api", tags=["health"])


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=schemas.HealthResponse)
def healthcheck(request: Request) -> schemas.HealthResponse:
    return schemas.HealthResponse(
        status="ok",
        timestamp=_utc_timestamp(),
        activeConversations=request.app.state.session_store.size(),
    )

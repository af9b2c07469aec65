from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.schemas.scan import HealthOut

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
async def health(request: Request):
    return HealthOut(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=request.app.state.settings.APP_VERSION,
    )

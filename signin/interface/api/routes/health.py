"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from signin.adapter.oauth import StrategyRegistrar
from signin.domain.value import AuthProvider

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    providers: list[AuthProvider]


@router.get("/health", response_model=HealthResponse)
async def health_check(registrar: FromDishka[StrategyRegistrar]) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status and the identity providers accepting logins
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        providers=registrar.providers,
    )

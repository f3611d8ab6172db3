"""
Health check: жив ли сервис, доступна ли БД.

Эндпоинт для оркестраторов (Docker, k8s) и мониторинга.
"""
from fastapi import APIRouter, Request

from resume_api.schemas.common import SuccessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SuccessResponse[dict])
def health(request: Request):
    """Проверка живости сервиса и MongoDB."""
    mongo = "connected" if request.app.state.mongo.ping() else "disconnected"
    return SuccessResponse(data={"status": "ok", "mongo": mongo})

from fastapi import APIRouter, Depends

from captcha_keeper.infrastructure.redis_cache.pool import ping_redis
from captcha_keeper.presentation.dependencies import get_app_settings
from captcha_keeper.settings import Settings


router = APIRouter()


@router.get("/healthz")
async def healthz(settings: Settings = Depends(get_app_settings)) -> dict:
    body = {"status": "ok", "storage": settings.captcha_storage}
    if settings.captcha_storage == "redis" and not await ping_redis():
        body["status"] = "degraded"
    return body

from fastapi import APIRouter

from captcha_keeper.presentation.routers.v1.captcha import router as captcha_router
from captcha_keeper.presentation.routes.health import router as health_router

api = APIRouter()
api.include_router(health_router)

# Add all v1 routers here
routers = (captcha_router,)
for router in routers:
    api.include_router(router, prefix="/v1")

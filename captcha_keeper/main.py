from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from captcha_keeper.infrastructure.generator.image_generator import (
    ImageCaptchaGenerator,
)
from captcha_keeper.infrastructure.redis_cache.pool import close_redis
from captcha_keeper.infrastructure.storage.factory import build_storage
from captcha_keeper.infrastructure.sweeper.expiry_sweeper import ExpirySweeper
from captcha_keeper.logging import setup_logging
from captcha_keeper.presentation.api import api
from captcha_keeper.settings import Settings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    settings: Settings = app.state.settings
    if settings.captcha_storage == "redis":
        # a previous shutdown closed the shared client; bind a fresh one
        app.state.captcha_storage = build_storage(settings)
    sweeper = None
    if settings.captcha_sweeper_enabled:
        # shares the storage instance with the request handlers
        sweeper = ExpirySweeper(
            app.state.captcha_storage,
            max_age_seconds=settings.captcha_max_age_seconds,
            interval_seconds=settings.captcha_sweep_interval_seconds,
        )
        sweeper.start()
    app.state.captcha_sweeper = sweeper

    try:
        yield
    finally:
        # shutdown
        if sweeper is not None:
            await sweeper.stop()
        await close_redis()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Captcha API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.captcha_storage = build_storage(settings)
    app.state.captcha_generator = ImageCaptchaGenerator(
        answer_length=settings.captcha_answer_length,
        width=settings.captcha_image_width,
        height=settings.captcha_image_height,
        fonts=settings.captcha_fonts,
        font_sizes=settings.captcha_font_sizes,
    )
    app.include_router(api)
    return app


app = create_app()

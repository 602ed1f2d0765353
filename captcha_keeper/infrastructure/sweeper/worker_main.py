from __future__ import annotations

import asyncio
import signal
from contextlib import suppress
import logging

from captcha_keeper.logging import setup_logging
from captcha_keeper.settings import get_settings
from captcha_keeper.infrastructure.redis_cache.pool import close_redis
from captcha_keeper.infrastructure.storage.factory import build_storage
from captcha_keeper.infrastructure.sweeper.expiry_sweeper import ExpirySweeper

logger = logging.getLogger(__name__)


async def _run() -> None:
    """Sweep a shared (redis) store from its own process, one per deployment."""
    settings = get_settings()
    setup_logging(settings.log_level)

    if settings.captcha_storage == "memory":
        logger.warning(
            "sweeper worker: memory storage is per-process, nothing to sweep here"
        )

    sweeper = ExpirySweeper(
        build_storage(settings),
        max_age_seconds=settings.captcha_max_age_seconds,
        interval_seconds=settings.captcha_sweep_interval_seconds,
    )

    stop = asyncio.Event()

    def _on_signal(*_: object) -> None:
        logger.info("sweeper worker: stop signal received")
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, _on_signal)

    sweeper.start()
    logger.info("sweeper worker: started")

    await stop.wait()

    await sweeper.stop()
    await close_redis()
    logger.info("sweeper worker: stopped cleanly")


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()

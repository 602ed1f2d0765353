from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort

logger = logging.getLogger("captcha_keeper.infrastructure.sweeper")


class ExpirySweeper:
    """
    Periodically deletes captcha records older than `max_age_seconds`.

    Sleeps first, then sweeps. Errors from the storage are logged and the
    loop carries on; it only ends when its task is cancelled.
    """

    def __init__(
        self,
        storage: CaptchaStoragePort,
        *,
        max_age_seconds: float = 300,
        interval_seconds: float = 60,
    ) -> None:
        self.storage = storage
        self.max_age_seconds = max_age_seconds
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_forever(self) -> None:
        logger.info(
            "expiry sweeper started",
            extra={
                "max_age_seconds": self.max_age_seconds,
                "interval_seconds": self.interval_seconds,
            },
        )
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.sweep_once()

    async def sweep_once(self) -> bool:
        """One sweep. Returns False if the storage raised."""
        try:
            await self.storage.clear_expired(self.max_age_seconds)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "expiry sweep failed; will retry next interval",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return False
        return True

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.create_task(
            self.run_forever(), name="captcha-expiry-sweeper"
        )
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("expiry sweeper stopped")

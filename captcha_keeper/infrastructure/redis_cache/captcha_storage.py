from __future__ import annotations

import logging
import time
from typing import Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from captcha_keeper.domain.errors import StorageError
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.domain.services import new_token

logger = logging.getLogger(__name__)


class RedisCaptchaStorage(CaptchaStoragePort):
    """
    Persistent storage: one hash per token at <prefix><token>.

        answer      the answer, UTF-8
        created_at  creation time, epoch milliseconds

    Single-key HSET/HGET/DEL are atomic in Redis, so no lock is needed here.
    The client must be created with decode_responses=True.
    """

    def __init__(
        self,
        redis: Redis,
        *,
        key_prefix: str = "captcha:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._clock = clock

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def store_answer(self, answer: str) -> str:
        token = new_token()
        logger.debug("storing captcha answer", extra={"token": token})
        try:
            await self._redis.hset(
                self._key(token),
                mapping={"answer": answer, "created_at": self._now_ms()},
            )
        except RedisError as exc:
            raise StorageError(f"failed to store captcha answer: {exc}") from exc
        return token

    async def get_answer(self, token: str) -> str | None:
        try:
            answer = await self._redis.hget(self._key(token), "answer")
        except (RedisError, UnicodeDecodeError) as exc:
            logger.error(
                "failed to read captcha answer",
                extra={"token": token, "error": str(exc)},
            )
            raise StorageError(f"failed to read captcha answer: {exc}") from exc
        return answer

    async def clear_by_token(self, token: str) -> bool:
        try:
            removed = await self._redis.delete(self._key(token))
        except RedisError as exc:
            raise StorageError(f"failed to delete captcha token: {exc}") from exc
        return int(removed) > 0

    async def clear_expired(self, max_age_seconds: float) -> None:
        now_ms = self._now_ms()
        max_age_ms = int(max_age_seconds * 1000)

        # Listing the keys is the only step allowed to fail the whole sweep.
        try:
            pattern = f"{self._prefix}*"
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
        except RedisError as exc:
            raise StorageError(f"failed to list captcha keys: {exc}") from exc

        cleared = 0
        for key in keys:
            try:
                created_at = await self._redis.hget(key, "created_at")
                if created_at is None:
                    # consumed since the scan
                    continue
                if now_ms - int(created_at) < max_age_ms:
                    continue
                cleared += await self._redis.delete(key)
            except (RedisError, UnicodeDecodeError, ValueError) as exc:
                logger.warning(
                    "failed to clear expired captcha; skipping",
                    extra={"key": key, "error": str(exc)},
                )
        if cleared:
            logger.info("cleared expired captchas", extra={"count": cleared})

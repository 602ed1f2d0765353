from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from captcha_keeper.domain.entities import AnswerRecord
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.domain.services import new_token

logger = logging.getLogger(__name__)


class MemoryCaptchaStorage(CaptchaStoragePort):
    """
    In-process storage. Never raises StorageError.

    The lock is only held around the dict operation, so it is safe to share
    one instance between asyncio tasks and worker threads.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._records: dict[str, AnswerRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    async def store_answer(self, answer: str) -> str:
        token = new_token()
        record = AnswerRecord(token=token, answer=answer, created_at=self._clock())
        with self._lock:
            self._records[token] = record
        return token

    async def get_answer(self, token: str) -> str | None:
        with self._lock:
            record = self._records.get(token)
        return record.answer if record is not None else None

    async def clear_expired(self, max_age_seconds: float) -> None:
        now = self._clock()
        with self._lock:
            expired = [
                token
                for token, record in self._records.items()
                if record.age(now) >= max_age_seconds
            ]
            for token in expired:
                del self._records[token]
        if expired:
            logger.info("cleared expired captchas", extra={"count": len(expired)})

    async def clear_by_token(self, token: str) -> bool:
        with self._lock:
            return self._records.pop(token, None) is not None

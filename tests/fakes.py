import asyncio
import fnmatch

from redis.exceptions import ConnectionError as RedisConnectionError

from captcha_keeper.domain.errors import GeneratorError, StorageError
from captcha_keeper.infrastructure.storage.memory import MemoryCaptchaStorage


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """The handful of hash/key commands RedisCaptchaStorage uses, in a dict."""

    def __init__(self):
        self.hashes: dict[str, dict[str, str]] = {}
        self.fail_on: set[str] = set()
        self.fail_keys: set[str] = set()
        self.calls: list[tuple] = []

    def _maybe_fail(self, command: str, key: str | None = None) -> None:
        if command in self.fail_on or (key is not None and key in self.fail_keys):
            raise RedisConnectionError(f"{command} failed")

    async def hset(self, key: str, mapping: dict) -> int:
        self.calls.append(("hset", key))
        self._maybe_fail("hset", key)
        fields = self.hashes.setdefault(key, {})
        added = len(set(mapping) - set(fields))
        fields.update({k: str(v) for k, v in mapping.items()})
        return added

    async def hget(self, key: str, field: str) -> str | None:
        self.calls.append(("hget", key))
        self._maybe_fail("hget", key)
        return self.hashes.get(key, {}).get(field)

    async def delete(self, *keys: str) -> int:
        self.calls.append(("delete", *keys))
        removed = 0
        for key in keys:
            self._maybe_fail("delete", key)
            if self.hashes.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match: str | None = None):
        self._maybe_fail("scan")
        for key in list(self.hashes):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key


class FakeGenerator:
    def __init__(self, answer: str = "7fQ2", image: bytes = b"\x89PNG-fake"):
        self.answer = answer
        self.image = image
        self.calls = 0

    async def new_captcha(self) -> tuple[str, bytes]:
        self.calls += 1
        return self.answer, self.image


class FakeErroredGenerator:
    async def new_captcha(self) -> tuple[str, bytes]:
        raise GeneratorError("font missing")


class FakeErroredStorage:
    """Every operation fails like a backend that lost its connection."""

    def __init__(self):
        self.calls: list[str] = []

    async def store_answer(self, answer: str) -> str:
        self.calls.append("store_answer")
        raise StorageError("disk full")

    async def get_answer(self, token: str) -> str | None:
        self.calls.append("get_answer")
        raise StorageError("connection reset")

    async def clear_expired(self, max_age_seconds: float) -> None:
        self.calls.append("clear_expired")
        raise StorageError("connection reset")

    async def clear_by_token(self, token: str) -> bool:
        self.calls.append("clear_by_token")
        raise StorageError("connection reset")


class FakeUndeletableStorage(MemoryCaptchaStorage):
    """Reads work, deletes fail."""

    async def clear_by_token(self, token: str) -> bool:
        raise StorageError("read-only replica")


class FakeSweepStorage:
    """Records clear_expired calls; fails the first `fail_times` of them."""

    def __init__(self, fail_times: int = 0):
        self.fail_times = fail_times
        self.max_ages: list[float] = []
        self.swept = asyncio.Event()

    async def clear_expired(self, max_age_seconds: float) -> None:
        self.max_ages.append(max_age_seconds)
        if len(self.max_ages) <= self.fail_times:
            raise StorageError("sweep failed")
        self.swept.set()

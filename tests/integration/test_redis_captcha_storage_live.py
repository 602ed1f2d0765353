import asyncio
from uuid import uuid4

import pytest

from captcha_keeper.application.verify_captcha import CaptchaVerifier
from captcha_keeper.domain.entities import CaptchaOutcome
from captcha_keeper.infrastructure.redis_cache.captcha_storage import (
    RedisCaptchaStorage,
)


async def _flush_prefix(redis, prefix: str) -> None:
    keys = await redis.keys(f"{prefix}*")
    if keys:
        await redis.delete(*keys)


@pytest.fixture()
def prefix():
    return f"captcha:test:{uuid4()}:"


@pytest.mark.asyncio
async def test_store_get_clear(redis_client, prefix):
    storage = RedisCaptchaStorage(redis_client, key_prefix=prefix)

    token = await storage.store_answer("Answer")
    assert await storage.get_answer(token) == "Answer"

    stored = await redis_client.hgetall(f"{prefix}{token}")
    assert stored["answer"] == "Answer"
    assert int(stored["created_at"]) > 0

    assert await storage.clear_by_token(token) is True
    assert await storage.clear_by_token(token) is False
    assert await storage.get_answer(token) is None
    assert await redis_client.exists(f"{prefix}{token}") == 0


@pytest.mark.asyncio
async def test_clear_expired_with_max_age(redis_client, prefix):
    storage = RedisCaptchaStorage(redis_client, key_prefix=prefix)
    token = await storage.store_answer("answer")

    await storage.clear_expired(1)
    assert await storage.get_answer(token) == "answer"

    await asyncio.sleep(1.1)
    await storage.clear_expired(1)
    assert await storage.get_answer(token) is None

    await _flush_prefix(redis_client, prefix)


@pytest.mark.asyncio
async def test_clear_expired_zero(redis_client, prefix):
    storage = RedisCaptchaStorage(redis_client, key_prefix=prefix)
    tokens = [await storage.store_answer(f"a{i}") for i in range(5)]

    await storage.clear_expired(0)

    assert [await storage.get_answer(t) for t in tokens] == [None] * 5
    assert await redis_client.keys(f"{prefix}*") == []


@pytest.mark.asyncio
async def test_single_use_under_race(redis_client, prefix):
    storage = RedisCaptchaStorage(redis_client, key_prefix=prefix)
    verifier = CaptchaVerifier(storage)
    token = await storage.store_answer("4242")

    outcomes = await asyncio.gather(
        *(verifier.verify(token, "4242") for _ in range(5))
    )

    assert outcomes.count(CaptchaOutcome.PASSED) == 1
    assert outcomes.count(CaptchaOutcome.WRONG_TOKEN) == 4
    assert await redis_client.exists(f"{prefix}{token}") == 0

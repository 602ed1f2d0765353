from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from captcha_keeper.settings import get_settings

_client: Optional[Redis] = None


def get_redis(url: Optional[str] = None) -> Redis:
    """
    Lazy shared Redis client, REDIS_URL from settings unless `url` is given.
    decode_responses=True -> captcha answers come back as str, not bytes.
    The first call wins; later `url` arguments are ignored.
    """
    global _client
    if _client is None:
        _client = Redis.from_url(
            url or get_settings().redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _client


async def ping_redis() -> bool:
    if _client is None:
        return False
    try:
        return bool(await _client.ping())
    except Exception:  # noqa: BLE001
        return False


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None

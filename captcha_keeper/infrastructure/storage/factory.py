from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.infrastructure.redis_cache.captcha_storage import (
    RedisCaptchaStorage,
)
from captcha_keeper.infrastructure.redis_cache.pool import get_redis
from captcha_keeper.infrastructure.storage.memory import MemoryCaptchaStorage
from captcha_keeper.settings import Settings


def build_storage(settings: Settings) -> CaptchaStoragePort:
    if settings.captcha_storage == "redis":
        return RedisCaptchaStorage(
            get_redis(settings.redis_url), key_prefix=settings.captcha_key_prefix
        )
    return MemoryCaptchaStorage()

import pytest

from captcha_keeper.application.verify_captcha import CaptchaVerifier
from captcha_keeper.infrastructure.redis_cache.captcha_storage import (
    RedisCaptchaStorage,
)
from captcha_keeper.infrastructure.storage.memory import MemoryCaptchaStorage
from tests.fakes import FakeClock, FakeGenerator, FakeRedis


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def storage(clock):
    return MemoryCaptchaStorage(clock=clock)


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def redis_storage(fake_redis, clock):
    return RedisCaptchaStorage(fake_redis, clock=clock)


@pytest.fixture()
def verifier(storage):
    return CaptchaVerifier(storage)


@pytest.fixture()
def generator():
    return FakeGenerator()

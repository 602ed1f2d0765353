import pytest
from fastapi.testclient import TestClient

from captcha_keeper.main import create_app
from captcha_keeper.presentation.dependencies import get_captcha_generator
from captcha_keeper.settings import Settings
from tests.fakes import FakeGenerator


def make_settings(**overrides) -> Settings:
    values = {
        "captcha_storage": "memory",
        "captcha_sweeper_enabled": False,
        "captcha_finder": "header",
        "captcha_case_sensitive": True,
        "captcha_skip_paths": [],
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def settings(request):
    # tests tweak it with @pytest.mark.parametrize("settings", [{...}], indirect=True)
    return make_settings(**getattr(request, "param", {}))


@pytest.fixture()
def app_and_deps(settings):
    app = create_app(settings)
    generator = FakeGenerator(answer="7fQ2")
    app.dependency_overrides[get_captcha_generator] = lambda: generator

    try:
        yield app, app.state.captcha_storage, generator
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)

from fastapi import Depends, Request

from captcha_keeper.application.verify_captcha import CaptchaVerifier
from captcha_keeper.domain.entities import CaptchaOutcome
from captcha_keeper.domain.ports.captcha_finder import CaptchaFinderPort
from captcha_keeper.domain.ports.captcha_generator import CaptchaGeneratorPort
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.presentation.finders import (
    FINDERS,
    Skipper,
    none_skipper,
    path_skipper,
)
from captcha_keeper.settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_captcha_storage(request: Request) -> CaptchaStoragePort:
    # This is set in captcha_keeper.main create_app()
    return request.app.state.captcha_storage


def get_captcha_generator(request: Request) -> CaptchaGeneratorPort:
    return request.app.state.captcha_generator


def get_captcha_verifier(
    storage: CaptchaStoragePort = Depends(get_captcha_storage),
    settings: Settings = Depends(get_app_settings),
) -> CaptchaVerifier:
    return CaptchaVerifier(storage, case_sensitive=settings.captcha_case_sensitive)


def get_captcha_finder(
    settings: Settings = Depends(get_app_settings),
) -> CaptchaFinderPort:
    return FINDERS[settings.captcha_finder]()


def get_captcha_skipper(settings: Settings = Depends(get_app_settings)) -> Skipper:
    if settings.captcha_skip_paths:
        return path_skipper(*settings.captcha_skip_paths)
    return none_skipper


async def captcha_outcome(
    request: Request,
    verifier: CaptchaVerifier = Depends(get_captcha_verifier),
    finder: CaptchaFinderPort = Depends(get_captcha_finder),
    skipper: Skipper = Depends(get_captcha_skipper),
) -> CaptchaOutcome:
    """
    Route dependency: the captcha outcome for this request.

    The result is returned to the route, not stashed on the request; routes
    decide what each outcome means for them.
    """
    if skipper(request):
        return await verifier.verify(None, None, skip=True)
    token = await finder.find_token(request)
    answer = await finder.find_answer(request)
    return await verifier.verify(token, answer)

import base64

from fastapi import APIRouter, Depends, HTTPException, Response, status

from captcha_keeper.application.issue_captcha import issue_captcha
from captcha_keeper.domain.entities import CaptchaOutcome
from captcha_keeper.domain.errors import GeneratorError, StorageError
from captcha_keeper.domain.ports.captcha_generator import CaptchaGeneratorPort
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.presentation.dependencies import (
    captcha_outcome,
    get_captcha_generator,
    get_captcha_storage,
)
from captcha_keeper.schemas.responses import CaptchaOut, CaptchaVerifyOut

router = APIRouter(prefix="/captcha", tags=["Captcha"])

_STATUS_BY_OUTCOME = {
    CaptchaOutcome.PASSED: status.HTTP_200_OK,
    CaptchaOutcome.SKIPPED: status.HTTP_200_OK,
    CaptchaOutcome.STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.get("", response_model=CaptchaOut)
async def get_captcha(
    generator: CaptchaGeneratorPort = Depends(get_captcha_generator),
    storage: CaptchaStoragePort = Depends(get_captcha_storage),
):
    try:
        token, image = await issue_captcha(generator, storage)
    except GeneratorError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="captcha generation failed",
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="captcha storage unavailable",
        )
    return CaptchaOut(token=token, image=base64.b64encode(image).decode("ascii"))


@router.post("/verify", response_model=CaptchaVerifyOut)
async def post_verify_captcha(
    response: Response,
    outcome: CaptchaOutcome = Depends(captcha_outcome),
):
    response.status_code = _STATUS_BY_OUTCOME.get(
        outcome, status.HTTP_400_BAD_REQUEST
    )
    return CaptchaVerifyOut(outcome=outcome)

from pydantic import BaseModel, Field

from captcha_keeper.domain.entities import CaptchaOutcome


class CaptchaOut(BaseModel):
    token: str = Field(..., description="Opaque token to send back with the answer")
    image: str = Field(..., description="The challenge as a base64 encoded PNG")


class CaptchaVerifyOut(BaseModel):
    outcome: CaptchaOutcome

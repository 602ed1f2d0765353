from typing import Protocol

from fastapi import Request

from captcha_keeper.domain.entities import Extraction


class CaptchaFinderPort(Protocol):
    async def find_token(self, request: Request) -> Extraction:
        """Locate the captcha token in the request."""

    async def find_answer(self, request: Request) -> Extraction:
        """Locate the submitted captcha answer in the request."""

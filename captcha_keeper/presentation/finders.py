"""
Request finders: where a captcha token/answer lives in an inbound request.

Each finder returns an Extraction per field:
    absent     the field isn't there
    malformed  the field is there but unusable (bad header bytes, a file upload)
    present    the string value
"""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from captcha_keeper.domain.entities import Extraction
from captcha_keeper.domain.ports.captcha_finder import CaptchaFinderPort

Skipper = Callable[[Request], bool]

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _is_visible_ascii(value: str) -> bool:
    return all(c == "\t" or " " <= c <= "~" for c in value)


class HeaderFinder(CaptchaFinderPort):
    def __init__(
        self,
        token_header: str = "x-captcha-token",
        answer_header: str = "x-captcha-answer",
    ) -> None:
        self.token_header = token_header
        self.answer_header = answer_header

    def _find(self, request: Request, name: str) -> Extraction:
        value = request.headers.get(name)
        if value is None:
            return Extraction.absent()
        if not _is_visible_ascii(value):
            return Extraction.malformed()
        return Extraction.present(value)

    async def find_token(self, request: Request) -> Extraction:
        return self._find(request, self.token_header)

    async def find_answer(self, request: Request) -> Extraction:
        return self._find(request, self.answer_header)


class FormFinder(CaptchaFinderPort):
    def __init__(
        self,
        token_name: str = "captcha_token",
        answer_name: str = "captcha_answer",
    ) -> None:
        self.token_name = token_name
        self.answer_name = answer_name

    async def _form(self, request: Request) -> Optional[FormData]:
        if getattr(request.state, "captcha_form_unparseable", False):
            return None
        try:
            # starlette caches the parsed form on the request
            return await request.form()
        except (MultiPartException, HTTPException):
            # inside an app starlette reraises parse errors as HTTP 400;
            # the body is consumed by then so a second parse is not possible
            request.state.captcha_form_unparseable = True
            return None

    async def _find(self, request: Request, name: str) -> Extraction:
        content_type = request.headers.get("content-type", "")
        if not content_type.startswith(_FORM_CONTENT_TYPES):
            return Extraction.absent()
        form = await self._form(request)
        if form is None:
            return Extraction.absent()

        value = form.get(name)
        if value is None:
            return Extraction.absent()
        if isinstance(value, UploadFile):
            return Extraction.malformed()
        return Extraction.present(value)

    async def find_token(self, request: Request) -> Extraction:
        return await self._find(request, self.token_name)

    async def find_answer(self, request: Request) -> Extraction:
        return await self._find(request, self.answer_name)


class QueryFinder(CaptchaFinderPort):
    def __init__(self, token_name: str = "c_t", answer_name: str = "c_a") -> None:
        self.token_name = token_name
        self.answer_name = answer_name

    def _find(self, request: Request, name: str) -> Extraction:
        value = request.query_params.get(name)
        if value is None:
            return Extraction.absent()
        return Extraction.present(value)

    async def find_token(self, request: Request) -> Extraction:
        return self._find(request, self.token_name)

    async def find_answer(self, request: Request) -> Extraction:
        return self._find(request, self.answer_name)


FINDERS: dict[str, type[CaptchaFinderPort]] = {
    "header": HeaderFinder,
    "form": FormFinder,
    "query": QueryFinder,
}


def none_skipper(request: Request) -> bool:
    return False


def path_skipper(*paths: str) -> Skipper:
    """Skip the check for requests to any of `paths`."""
    skipped = frozenset(paths)

    def _skip(request: Request) -> bool:
        return request.url.path in skipped

    return _skip

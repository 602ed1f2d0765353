from __future__ import annotations

import logging

from captcha_keeper.domain.entities import CaptchaOutcome, Extraction
from captcha_keeper.domain.errors import StorageError
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort
from captcha_keeper.domain.services import answers_match

logger = logging.getLogger(__name__)


class CaptchaVerifier:
    """
    Classifies a (token, answer) pair and consumes the token on success.

    Checks run in a fixed order: skip, token, answer, then storage. An
    unknown token and an expired or already used one all come back as
    WRONG_TOKEN.
    """

    def __init__(self, storage: CaptchaStoragePort, *, case_sensitive: bool = True):
        self.storage = storage
        self.case_sensitive = case_sensitive

    async def verify(
        self,
        token: Extraction | str | None,
        answer: Extraction | str | None,
        skip: bool = False,
    ) -> CaptchaOutcome:
        if skip:
            logger.info("captcha check skipped")
            return CaptchaOutcome.SKIPPED

        found_token = Extraction.coerce(token)
        if found_token.status == "absent":
            logger.info("captcha token not found in request")
            return CaptchaOutcome.TOKEN_NOT_FOUND
        if found_token.status == "malformed":
            logger.warning("invalid captcha token in request")
            return CaptchaOutcome.WRONG_TOKEN

        found_answer = Extraction.coerce(answer)
        if found_answer.status == "absent":
            logger.info("captcha answer not found in request")
            return CaptchaOutcome.ANSWER_NOT_FOUND
        if found_answer.status == "malformed":
            logger.warning("invalid captcha answer in request")
            return CaptchaOutcome.WRONG_ANSWER

        return await self._check(found_token.value, found_answer.value)

    async def _check(self, token: str, answer: str) -> CaptchaOutcome:
        try:
            stored = await self.storage.get_answer(token)
        except StorageError as exc:
            logger.error(
                "failed to get captcha answer from storage",
                extra={"token": token, "error": str(exc)},
            )
            return CaptchaOutcome.STORAGE_ERROR

        if stored is None:
            logger.info("captcha token does not exist", extra={"token": token})
            return CaptchaOutcome.WRONG_TOKEN

        if not answers_match(stored, answer, case_sensitive=self.case_sensitive):
            # keep the record: the same token may be retried until it expires
            logger.info("captcha answer is wrong", extra={"token": token})
            return CaptchaOutcome.WRONG_ANSWER

        try:
            consumed = await self.storage.clear_by_token(token)
        except StorageError as exc:
            # the sweeper will remove it once it expires
            logger.warning(
                "failed to clear passed captcha token",
                extra={"token": token, "error": str(exc)},
            )
            consumed = True

        if not consumed:
            logger.info(
                "captcha token consumed by a concurrent attempt",
                extra={"token": token},
            )
            return CaptchaOutcome.WRONG_TOKEN

        logger.info("captcha passed", extra={"token": token})
        return CaptchaOutcome.PASSED

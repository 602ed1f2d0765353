from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from captcha.image import ImageCaptcha

from captcha_keeper.domain.errors import GeneratorError
from captcha_keeper.domain.ports.captcha_generator import CaptchaGeneratorPort
from captcha_keeper.domain.services import ANSWER_ALPHABET, generate_answer

logger = logging.getLogger(__name__)


class ImageCaptchaGenerator(CaptchaGeneratorPort):
    """Distorted-text PNG challenges rendered with `captcha.image.ImageCaptcha`."""

    def __init__(
        self,
        *,
        answer_length: int = 5,
        width: int = 160,
        height: int = 60,
        fonts: Sequence[str] = (),
        font_sizes: Sequence[int] = (),
        alphabet: str = ANSWER_ALPHABET,
    ) -> None:
        self.answer_length = answer_length
        self.alphabet = alphabet
        self._image = ImageCaptcha(
            width=width,
            height=height,
            fonts=list(fonts) or None,
            font_sizes=tuple(font_sizes) or None,
        )

    def _render(self, answer: str) -> bytes:
        return self._image.generate(answer, format="png").getvalue()

    async def new_captcha(self) -> tuple[str, bytes]:
        answer = generate_answer(self.answer_length, self.alphabet)
        try:
            # PIL drawing is CPU bound; keep it off the event loop
            image = await asyncio.to_thread(self._render, answer)
        except Exception as exc:  # noqa: BLE001
            logger.error("captcha rendering failed", extra={"error": str(exc)})
            raise GeneratorError(f"failed to render captcha: {exc}") from exc
        return answer, image

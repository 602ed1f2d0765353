from typing import Protocol


class CaptchaGeneratorPort(Protocol):
    async def new_captcha(self) -> tuple[str, bytes]:
        """Return (answer, image bytes). Raises GeneratorError on failure."""

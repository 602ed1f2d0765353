import logging

from captcha_keeper.domain.ports.captcha_generator import CaptchaGeneratorPort
from captcha_keeper.domain.ports.captcha_storage import CaptchaStoragePort

logger = logging.getLogger(__name__)


async def issue_captcha(
    generator: CaptchaGeneratorPort,
    storage: CaptchaStoragePort,
) -> tuple[str, bytes]:
    """
    Render a new challenge and bind its answer to a fresh token.

    GeneratorError and StorageError propagate to the caller.
    """
    answer, image = await generator.new_captcha()
    token = await storage.store_answer(answer)
    logger.info("captcha issued", extra={"token": token})
    return token, image

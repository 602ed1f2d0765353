class CaptchaError(Exception):
    """Base class for all captcha errors."""

    pass


class StorageError(CaptchaError):
    """The storage backend failed to read, write or decode a record."""

    pass


class GeneratorError(CaptchaError):
    """The challenge could not be rendered."""

    pass

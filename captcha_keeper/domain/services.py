# captcha_keeper/domain/services.py
from __future__ import annotations

import hmac
import secrets
import uuid

# Upper case letters and digits without 0/O and 1/I/L.
ANSWER_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


def new_token() -> str:
    """
    Fresh UUID4 text form (122 random bits from os.urandom).
    Collisions with a live token are not checked for; at this size the
    probability is negligible.
    """
    return str(uuid.uuid4())


def generate_answer(length: int = 5, alphabet: str = ANSWER_ALPHABET) -> str:
    if length < 1:
        raise ValueError("answer length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        # hmac.compare_digest supports str only when both are ASCII
        return hmac.compare_digest(a, b)
    except TypeError:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def answers_match(stored: str, submitted: str, *, case_sensitive: bool = True) -> bool:
    """Compare a stored answer to a submitted one under the case policy."""
    if not case_sensitive:
        stored = stored.casefold()
        submitted = submitted.casefold()
    return secure_compare(stored, submitted)

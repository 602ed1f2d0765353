from typing import Protocol


class CaptchaStoragePort(Protocol):
    async def store_answer(self, answer: str) -> str:
        """Persist the answer under a fresh token and return the token."""

    async def get_answer(self, token: str) -> str | None:
        """The stored answer, or None if the token is unknown/consumed/expired."""

    async def clear_expired(self, max_age_seconds: float) -> None:
        """Delete every record whose age is >= max_age_seconds."""

    async def clear_by_token(self, token: str) -> bool:
        """Delete the record. True if this call removed it, False if it was already gone."""

"""Normalized HTTP response value."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Response:
    """Status code and raw body text of a completed request.

    The body is left unparsed; callers decide how to interpret it.
    """

    code: int
    raw: str

    def get_code(self) -> int:
        """Return the HTTP status code."""
        return self.code

    def get_raw(self) -> str:
        """Return the response body as text."""
        return self.raw


__all__ = ["Response"]

"""Bearer token with a UTC expiry instant."""

import re
from datetime import UTC, datetime

from .errors import MalformedTimestampError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# strptime alone accepts unpadded fields, so the shape is checked first.
_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")

_ZERO_INSTANT = datetime.min.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(text: str) -> datetime:
    """Parse a ``YYYY-MM-DD HH:MM:SS`` string as an aware UTC datetime.

    Raises:
        MalformedTimestampError: If the text does not match the format or names
            an impossible date.

    """
    if not _TIMESTAMP_RE.fullmatch(text):
        msg = f"Malformed timestamp {text!r}; expected YYYY-MM-DD HH:MM:SS."
        raise MalformedTimestampError(msg)
    try:
        parsed = datetime.strptime(text, TIMESTAMP_FORMAT)  # noqa: DTZ007
    except ValueError as exc:
        msg = f"Malformed timestamp {text!r}: {exc}"
        raise MalformedTimestampError(msg) from exc
    return parsed.replace(tzinfo=UTC)


def format_timestamp(instant: datetime) -> str:
    """Serialize an aware UTC datetime as ``YYYY-MM-DD HH:MM:SS``."""
    # isoformat pads the year to four digits where strftime may not.
    return instant.replace(tzinfo=None).isoformat(sep=" ", timespec="seconds")


class Token:
    """A bearer credential and the instant it stops being usable.

    ``key`` and the validity are set independently. A new token has an empty
    key and the zero instant, so it is never valid until both are supplied.
    """

    def __init__(self, key: str = "", validity: str | None = None) -> None:
        """Create a token, optionally parsing ``validity`` right away.

        Args:
            key: The opaque credential string.
            validity: Expiry as ``YYYY-MM-DD HH:MM:SS`` UTC, or None for the zero instant.

        """
        self._key = key
        self._validity = _ZERO_INSTANT
        if validity is not None:
            self.set_validity(validity)

    def __repr__(self) -> str:
        masked = "***" if self._key else ""
        return f"Token(key={masked!r}, validity={self.validity!r})"

    def set_key(self, key: str) -> None:
        """Store the credential string verbatim."""
        self._key = key

    def set_validity(self, validity: str) -> None:
        """Parse and store the expiry instant.

        The previous instant is kept when parsing fails.

        Raises:
            MalformedTimestampError: If ``validity`` is not ``YYYY-MM-DD HH:MM:SS``.

        """
        self._validity = parse_timestamp(validity)

    def get_key(self) -> str:
        """Return the credential string."""
        return self._key

    def get_validity(self) -> str:
        """Return the expiry instant in ``YYYY-MM-DD HH:MM:SS`` form."""
        return format_timestamp(self._validity)

    @property
    def key(self) -> str:
        """The credential string."""
        return self._key

    @property
    def validity(self) -> str:
        """The expiry instant in ``YYYY-MM-DD HH:MM:SS`` form."""
        return self.get_validity()

    @property
    def expires_at(self) -> datetime:
        """The expiry instant as an aware UTC datetime."""
        return self._validity

    def is_valid(self) -> bool:
        """Return True when the key is set and the expiry lies strictly in the future."""
        if not self._key:
            return False
        return _utcnow() < self._validity


__all__ = ["TIMESTAMP_FORMAT", "Token", "format_timestamp", "parse_timestamp"]

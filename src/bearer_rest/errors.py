"""Exceptions raised by the bearer REST client.

Gating errors (``MissingTokenError``, ``InvalidTokenError``) are raised before
any network call. Transport failures wrap the underlying ``httpx`` exception
as ``__cause__``. Non-2xx responses are never errors at this layer.
"""


class RestError(Exception):
    """Base class for every error raised by this package."""


class MissingTokenError(RestError):
    """No bearer token is stored on the client."""


class InvalidTokenError(RestError):
    """The bearer token is expired, has an empty key, or was rejected on assignment."""


class MalformedTimestampError(RestError, ValueError):
    """A validity string does not match ``YYYY-MM-DD HH:MM:SS``."""


class ConfigTypeMismatchError(RestError, TypeError):
    """A configuration value was read under a type it was not stored as."""


class RequestCancelledError(RestError):
    """The caller's cancellation signal fired before the response arrived."""


class TransportError(RestError):
    """The HTTP transport failed to produce a response (connection, TLS, protocol)."""


class RequestTimeoutError(TransportError):
    """The HTTP transport gave up waiting for the server."""


__all__ = [
    "ConfigTypeMismatchError",
    "InvalidTokenError",
    "MalformedTimestampError",
    "MissingTokenError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "RestError",
    "TransportError",
]

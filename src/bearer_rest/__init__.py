"""Bearer REST client package.

This package wraps an ``httpx`` transport, gates every authenticated request
on a bearer token, and normalizes results into plain ``Response`` values:
- ``token``: credential string plus UTC expiry
- ``client``: token slot, configuration map and request verbs
- ``config``: typed transport options
- ``errors``: exception hierarchy shared by all modules
"""

from .client import RestClient, prepare_payload
from .config import RestConfig
from .errors import (
    ConfigTypeMismatchError,
    InvalidTokenError,
    MalformedTimestampError,
    MissingTokenError,
    RequestCancelledError,
    RequestTimeoutError,
    RestError,
    TransportError,
)
from .response import Response
from .token import TIMESTAMP_FORMAT, Token

__all__: list[str] = [
    "TIMESTAMP_FORMAT",
    "ConfigTypeMismatchError",
    "InvalidTokenError",
    "MalformedTimestampError",
    "MissingTokenError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "Response",
    "RestClient",
    "RestConfig",
    "RestError",
    "Token",
    "TransportError",
    "prepare_payload",
]

"""Typed transport configuration for the bearer REST client.

``RestConfig`` enumerates the options that shape the HTTP transport. Free-form
runtime values (URLs, client ids and the like) stay in the client's own
configuration map; see ``RestClient.set_config``.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any, Self

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigTypeMismatchError

logger = logging.getLogger("bearer_rest.config")

INSECURE_SKIP_VERIFY_KEY = "InsecureSkipVerify"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


class RestConfig(BaseModel):
    """Options applied to the underlying ``httpx.AsyncClient``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    insecure_skip_verify: bool = Field(default=False, alias=INSECURE_SKIP_VERIFY_KEY)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, le=600)
    base_url: str = ""

    @property
    def verify_ssl(self) -> bool:
        """Return whether server certificates are verified."""
        return not self.insecure_skip_verify

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Self:
        """Extract the typed options from a free-form configuration mapping.

        Only ``InsecureSkipVerify`` is recognised; every other key is runtime
        state and is ignored here.

        Raises:
            ConfigTypeMismatchError: If ``InsecureSkipVerify`` is present but not a bool.

        """
        flag = mapping.get(INSECURE_SKIP_VERIFY_KEY)
        if flag is None:
            return cls()
        if not isinstance(flag, bool):
            msg = f"{INSECURE_SKIP_VERIFY_KEY} must be a bool, got {type(flag).__name__}."
            raise ConfigTypeMismatchError(msg)
        return cls(insecure_skip_verify=flag)

    @classmethod
    def from_env(cls) -> Self:
        """Build a configuration from ``REST_*`` environment variables.

        A local ``.env`` file is loaded first for development convenience.

        Raises:
            RuntimeError: If a variable holds a value that fails validation.

        """
        load_dotenv()
        raw_config: dict[str, Any] = {
            "insecure_skip_verify": os.getenv("REST_INSECURE_SKIP_VERIFY"),
            "timeout_seconds": os.getenv("REST_TIMEOUT_SECONDS"),
            "base_url": os.getenv("REST_BASE_URL"),
        }
        provided = {key: value for key, value in raw_config.items() if value is not None}
        try:
            config = cls(**provided)
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            msg = f"Invalid REST configuration: {messages}"
            raise RuntimeError(msg) from exc
        logger.debug("Loaded REST configuration from environment (%s).", ", ".join(sorted(provided)) or "defaults")
        return config


__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_TIMEOUT_SECONDS",
    "INSECURE_SKIP_VERIFY_KEY",
    "RestConfig",
]

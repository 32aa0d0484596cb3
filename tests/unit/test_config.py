"""Unit tests for RestConfig parsing and validation helpers."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from bearer_rest.config import DEFAULT_TIMEOUT_SECONDS, INSECURE_SKIP_VERIFY_KEY, RestConfig
from bearer_rest.errors import ConfigTypeMismatchError


@pytest.fixture(autouse=True)
def mock_load_dotenv(monkeypatch: pytest.MonkeyPatch):
    """Keep the host environment and any .env file out of these tests."""
    for name in ("REST_INSECURE_SKIP_VERIFY", "REST_TIMEOUT_SECONDS", "REST_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    with patch("bearer_rest.config.load_dotenv") as mock_load:
        yield mock_load


def test_defaults() -> None:
    """Defaults verify certificates with a one minute timeout."""
    config = RestConfig()

    assert config.insecure_skip_verify is False
    assert config.verify_ssl is True
    assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS == 60.0
    assert config.base_url == ""


def test_alias_and_field_name_both_accepted() -> None:
    """The insecure flag populates by alias or by field name."""
    assert RestConfig(InsecureSkipVerify=True).insecure_skip_verify is True
    assert RestConfig(insecure_skip_verify=True).verify_ssl is False


def test_timeout_bounds() -> None:
    """Non-positive or excessive timeouts are rejected."""
    with pytest.raises(ValidationError):
        RestConfig(timeout_seconds=0)
    with pytest.raises(ValidationError):
        RestConfig(timeout_seconds=601)


class TestFromMapping:
    """Tests for RestConfig.from_mapping."""

    def test_missing_flag_uses_defaults(self) -> None:
        """A mapping without the flag yields default options."""
        config = RestConfig.from_mapping({"token_url": "https://auth.example.com"})

        assert config.insecure_skip_verify is False

    def test_true_flag(self) -> None:
        """A True flag requests certificate bypass."""
        config = RestConfig.from_mapping({INSECURE_SKIP_VERIFY_KEY: True})

        assert config.insecure_skip_verify is True

    def test_false_flag(self) -> None:
        """A False flag keeps verification on."""
        config = RestConfig.from_mapping({INSECURE_SKIP_VERIFY_KEY: False})

        assert config.verify_ssl is True

    @pytest.mark.parametrize("value", ["true", 1, "yes"])
    def test_non_bool_flag_raises(self, value: object) -> None:
        """Only real booleans are accepted for the flag."""
        with pytest.raises(ConfigTypeMismatchError, match="must be a bool"):
            RestConfig.from_mapping({INSECURE_SKIP_VERIFY_KEY: value})


class TestFromEnv:
    """Tests for RestConfig.from_env."""

    def test_empty_env_uses_defaults(self, mock_load_dotenv) -> None:
        """With no variables set, defaults apply and .env is loaded."""
        config = RestConfig.from_env()

        assert config == RestConfig()
        mock_load_dotenv.assert_called_once()

    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """All REST_* variables are honoured."""
        monkeypatch.setenv("REST_INSECURE_SKIP_VERIFY", "true")
        monkeypatch.setenv("REST_TIMEOUT_SECONDS", "15")
        monkeypatch.setenv("REST_BASE_URL", "https://api.example.com")

        config = RestConfig.from_env()

        assert config.insecure_skip_verify is True
        assert config.timeout_seconds == 15.0
        assert config.base_url == "https://api.example.com"

    def test_invalid_value_raises_runtime_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Invalid values are reported as a RuntimeError."""
        monkeypatch.setenv("REST_TIMEOUT_SECONDS", "-5")

        with pytest.raises(RuntimeError, match="Invalid REST configuration"):
            RestConfig.from_env()

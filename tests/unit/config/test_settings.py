"""Unit tests for RedeliverySettings and the settings loaders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import ClassVar

import pytest

from mp_redelivery.config import (
    ConfigError,
    DecodeFailurePolicy,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    RedeliverySettings,
    Settings,
)
from mp_redelivery.resilience.retry import TableBackoffSchedule, default_schedule

_ENV_KEYS = (
    "REDELIVERY_QUEUE_NAME",
    "REDELIVERY_DEAD_LETTER_QUEUE_NAME",
    "REDELIVERY_CONNECTION_STRING",
    "REDELIVERY_MAX_ATTEMPTS",
    "REDELIVERY_BASE64_ENCODING",
    "REDELIVERY_DECODE_FAILURE_POLICY",
    "REDELIVERY_BACKOFF_SECONDS",
    "REDELIVERY_POLL_INTERVAL_SECONDS",
    "REDELIVERY_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@dataclass
class _RequiredSettings(Settings):
    _prefix: ClassVar[str] = "SVC"

    endpoint: str


# ---------------------------------------------------------------------------
# RedeliverySettings
# ---------------------------------------------------------------------------


class TestRedeliverySettings:
    def test_defaults(self) -> None:
        settings = RedeliverySettings()
        assert settings.queue_name == "myqueue-items"
        assert settings.dead_letter_queue_name == "myqueue-items-poison"
        assert settings.max_attempts == 12
        assert settings.message_ttl == timedelta(days=7)
        assert settings.dead_letter_ttl == timedelta(days=7)
        assert settings.lease_duration == timedelta(seconds=30)
        assert settings.base64_encoding is True
        assert settings.decode_failure_policy is DecodeFailurePolicy.DROP

    def test_dead_letter_name_follows_queue_name(self) -> None:
        assert RedeliverySettings(queue_name="orders").dead_letter_queue_name == "orders-poison"

    def test_explicit_dead_letter_name_kept(self) -> None:
        settings = RedeliverySettings(queue_name="orders", dead_letter_queue_name="orders-dlq")
        assert settings.dead_letter_queue_name == "orders-dlq"

    def test_default_backoff_schedule(self) -> None:
        assert RedeliverySettings().backoff_schedule().entries == default_schedule().entries

    def test_custom_backoff_schedule(self) -> None:
        schedule = RedeliverySettings(backoff_seconds=[1.0, 2.0]).backoff_schedule()
        assert isinstance(schedule, TableBackoffSchedule)
        assert schedule.delay_for(5) == timedelta(seconds=2)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("max_attempts", -1),
            ("message_ttl_seconds", 0),
            ("lease_seconds", 0),
            ("concurrency", 0),
            ("poll_interval_seconds", -0.5),
            ("decode_failure_policy", "explode"),
            ("backoff_seconds", [1.0, -2.0]),
        ],
    )
    def test_invalid_values_rejected(self, field: str, value: object) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            RedeliverySettings(**{field: value})
        assert exc_info.value.setting_name == field

    def test_zero_max_attempts_allowed(self) -> None:
        assert RedeliverySettings(max_attempts=0).max_attempts == 0

    def test_empty_queue_name_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError, match="must not be empty") as exc_info:
            RedeliverySettings(queue_name="")
        assert exc_info.value.detail == {"setting": "queue_name", "reason": "must not be empty"}

    def test_empty_connection_string_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            RedeliverySettings(connection_string="")
        assert exc_info.value.setting_name == "connection_string"
        assert "***" in exc_info.value.message

    def test_redacted_masks_connection_string(self) -> None:
        settings = RedeliverySettings(connection_string="AccountName=a;AccountKey=s3cret")
        values = settings.redacted()
        assert values["connection_string"] == "***"
        assert values["queue_name"] == "myqueue-items"
        assert settings.connection_string == "AccountName=a;AccountKey=s3cret"

    def test_env_key(self) -> None:
        assert RedeliverySettings.env_key("max_attempts") == "REDELIVERY_MAX_ATTEMPTS"
        assert _RequiredSettings.env_key("endpoint") == "SVC_ENDPOINT"
        assert RedeliverySettings.is_secret("connection_string")
        assert not RedeliverySettings.is_secret("queue_name")


class TestInvalidSettingValueError:
    def test_secret_value_never_in_message(self) -> None:
        err = InvalidSettingValueError("connection_string", "AccountKey=s3cret", "malformed", secret=True)
        assert "s3cret" not in str(err)
        assert "***" in err.message
        assert err.value == "AccountKey=s3cret"

    def test_plain_value_shown(self) -> None:
        err = InvalidSettingValueError("max_attempts", -1, "must be >= 0")
        assert err.message == "Setting 'max_attempts' has invalid value -1: must be >= 0"
        assert err.code == "invalid_setting_value"


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_from_prefixed_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDELIVERY_QUEUE_NAME", "orders")
        monkeypatch.setenv("REDELIVERY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("REDELIVERY_BASE64_ENCODING", "false")
        monkeypatch.setenv("REDELIVERY_POLL_INTERVAL_SECONDS", "0.25")
        monkeypatch.setenv("REDELIVERY_DECODE_FAILURE_POLICY", "dead_letter")

        settings = EnvSettingsLoader().load(RedeliverySettings)

        assert settings.queue_name == "orders"
        assert settings.dead_letter_queue_name == "orders-poison"
        assert settings.max_attempts == 5
        assert settings.base64_encoding is False
        assert settings.poll_interval_seconds == 0.25
        assert settings.decode_failure_policy is DecodeFailurePolicy.DEAD_LETTER

    def test_loads_backoff_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDELIVERY_BACKOFF_SECONDS", "5, 15,60")
        settings = EnvSettingsLoader().load(RedeliverySettings)
        assert settings.backoff_seconds == [5.0, 15.0, 60.0]

    def test_defaults_when_env_absent(self) -> None:
        settings = EnvSettingsLoader().load(RedeliverySettings)
        assert settings == RedeliverySettings()

    def test_unparseable_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDELIVERY_MAX_ATTEMPTS", "twelve")
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader().load(RedeliverySettings)
        assert exc_info.value.setting_name == "REDELIVERY_MAX_ATTEMPTS"

    def test_validation_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDELIVERY_CONCURRENCY", "0")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(RedeliverySettings)

    def test_missing_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SVC_ENDPOINT", raising=False)
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader().load(_RequiredSettings)
        assert exc_info.value.setting_name == "SVC_ENDPOINT"
        assert exc_info.value.detail == {"setting": "SVC_ENDPOINT"}
        assert isinstance(exc_info.value, ConfigError)


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_loads_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("REDELIVERY_QUEUE_NAME=from-dotenv\nREDELIVERY_MAX_ATTEMPTS=3\n")

        settings = DotenvSettingsLoader(str(env_file)).load(RedeliverySettings)

        assert settings.queue_name == "from-dotenv"
        assert settings.max_attempts == 3

    def test_process_env_wins_without_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("REDELIVERY_QUEUE_NAME=from-dotenv\n")
        monkeypatch.setenv("REDELIVERY_QUEUE_NAME", "from-env")

        settings = DotenvSettingsLoader(str(env_file)).load(RedeliverySettings)

        assert settings.queue_name == "from-env"

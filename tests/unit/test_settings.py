from __future__ import annotations

import pytest
from pydantic import ValidationError

from otp_provider.core.config.settings import Settings, get_settings
from otp_provider.core.otp.totp import TotpProvider, get_totp_provider

pytestmark = pytest.mark.unit


def test_defaults() -> None:
    settings = get_settings()
    assert settings.step_seconds == 30
    assert settings.epoch_origin == 0
    assert settings.digits == 6
    assert settings.algorithm == "sha1"
    assert settings.validation_window == 1
    assert settings.secret_bytes == 20
    assert settings.default_issuer == ""


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("OTP_PROVIDER_DIGITS", "8")
    monkeypatch.setenv("OTP_PROVIDER_ALGORITHM", "SHA-256")
    monkeypatch.setenv("OTP_PROVIDER_STEP_SECONDS", "60")
    monkeypatch.setenv("OTP_PROVIDER_VALIDATION_WINDOW", "2")
    monkeypatch.setenv("OTP_PROVIDER_DEFAULT_ISSUER", "  Acme  ")

    settings = get_settings()
    assert settings.digits == 8
    assert settings.algorithm == "sha256"
    assert settings.step_seconds == 60
    assert settings.validation_window == 2
    assert settings.default_issuer == "Acme"

    provider = get_totp_provider()
    assert provider.digits == 8
    assert provider.algorithm == "sha256"
    assert provider.step_seconds == 60
    assert provider.window == 2


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("OTP_PROVIDER_DIGITS", "4"),
        ("OTP_PROVIDER_DIGITS", "12"),
        ("OTP_PROVIDER_STEP_SECONDS", "0"),
        ("OTP_PROVIDER_ALGORITHM", "md5"),
        ("OTP_PROVIDER_VALIDATION_WINDOW", "-1"),
        ("OTP_PROVIDER_SECRET_BYTES", "0"),
    ],
)
def test_invalid_environment_is_rejected(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()


def test_provider_from_settings() -> None:
    settings = Settings(digits=7, step_seconds=45, algorithm="sha512", validation_window=0, secret_bytes=10)
    provider = TotpProvider.from_settings(settings)
    assert provider.digits == 7
    assert provider.step_seconds == 45
    assert provider.algorithm == "sha512"
    assert provider.window == 0
    assert len(provider.generate_secret_key()) == 16

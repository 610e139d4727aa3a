from __future__ import annotations

import os

import pytest

RFC6238_SHA1_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    for name in list(os.environ):
        if name.startswith("OTP_PROVIDER_"):
            monkeypatch.delenv(name, raising=False)
    from otp_provider.core.config.settings import get_settings
    from otp_provider.core.otp.totp import get_totp_provider

    get_settings.cache_clear()
    get_totp_provider.cache_clear()
    yield
    get_settings.cache_clear()
    get_totp_provider.cache_clear()


@pytest.fixture
def rfc_secret() -> str:
    return RFC6238_SHA1_SECRET

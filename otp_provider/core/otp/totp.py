from __future__ import annotations

import hmac
import logging
import secrets
from functools import lru_cache

from otp_provider.core.config.settings import Settings, get_settings
from otp_provider.core.encoding import base32
from otp_provider.core.exceptions import InvalidArgumentError, InvalidCharacterError
from otp_provider.core.otp.hotp import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_EPOCH_ORIGIN,
    DEFAULT_STEP_SECONDS,
    MAX_DIGITS,
    MIN_DIGITS,
    compute_code,
    normalize_algorithm,
    time_step,
)
from otp_provider.core.otp.types import HashAlgorithm, TotpVerificationResult
from otp_provider.core.otp.uri import build_provisioning_url, render_qr_svg_data_uri
from otp_provider.core.utils.time import epoch_seconds

logger = logging.getLogger(__name__)

_DEFAULT_WINDOW = 1
_DEFAULT_SECRET_BYTES = 20
_DIGITS = frozenset("0123456789")


class TotpProvider:
    """RFC 6238 time-based one-time passwords over Base32 secrets.

    Instances hold only immutable parameters, so one provider can be shared freely
    between threads.
    """

    def __init__(
        self,
        *,
        digits: int = DEFAULT_DIGITS,
        step_seconds: int = DEFAULT_STEP_SECONDS,
        epoch_origin: int = DEFAULT_EPOCH_ORIGIN,
        algorithm: str = DEFAULT_ALGORITHM,
        window: int = _DEFAULT_WINDOW,
        secret_bytes: int = _DEFAULT_SECRET_BYTES,
    ) -> None:
        if not MIN_DIGITS <= digits <= MAX_DIGITS:
            raise InvalidArgumentError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}")
        if step_seconds <= 0:
            raise InvalidArgumentError("step_seconds must be positive")
        if epoch_origin < 0:
            raise InvalidArgumentError("epoch_origin must be non-negative")
        if window < 0:
            raise InvalidArgumentError("window must be non-negative")
        if secret_bytes <= 0:
            raise InvalidArgumentError("secret_bytes must be positive")
        self._digits = digits
        self._step_seconds = step_seconds
        self._epoch_origin = epoch_origin
        self._algorithm: HashAlgorithm = normalize_algorithm(algorithm)
        self._window = window
        self._secret_bytes = secret_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> TotpProvider:
        return cls(
            digits=settings.digits,
            step_seconds=settings.step_seconds,
            epoch_origin=settings.epoch_origin,
            algorithm=settings.algorithm,
            window=settings.validation_window,
            secret_bytes=settings.secret_bytes,
        )

    @property
    def digits(self) -> int:
        return self._digits

    @property
    def step_seconds(self) -> int:
        return self._step_seconds

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    @property
    def window(self) -> int:
        return self._window

    def generate_secret_key(self) -> str:
        return base32.encode(secrets.token_bytes(self._secret_bytes))

    def generate_totp(self, secret: str, *, now_epoch: int | float | None = None) -> str:
        return self.at(secret, epoch_seconds(now_epoch))

    def at(self, secret: str, for_time: int | float) -> str:
        key = _decode_secret(secret)
        return self._code(key, self.current_step(now_epoch=for_time))

    def current_step(self, *, now_epoch: int | float | None = None) -> int:
        return time_step(
            epoch_seconds(now_epoch),
            step_seconds=self._step_seconds,
            epoch_origin=self._epoch_origin,
        )

    def validate_totp(self, secret: str, code: str, *, now_epoch: int | float | None = None) -> bool:
        return self.verify(secret, code, now_epoch=now_epoch).is_valid

    def verify(
        self,
        secret: str,
        code: str,
        *,
        now_epoch: int | float | None = None,
        last_verified_step: int | None = None,
    ) -> TotpVerificationResult:
        if not self._is_well_formed(code):
            return TotpVerificationResult(is_valid=False, matched_step=None)

        key = _decode_secret(secret)
        current_step = self.current_step(now_epoch=now_epoch)
        for offset in range(-self._window, self._window + 1):
            step = current_step + offset
            if step < 0:
                continue
            if last_verified_step is not None and step <= last_verified_step:
                logger.debug("Skipping TOTP step %d at or before last verified step %d", step, last_verified_step)
                continue
            if hmac.compare_digest(self._code(key, step), code):
                if offset:
                    logger.debug("TOTP code matched with step offset %d", offset)
                return TotpVerificationResult(is_valid=True, matched_step=step)
        return TotpVerificationResult(is_valid=False, matched_step=None)

    def generate_provisioning_url(self, account: str, secret: str, issuer: str, label: str) -> str:
        return build_provisioning_url(
            account,
            _canonical_secret(secret),
            issuer,
            label,
            algorithm=self._algorithm,
            digits=self._digits,
            step_seconds=self._step_seconds,
        )

    def provisioning_qr_svg(self, account: str, secret: str, issuer: str, label: str) -> str:
        return render_qr_svg_data_uri(self.generate_provisioning_url(account, secret, issuer, label))

    def _code(self, key: bytes, step: int) -> str:
        return compute_code(key, step, digits=self._digits, algorithm=self._algorithm)

    def _is_well_formed(self, code: str | None) -> bool:
        if not code or len(code) != self._digits:
            return False
        return all(ch in _DIGITS for ch in code)


@lru_cache(maxsize=1)
def get_totp_provider() -> TotpProvider:
    return TotpProvider.from_settings(get_settings())


def generate_secret_key() -> str:
    return get_totp_provider().generate_secret_key()


def generate_totp(secret: str) -> str:
    return get_totp_provider().generate_totp(secret)


def validate_totp(secret: str, code: str) -> bool:
    return get_totp_provider().validate_totp(secret, code)


def generate_provisioning_url(account: str, secret: str, issuer: str | None = None, label: str | None = None) -> str:
    issuer_name = get_settings().default_issuer if issuer is None else issuer
    return get_totp_provider().generate_provisioning_url(
        account,
        secret,
        issuer_name,
        issuer_name if label is None else label,
    )


def _normalize_secret(secret: str) -> str:
    compact = "".join((secret or "").split())
    if not compact:
        raise InvalidArgumentError("secret is required")
    return compact


def _decode_secret(secret: str) -> bytes:
    compact = _normalize_secret(secret)
    try:
        key = base32.decode(compact)
    except InvalidCharacterError:
        logger.debug("Rejected TOTP secret with non-Base32 characters")
        raise
    if not key:
        raise InvalidArgumentError("secret is too short")
    return key


def _canonical_secret(secret: str) -> str:
    _decode_secret(secret)
    # Only ASCII alphabet characters remain once decoding succeeds.
    return _normalize_secret(secret).rstrip("=").upper()

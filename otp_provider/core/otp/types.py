from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, TypeAlias

HashAlgorithm: TypeAlias = Literal["sha1", "sha256", "sha512"]

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha1", "sha256", "sha512")


@dataclass(frozen=True, slots=True)
class TotpVerificationResult:
    is_valid: bool
    matched_step: int | None


class OtpProvider(Protocol):
    def generate_secret_key(self) -> str: ...

    def generate_totp(self, secret: str) -> str: ...

    def validate_totp(self, secret: str, code: str) -> bool: ...

    def generate_provisioning_url(self, account: str, secret: str, issuer: str, label: str) -> str: ...

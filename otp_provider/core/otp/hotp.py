from __future__ import annotations

import hashlib
import hmac
import struct

from otp_provider.core.exceptions import InvalidArgumentError
from otp_provider.core.otp.types import SUPPORTED_ALGORITHMS, HashAlgorithm

DEFAULT_DIGITS = 6
DEFAULT_STEP_SECONDS = 30
DEFAULT_EPOCH_ORIGIN = 0
DEFAULT_ALGORITHM: HashAlgorithm = "sha1"

MIN_DIGITS = 6
MAX_DIGITS = 10

_MAX_COUNTER = 2**64


def time_step(
    now_epoch: int,
    *,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    epoch_origin: int = DEFAULT_EPOCH_ORIGIN,
) -> int:
    if step_seconds <= 0:
        raise InvalidArgumentError("step_seconds must be positive")
    if now_epoch < epoch_origin:
        raise InvalidArgumentError("timestamp is earlier than epoch_origin")
    return (now_epoch - epoch_origin) // step_seconds


def compute_code(
    key: bytes,
    counter: int,
    *,
    digits: int = DEFAULT_DIGITS,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
) -> str:
    """Return the RFC 4226 code for ``counter`` keyed with ``key``.

    The counter is hashed as 8 big-endian bytes, then reduced by dynamic truncation:
    the low nibble of the last digest byte selects a 4-byte window whose top bit is
    cleared before taking ``value % 10**digits``.
    """
    if not 0 <= counter < _MAX_COUNTER:
        raise InvalidArgumentError("counter must fit an unsigned 64-bit integer")
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidArgumentError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}")

    digest = hmac.new(key, struct.pack(">Q", counter), _digest_constructor(algorithm)).digest()
    offset = digest[-1] & 0x0F
    binary = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(binary % 10**digits).zfill(digits)


def normalize_algorithm(algorithm: str) -> HashAlgorithm:
    normalized = algorithm.strip().lower().replace("-", "")
    if normalized not in SUPPORTED_ALGORITHMS:
        raise InvalidArgumentError(f"Unsupported algorithm: {algorithm}")
    return normalized  # type: ignore[return-value]


def _digest_constructor(algorithm: str):
    normalized = normalize_algorithm(algorithm)
    return getattr(hashlib, normalized)

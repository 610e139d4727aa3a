"""RFC 4648 Base32 codec for shared secrets.

Output is always uppercase and unpadded. Decoding accepts either case and tolerates
trailing ``=`` padding. Bits that do not fill a whole byte at the end of the input are
dropped, so ``decode(encode(data)) == data`` for every byte string.
"""

from __future__ import annotations

import secrets

from otp_provider.core.exceptions import InvalidArgumentError, InvalidCharacterError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

# Both ASCII cases; str.upper() maps some non-ASCII letters onto the alphabet.
_REVERSE_ALPHABET: dict[str, int] = {
    char: index for index, upper in enumerate(ALPHABET) for char in (upper, upper.lower())
}
_PADDING = "="


def encode(data: bytes) -> str:
    if not data:
        return ""

    chars: list[str] = []
    buffer = 0
    buffered_bits = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        buffered_bits += 8
        while buffered_bits >= 5:
            buffered_bits -= 5
            chars.append(ALPHABET[(buffer >> buffered_bits) & 0x1F])
        buffer &= (1 << buffered_bits) - 1

    if buffered_bits > 0:
        chars.append(ALPHABET[(buffer << (5 - buffered_bits)) & 0x1F])

    return "".join(chars)


def decode(text: str | None) -> bytes:
    if not text:
        return b""

    stripped = text.rstrip(_PADDING)
    output = bytearray(len(stripped) * 5 // 8)
    index = 0
    current = 0
    remaining = 8

    for position, char in enumerate(stripped):
        value = _REVERSE_ALPHABET.get(char)
        if value is None:
            raise InvalidCharacterError(char, position)
        if remaining > 5:
            current |= value << (remaining - 5)
            remaining -= 5
            continue
        current |= value >> (5 - remaining)
        output[index] = current
        index += 1
        # Low bits of this character start the next byte.
        current = (value << (3 + remaining)) & 0xFF
        remaining += 3

    return bytes(output)


def generate_random_key(size: int) -> str:
    """Return ``size`` Base32 characters backed by CSPRNG output."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgumentError("size must be an integer")
    if size <= 0:
        raise InvalidArgumentError("size must be positive")
    nbytes = (size * 5 + 7) // 8
    return encode(secrets.token_bytes(nbytes))[:size]

from __future__ import annotations


class OtpError(Exception):
    """Base exception for all provider errors."""

    code: str = "otp_error"
    message: str = "One-time password error"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        self.message = message or self.__class__.message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class InvalidArgumentError(OtpError, ValueError):
    code = "invalid_argument"
    message = "Invalid argument"


class InvalidCharacterError(OtpError, ValueError):
    code = "invalid_character"
    message = "Invalid Base32 character"

    def __init__(self, character: str, position: int, *, code: str | None = None) -> None:
        self.character = character
        self.position = position
        super().__init__(f"Invalid Base32 character {character!r} at position {position}", code=code)

from otp_provider.core.encoding.base32 import ALPHABET, decode, encode, generate_random_key

__all__ = [
    "ALPHABET",
    "decode",
    "encode",
    "generate_random_key",
]

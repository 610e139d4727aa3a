__version__ = "1.0.0"
__all__ = [
    "TotpProvider",
    "__version__",
    "generate_provisioning_url",
    "generate_secret_key",
    "generate_totp",
    "validate_totp",
]


def __getattr__(name: str):
    if name in __all__ and name != "__version__":
        from otp_provider.core.otp import totp

        return getattr(totp, name)
    raise AttributeError(name)

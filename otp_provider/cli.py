from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from otp_provider.core.config.settings import get_settings
from otp_provider.core.encoding.base32 import generate_random_key
from otp_provider.core.exceptions import OtpError
from otp_provider.core.otp.totp import TotpProvider

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="otp-provider", description="Generate and verify TOTP codes.")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    subparsers = parser.add_subparsers(dest="command", required=True)

    secret = subparsers.add_parser("secret", help="Generate a new Base32 secret key.")
    secret.add_argument("--length", type=int, default=None, help="Exact number of Base32 characters.")

    code = subparsers.add_parser("code", help="Print the code for a secret.")
    code.add_argument("secret")
    code.add_argument("--at", type=float, default=None, help="Unix timestamp instead of the current time.")

    verify = subparsers.add_parser("verify", help="Check a code; exits 0 when valid and 1 otherwise.")
    verify.add_argument("secret")
    verify.add_argument("code")
    verify.add_argument("--at", type=float, default=None, help="Unix timestamp instead of the current time.")
    verify.add_argument("--window", type=int, default=None, help="Accepted steps on each side of the current one.")

    uri = subparsers.add_parser("uri", help="Print an otpauth:// provisioning URI.")
    uri.add_argument("account")
    uri.add_argument("secret")
    uri.add_argument("--issuer", default=None)
    uri.add_argument("--label", default=None, help="Defaults to the issuer.")
    uri.add_argument("--qr", action="store_true", help="Print an SVG QR code data URI instead.")

    return parser.parse_args(argv)


def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    provider = TotpProvider.from_settings(settings)

    if args.command == "secret":
        if args.length is None:
            print(provider.generate_secret_key())
        else:
            print(generate_random_key(args.length))
        return 0

    if args.command == "code":
        print(provider.generate_totp(args.secret, now_epoch=args.at))
        return 0

    if args.command == "verify":
        if args.window is not None:
            provider = TotpProvider.from_settings(settings.model_copy(update={"validation_window": args.window}))
        valid = provider.validate_totp(args.secret, args.code, now_epoch=args.at)
        print("valid" if valid else "invalid")
        return 0 if valid else 1

    issuer = settings.default_issuer if args.issuer is None else args.issuer
    label = issuer if args.label is None else args.label
    if args.qr:
        print(provider.provisioning_qr_svg(args.account, args.secret, issuer, label))
    else:
        print(provider.generate_provisioning_url(args.account, args.secret, issuer, label))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _run(args)
    except OtpError as exc:
        logger.debug("Command %s failed with %s", args.command, exc.code)
        print(f"error: {exc.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import base64
from io import BytesIO
from urllib.parse import quote

import segno

from otp_provider.core.otp.hotp import DEFAULT_ALGORITHM, DEFAULT_DIGITS, DEFAULT_STEP_SECONDS


def build_provisioning_url(
    account: str,
    secret: str,
    issuer: str,
    label: str,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    step_seconds: int = DEFAULT_STEP_SECONDS,
) -> str:
    label_enc = quote(label or "", safe="")
    account_enc = quote(account or "", safe="")
    issuer_enc = quote(issuer or "", safe="")

    qs = f"secret={secret}&issuer={issuer_enc}"
    # Authenticator apps assume SHA1/6/30 when these are absent.
    if (algorithm, digits, step_seconds) != (DEFAULT_ALGORITHM, DEFAULT_DIGITS, DEFAULT_STEP_SECONDS):
        qs += f"&algorithm={algorithm.upper()}&digits={digits}&period={step_seconds}"

    return f"otpauth://totp/{label_enc}:{account_enc}?{qs}"


def render_qr_svg_data_uri(payload: str) -> str:
    qr = segno.make(payload)
    buffer = BytesIO()
    qr.save(buffer, kind="svg", xmldecl=False, scale=6, border=2)
    raw = buffer.getvalue()
    return f"data:image/svg+xml;base64,{base64.b64encode(raw).decode('ascii')}"

# credkit/domain/services.py
from __future__ import annotations

import hmac
import secrets
import string

from credkit.domain.status import RequestType

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_verification_code(length: int = 6) -> str:
    """Uppercase alphanumeric code, each character drawn uniformly."""
    if length <= 0:
        raise ValueError("code length must be positive")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        # hmac.compare_digest supports str only when both are ASCII
        return hmac.compare_digest(a, b)
    except TypeError:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


_PURPOSE = {
    RequestType.VERIFY_CODE: "verification",
    RequestType.LOGIN: "sign-in",
    RequestType.REGISTER: "registration",
    RequestType.RESET_PASSWORD: "password reset",
    RequestType.AUTHENTICATE_USER: "authentication",
}


def compose_verification_email(
    code: str, *, ttl_seconds: int, request_type: int, product: str = "Flicker"
) -> tuple[str, str, str]:
    """
    Return (subject, text_body, html_body) for a verification code email.
    """
    try:
        purpose = _PURPOSE[RequestType(request_type)]
    except ValueError:
        purpose = "verification"
    minutes = max(1, ttl_seconds // 60)
    subject = f"{product} {purpose} code"
    text = (
        f"Your {purpose} code is {code}. "
        f"It expires in {minutes} minutes.\n"
        "If you did not request this code, you can ignore this email."
    )
    html = (
        '<div style="font-family: Arial, sans-serif; color: #333;">'
        f"<h2>{product} {purpose} code</h2>"
        f'<p>Your code is: <strong style="font-size: 18px;">{code}</strong></p>'
        f"<p>It expires in {minutes} minutes.</p>"
        "<p>If you did not request this code, you can ignore this email.</p>"
        "</div>"
    )
    return subject, text, html

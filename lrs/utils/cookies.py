"""Signed cookie helpers for tenant/course scoped user cookies.

A user can have tools open in several courses at once, so there is one cookie
per (tenant domain, course) tuple. The value is the user id signed with the
configured cookie secret.
"""

import hashlib
from collections.abc import Mapping
from urllib.parse import quote

from itsdangerous import BadSignature, Signer
from starlette.responses import Response

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
_COOKIE_NAME_SAFE = "!*'()"


def cookie_name(tenant_domain: str, course_id: str) -> str:
    """Build the cookie name for a tenant domain and course.

    >>> cookie_name("ucberkeley.canvas.com", "21312")
    'ucberkeley.canvas.com_21312'
    """
    return quote(f"{tenant_domain}_{course_id}", safe=_COOKIE_NAME_SAFE)


def make_signer(secret: str, salt: str) -> Signer:
    """Create the signer shared by cookie readers and writers.

    Raises:
        ValueError: If no cookie secret is configured.
    """
    if not secret:
        raise ValueError(
            "COOKIE_SECRET must be set. Please configure the cookie_secret setting."
        )
    return Signer(secret, salt=salt, digest_method=hashlib.sha256)


def sign_cookie_value(signer: Signer, value: str) -> str:
    return signer.sign(value).decode("utf-8")


def read_signed_cookie(cookies: Mapping[str, str], name: str, signer: Signer) -> str | None:
    """Return the verified value of a signed cookie.

    Returns:
        The unsigned value, or None when the cookie is absent, empty or its
        signature does not verify.
    """
    raw = cookies.get(name)
    if not raw:
        return None

    try:
        value = signer.unsign(raw).decode("utf-8")
    except BadSignature:
        return None

    return value or None


def set_signed_cookie(
    response: Response,
    signer: Signer,
    tenant_domain: str,
    course_id: str,
    user_id: str,
    *,
    secure: bool = True,
) -> None:
    """Set the scoped user cookie on a response, e.g. after an LTI launch."""
    response.set_cookie(
        key=cookie_name(tenant_domain, course_id),
        value=sign_cookie_value(signer, user_id),
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
    )

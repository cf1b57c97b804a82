"""HMAC-SHA256 signature check for inbound webhook bodies.

The expected signature is base64(HMAC-SHA256(secret, raw_body)). An empty secret turns
verification off so local and staging endpoints can run without one configured.
"""
from __future__ import annotations

import base64
import hashlib
import hmac


def compute_signature(raw_body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _constant_time_equals(a: bytes, b: bytes) -> bool:
    # Length is not secret-dependent: the digest size is fixed.
    if len(a) != len(b):
        return False
    diff = 0
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0


def verify_signature(raw_body: bytes, provided_signature: str, secret: str) -> bool:
    """Return True when `provided_signature` matches the body signed with `secret`.

    - empty/blank secret: verification bypassed, always True
    - secret set but no signature: False
    - never raises; malformed signatures simply do not match
    """

    if not secret or not secret.strip():
        return True
    if not provided_signature or not provided_signature.strip():
        return False

    expected = compute_signature(raw_body, secret).encode("ascii")
    try:
        provided = provided_signature.strip().encode("ascii")
    except UnicodeEncodeError:
        return False
    return _constant_time_equals(expected, provided)

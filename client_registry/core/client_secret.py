from __future__ import annotations

import hashlib
import hmac
from typing import Callable

from .errors import IncorrectSecret, UnsupportedSecretScheme

SECRET_SCHEME_SHA256 = "sha256"
DEFAULT_SECRET_SCHEME = SECRET_SCHEME_SHA256


def _sha256(secret: bytes) -> bytes:
    return hashlib.sha256(secret).digest()


# Scheme names are stored per record; add new hashers here without
# touching the existing entries.
SECRET_SCHEMES: dict[str, Callable[[bytes], bytes]] = {
    SECRET_SCHEME_SHA256: _sha256,
}


def _to_bytes(secret: str | bytes) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return secret


def hash_secret(secret: str | bytes, scheme: str = DEFAULT_SECRET_SCHEME) -> tuple[str, str]:
    """Returns the hex-encoded hash of `secret` and the scheme that produced it."""
    hasher = SECRET_SCHEMES.get(scheme)
    if hasher is None:
        raise UnsupportedSecretScheme(scheme)
    return hasher(_to_bytes(secret)).hex(), scheme


def constant_time_equal(candidate: bytes, expected: bytes) -> bool:
    length = max(len(candidate), len(expected))
    padded_candidate = candidate.ljust(length, b"\x00")
    padded_expected = expected.ljust(length, b"\x00")
    same_content = hmac.compare_digest(padded_candidate, padded_expected)
    return same_content & (len(candidate) == len(expected))


def verify_secret(scheme: str, stored_hash: str, attempt: str | bytes) -> None:
    hasher = SECRET_SCHEMES.get(scheme)
    if hasher is None:
        raise UnsupportedSecretScheme(scheme)
    # ValueError here means the stored hash is corrupt; let it surface.
    expected = bytes.fromhex(stored_hash)
    candidate = hasher(_to_bytes(attempt))
    if not constant_time_equal(candidate, expected):
        raise IncorrectSecret()

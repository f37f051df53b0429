from __future__ import annotations

import hashlib


def generate_token(plaintext: str) -> str:
    """Derive the token for a plaintext value.

    The token is the hex MD5 digest of the UTF-8 bytes. It is stable across
    processes and is a pseudonym, not a secret.
    """
    if not plaintext or not plaintext.strip():
        raise ValueError("plaintext must not be blank")
    return hashlib.md5(plaintext.encode("utf-8"), usedforsecurity=False).hexdigest()

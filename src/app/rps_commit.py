from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Final, Protocol

from rps_errors import RandomSourceExhaustedError

DEFAULT_KEY_BITS: Final[int] = 256


class RandomSource(Protocol):
    def token_bytes(self, num_bytes: int) -> bytes: ...

    def randbelow(self, upper: int) -> int: ...


class SystemRandomSource:
    """Random source backed by the OS CSPRNG through :mod:`secrets`."""

    def token_bytes(self, num_bytes: int) -> bytes:
        return secrets.token_bytes(num_bytes)

    def randbelow(self, upper: int) -> int:
        return secrets.randbelow(upper)


@dataclass(frozen=True)
class Commitment:
    key: str
    digest: str
    move: str

    def __repr__(self) -> str:
        # Only the digest is safe to show before the reveal.
        return f"Commitment(digest={self.digest!r})"


def generate_key(bits: int = DEFAULT_KEY_BITS, rng: RandomSource | None = None) -> str:
    if bits <= 0 or bits % 8:
        raise ValueError(f"key length must be a positive multiple of 8 bits, got {bits}")
    source = rng or SystemRandomSource()
    try:
        raw = source.token_bytes(bits // 8)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceExhaustedError(f"secure random source unavailable: {exc}") from exc
    return raw.hex()


def random_index(upper: int, rng: RandomSource | None = None) -> int:
    source = rng or SystemRandomSource()
    try:
        return source.randbelow(upper)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceExhaustedError(f"secure random source unavailable: {exc}") from exc


def compute_digest(key: str, message: str) -> str:
    # The hex key text itself is the HMAC key, so any HMAC-SHA256 tool that
    # takes a text key can recompute the digest.
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def create_commitment(
    move: str,
    *,
    bits: int = DEFAULT_KEY_BITS,
    rng: RandomSource | None = None,
) -> Commitment:
    key = generate_key(bits, rng)
    return Commitment(key=key, digest=compute_digest(key, move), move=move)


def verify_commitment(*, expected_digest: str, key: str, move: str) -> bool:
    computed = compute_digest(key, move)
    return secrets.compare_digest(expected_digest.strip().lower().encode("utf-8"), computed.encode("ascii"))

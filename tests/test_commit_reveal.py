from __future__ import annotations

import hashlib
import hmac
import re
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "src" / "app"
sys.path.insert(0, str(APP_DIR))

from rps_commit import (  # type: ignore[import-not-found]  # noqa: E402
    compute_digest,
    create_commitment,
    generate_key,
    random_index,
    verify_commitment,
)
from rps_errors import RandomSourceExhaustedError  # type: ignore[import-not-found]  # noqa: E402


class BrokenRandom:
    def token_bytes(self, num_bytes: int) -> bytes:
        raise OSError("no entropy")

    def randbelow(self, upper: int) -> int:
        return 0


class BrokenMoveRandom:
    def token_bytes(self, num_bytes: int) -> bytes:
        return bytes(num_bytes)

    def randbelow(self, upper: int) -> int:
        raise NotImplementedError("no OS random source")


class FixedRandom:
    def __init__(self, fill: int) -> None:
        self.fill = fill

    def token_bytes(self, num_bytes: int) -> bytes:
        return bytes([self.fill]) * num_bytes

    def randbelow(self, upper: int) -> int:
        return 0


def test_generate_key_is_fixed_length_hex() -> None:
    key = generate_key()
    assert re.fullmatch(r"[0-9a-f]{64}", key)
    assert re.fullmatch(r"[0-9a-f]{32}", generate_key(128))
    assert generate_key() != generate_key()


def test_generate_key_uses_injected_source() -> None:
    assert generate_key(16, FixedRandom(0xAB)) == "abab"


@pytest.mark.parametrize("bits", [0, -8, 12])
def test_generate_key_rejects_bad_length(bits: int) -> None:
    with pytest.raises(ValueError):
        generate_key(bits)


def test_generate_key_random_source_failure() -> None:
    with pytest.raises(RandomSourceExhaustedError):
        generate_key(rng=BrokenRandom())


def test_compute_digest_is_hmac_sha256_over_key_text() -> None:
    key = "00ff" * 16
    expected = hmac.new(key.encode("utf-8"), b"Rock", hashlib.sha256).hexdigest()
    assert compute_digest(key, "Rock") == expected
    assert re.fullmatch(r"[0-9a-f]{64}", expected)


def test_compute_digest_is_deterministic() -> None:
    key = generate_key()
    assert compute_digest(key, "Paper") == compute_digest(key, "Paper")


def test_compute_digest_depends_on_key_and_message() -> None:
    assert compute_digest(generate_key(), "Paper") != compute_digest(generate_key(), "Paper")
    key = generate_key()
    assert compute_digest(key, "Paper") != compute_digest(key, "Rock")


def test_commitment_roundtrip() -> None:
    c = create_commitment("Spock", rng=FixedRandom(7))
    assert c.move == "Spock"
    assert c.key == "07" * 32
    assert c.digest == compute_digest(c.key, "Spock")
    assert verify_commitment(expected_digest=c.digest, key=c.key, move="Spock")
    assert verify_commitment(expected_digest=c.digest.upper(), key=c.key, move="Spock")
    assert not verify_commitment(expected_digest=c.digest, key=c.key, move="Lizard")
    assert not verify_commitment(expected_digest=c.digest, key=generate_key(), move="Spock")


def test_commitment_repr_hides_key_and_move() -> None:
    c = create_commitment("Lizard", rng=FixedRandom(1))
    text = repr(c)
    assert c.digest in text
    assert c.key not in text
    assert "Lizard" not in text


def test_verify_commitment_non_ascii_digest_is_mismatch() -> None:
    c = create_commitment("Spock", rng=FixedRandom(3))
    assert not verify_commitment(expected_digest="é", key=c.key, move="Spock")
    assert not verify_commitment(expected_digest=c.digest[:-1] + "é", key=c.key, move="Spock")


def test_random_index() -> None:
    assert random_index(5, FixedRandom(0)) == 0
    assert 0 <= random_index(3) < 3
    with pytest.raises(RandomSourceExhaustedError):
        random_index(3, BrokenMoveRandom())

"""
Schnorr signer

s = k + x*e mod N with R = k*G and e = challenge(R, m). The nonce comes from an
injected randomness source so tests can pin it; production callers leave it
as secrets.token_bytes.
"""

import logging
import secrets
from dataclasses import dataclass

from .challenge import challenge
from .curve import (
    N,
    bytes32,
    decode_compressed,
    encode_compressed,
    int_from_bytes32,
    point_from_scalar,
    scalar_add,
    scalar_mul,
)
from .errors import DomainError, RandomnessError

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 33 + 32 + 32


@dataclass(frozen=True)
class KeyPair:
    private_key: int
    public_key: tuple

    def __post_init__(self):
        check_private_key(self.private_key)
        if self.public_key != point_from_scalar(self.private_key):
            raise DomainError("public key does not match private key")

    @classmethod
    def from_private_key(cls, private_key):
        x = check_private_key(private_key)
        return cls(x, point_from_scalar(x))

    @property
    def x_coord(self):
        return self.public_key[0]

    @property
    def parity(self):
        return self.public_key[1] & 1

    @property
    def recoverable(self):
        # ecrecover only takes r < N, and the public key x stands in for r
        return self.x_coord < N


@dataclass(frozen=True)
class Signature:
    R: tuple
    s: int
    e: int

    def to_bytes(self):
        return encode_compressed(self.R) + bytes32(self.s) + bytes32(self.e)

    @classmethod
    def from_bytes(cls, data):
        data = bytes(data)
        if len(data) != SIGNATURE_LENGTH:
            raise DomainError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(data)}")
        return cls(
            decode_compressed(data[:33]),
            int.from_bytes(data[33:65], 'big'),
            int.from_bytes(data[65:], 'big'),
        )


def check_private_key(private_key):
    x = int_from_bytes32(private_key)
    if not 1 <= x < N:
        raise DomainError("private key must be in [1, N-1]")
    return x


def generate_nonce(rng=None):
    """
    Uniform nonce in [1, N-1] by rejection sampling
    Any failure of the source aborts; there is no fallback source.
    """
    rng = rng or secrets.token_bytes
    while True:
        try:
            candidate = rng(32)
        except Exception as e:
            logger.error("randomness source failed: %s", e)
            raise RandomnessError("randomness source failed") from e
        if not isinstance(candidate, (bytes, bytearray)) or len(candidate) != 32:
            logger.error("randomness source returned %r instead of 32 bytes", type(candidate))
            raise RandomnessError("randomness source must return 32 bytes")
        k = int.from_bytes(candidate, 'big')
        if 1 <= k < N:
            return k
        logger.debug("nonce candidate out of range, resampling")


def sign(m, x, rng=None):
    x = check_private_key(x)
    m = bytes32(m)

    k = generate_nonce(rng)
    R = point_from_scalar(k)
    e = challenge(R, m)
    s = scalar_add(k, scalar_mul(x, e))
    return Signature(R, s, e)

"""
Reshape (R, s) into the ecrecover arguments

ecrecover(h, v, r, s') returns r^-1 * (s'*R_r - h*G). With r = px, h = -s*px
and s' = -e*px this collapses to s*G - e*X, i.e. the nonce commitment R of a
valid signature.
"""

from dataclasses import dataclass

from .challenge import challenge
from .curve import N, bytes32, decompress, int_from_bytes32, scalar_mul, scalar_negate
from .errors import DomainError


@dataclass(frozen=True)
class PreprocessedSignature:
    sr: int
    er: int

    def to_bytes(self):
        return bytes32(self.sr) + bytes32(self.er)


def preprocess(m, R, s, pub_key_x):
    px = int_from_bytes32(pub_key_x)
    # px is the r input of ecrecover
    if not 1 <= px < N:
        raise DomainError("public key x-coordinate must be in [1, N-1]")
    decompress(px, 0)
    # recomputed here, never taken from the signer
    e = challenge(R, m)

    sr = scalar_negate(scalar_mul(int_from_bytes32(s), px))
    er = scalar_negate(scalar_mul(e, px))
    return PreprocessedSignature(sr, er)

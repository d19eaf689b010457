"""
Schnorr signatures over secp256k1, verifiable with nothing but ecrecover
"""

from .challenge import challenge, challenge_from_address
from .curve import (
    G,
    N,
    P,
    address_digest,
    compress,
    decompress,
    point_from_scalar,
    scalar_add,
    scalar_mul,
    scalar_negate,
)
from .errors import DomainError, RandomnessError
from .preprocess import PreprocessedSignature, preprocess
from .signer import KeyPair, Signature, sign
from .verifier import ecrecover, recovery_v, verify, verify_signature

__version__ = "0.1.0"

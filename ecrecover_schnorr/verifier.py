"""
Recovery-based Schnorr verification

verify() only needs ecrecover and keccak256, so it mirrors what an EVM
contract can check:

    address R = ecrecover(sr, v, px, er);
    return R != address(0) && e == keccak256(abi.encodePacked(R, m));

verify_signature() is the plain s*G - e*X reference check over full points.
"""

import logging

from py_ecc.secp256k1 import secp256k1 as _ec

from .challenge import challenge, challenge_from_address
from .curve import (
    N,
    address_digest,
    bytes32,
    int_from_bytes32,
    point_add,
    point_from_scalar,
    point_mul,
    point_neg,
)
from .errors import DomainError

logger = logging.getLogger(__name__)

RECOVERY_V_OFFSET = 27


def recovery_v(parity):
    if parity not in (0, 1):
        raise DomainError(f"parity must be 0 or 1, got {parity!r}")
    return RECOVERY_V_OFFSET + parity


def ecrecover(msg_hash, v, r, s):
    """
    Ethereum ecrecover precompile
    Returns the 20-byte signer address, or None wherever the precompile
    returns nothing.
    """
    msg_hash = bytes32(msg_hash)
    r = int_from_bytes32(r)
    s = int_from_bytes32(s)

    if v not in (27, 28):
        logger.debug("ecrecover: v=%r not in {27, 28}", v)
        return None
    if not (1 <= r < N and 1 <= s < N):
        logger.debug("ecrecover: r or s outside [1, N-1]")
        return None

    try:
        Q = _ec.ecdsa_raw_recover(msg_hash, (v, r, s))
    except ValueError as e:
        # r is not an x-coordinate on the curve
        logger.debug("ecrecover: %s", e)
        return None
    if Q[0] == 0 and Q[1] == 0:
        logger.debug("ecrecover: recovered the point at infinity")
        return None
    return address_digest((int(Q[0]), int(Q[1])))


def verify(sr, er, pub_key_x, pub_key_parity, m, e):
    """
    Check a preprocessed signature against px, its parity, m and e

    Returns False for any signature that does not check out, including a
    parity outside {0, 1} or an x-coordinate with no curve point. Values that
    are not 32-byte quantities raise DomainError.
    """
    sr = bytes32(sr)
    er = int_from_bytes32(er)
    px = int_from_bytes32(pub_key_x)
    m = bytes32(m)
    e = int_from_bytes32(e)

    if pub_key_parity not in (0, 1):
        logger.debug("verify: rejecting parity %r", pub_key_parity)
        return False

    addr = ecrecover(sr, RECOVERY_V_OFFSET + pub_key_parity, px, er)
    if addr is None:
        return False

    # fresh hash, nothing cached from preprocessing
    if challenge_from_address(addr, m) != e:
        logger.debug("verify: challenge mismatch")
        return False
    return True


def verify_signature(public_key, m, signature):
    """Verify a full Signature against a public key point without ecrecover"""
    m = bytes32(m)
    if not 1 <= signature.s < N:
        return False
    try:
        eX = point_mul(public_key, signature.e)
        R = point_add(point_from_scalar(signature.s), point_neg(eX))
    except DomainError as err:
        logger.debug("verify_signature: %s", err)
        return False
    if R != signature.R:
        return False
    return challenge(R, m) == signature.e

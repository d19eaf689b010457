from concurrent.futures import ThreadPoolExecutor

import pytest
from py_ecc.secp256k1 import secp256k1 as py_ecc_secp256k1

from ecrecover_schnorr.curve import G, N, P, address_digest, keccak256, point_from_scalar
from ecrecover_schnorr.errors import DomainError
from ecrecover_schnorr.preprocess import preprocess
from ecrecover_schnorr.signer import KeyPair, Signature, sign
from ecrecover_schnorr.verifier import ecrecover, recovery_v, verify, verify_signature

TAMPER_BITS = (0, 1, 7, 64, 128, 200, 255)


def _signed(key_pair, message):
    sig = sign(message, key_pair.private_key)
    pre = preprocess(message, sig.R, sig.s, key_pair.x_coord)
    return sig, pre


def _flip(value, bit):
    if isinstance(value, bytes):
        return (int.from_bytes(value, 'big') ^ (1 << bit)).to_bytes(32, 'big')
    return value ^ (1 << bit)


def test_end_to_end_with_toy_key():
    kp = KeyPair.from_private_key(1)
    m = keccak256(b"test")
    sig = sign(m, kp.private_key)
    pre = preprocess(m, sig.R, sig.s, kp.x_coord)
    assert verify(pre.sr, pre.er, kp.x_coord, kp.parity, m, sig.e)

    m2 = keccak256(b"test2")
    assert not verify(pre.sr, pre.er, kp.x_coord, kp.parity, m2, sig.e)


def test_valid_signatures_verify(key_pair, message):
    for _ in range(5):
        sig, pre = _signed(key_pair, message)
        assert verify(pre.sr, pre.er, key_pair.x_coord, key_pair.parity, message, sig.e)
        assert verify_signature(key_pair.public_key, message, sig)


def test_verify_accepts_byte_encodings(key_pair, message):
    sig, pre = _signed(key_pair, message)
    as_bytes = pre.to_bytes()
    assert verify(
        as_bytes[:32],
        as_bytes[32:],
        key_pair.x_coord.to_bytes(32, 'big'),
        key_pair.parity,
        message,
        sig.e.to_bytes(32, 'big'),
    )


@pytest.mark.parametrize("bit", TAMPER_BITS)
def test_tampering_rejected(key_pair, message, bit):
    sig, pre = _signed(key_pair, message)
    args = [pre.sr, pre.er, key_pair.x_coord, key_pair.parity, message, sig.e]
    assert verify(*args)
    for index in (0, 1, 2, 4, 5):
        tampered = list(args)
        tampered[index] = _flip(tampered[index], bit)
        assert not verify(*tampered), f"accepted with bit {bit} of argument {index} flipped"


def test_wrong_parity_rejected(key_pair, message):
    sig, pre = _signed(key_pair, message)
    assert not verify(pre.sr, pre.er, key_pair.x_coord, 1 - key_pair.parity, message, sig.e)


@pytest.mark.parametrize("parity", [-1, 2, 27, 28, None])
def test_out_of_range_parity_rejected_without_raising(key_pair, message, parity):
    sig, pre = _signed(key_pair, message)
    assert not verify(pre.sr, pre.er, key_pair.x_coord, parity, message, sig.e)


def test_x_without_curve_point_rejected(key_pair, message):
    sig, pre = _signed(key_pair, message)
    x = next(x for x in range(1, 100) if pow(x ** 3 + 7, (P - 1) // 2, P) != 1)
    assert not verify(pre.sr, pre.er, x, 0, message, sig.e)


def test_x_at_or_above_order_rejected(key_pair, message):
    sig, pre = _signed(key_pair, message)
    assert not verify(pre.sr, pre.er, N, 0, message, sig.e)
    assert not verify(pre.sr, pre.er, 0, 0, message, sig.e)


def test_zero_er_rejected(key_pair, message):
    sig, pre = _signed(key_pair, message)
    assert not verify(pre.sr, 0, key_pair.x_coord, key_pair.parity, message, sig.e)


def test_signature_under_other_key_rejected(key_pair, message):
    sig, pre = _signed(key_pair, message)
    other = KeyPair.from_private_key(2)
    other_pre = preprocess(message, sig.R, sig.s, other.x_coord)
    assert not verify(other_pre.sr, other_pre.er, other.x_coord, other.parity, message, sig.e)


def test_verify_rejects_malformed_lengths(key_pair, message):
    sig, pre = _signed(key_pair, message)
    with pytest.raises(DomainError):
        verify(pre.sr, pre.er, key_pair.x_coord, key_pair.parity, message[:31], sig.e)
    with pytest.raises(DomainError):
        verify(pre.sr, pre.er, 2**256, key_pair.parity, message, sig.e)


def test_verify_signature_rejects_forgery(key_pair, message):
    sig = sign(message, key_pair.private_key)
    assert not verify_signature(key_pair.public_key, keccak256(b"other"), sig)
    assert not verify_signature(key_pair.public_key, message, Signature(sig.R, (sig.s + 1) % N, sig.e))
    assert not verify_signature(point_from_scalar(2), message, sig)
    assert not verify_signature(key_pair.public_key, message, Signature(sig.R, sig.s, 0))


def test_ecrecover_matches_ecdsa_recovery():
    msg_hash = keccak256(b"Hello, World!")
    v, r, s = py_ecc_secp256k1.ecdsa_raw_sign(msg_hash, (1).to_bytes(32, 'big'))
    assert ecrecover(msg_hash, v, r, s) == address_digest(G)


def test_ecrecover_returns_none_on_invalid_input():
    msg_hash = keccak256(b"Hello, World!")
    assert ecrecover(msg_hash, 29, G[0], 1) is None
    assert ecrecover(msg_hash, 27, 0, 1) is None
    assert ecrecover(msg_hash, 27, G[0], N) is None


def test_recovery_v():
    assert recovery_v(0) == 27
    assert recovery_v(1) == 28
    with pytest.raises(DomainError):
        recovery_v(2)


def test_concurrent_signing_and_verification(key_pair, message):
    def sign_and_verify(_):
        sig, pre = _signed(key_pair, message)
        ok = verify(pre.sr, pre.er, key_pair.x_coord, key_pair.parity, message, sig.e)
        return sig.R, ok

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(sign_and_verify, range(32)))

    assert all(ok for _, ok in results)
    assert len({R for R, _ in results}) == len(results)

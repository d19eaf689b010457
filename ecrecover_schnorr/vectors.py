#!/usr/bin/env python3
"""
Test vectors for the ecrecover Schnorr verifier

Generates signatures, preprocesses them into the (sr, er, px, v, m, e) tuple a
verifying contract takes, and writes them out as JSON. check_vector() re-runs
verification on a loaded vector so files produced elsewhere can be checked.

Usage:
    python -m ecrecover_schnorr.vectors --count 4 --output schnorr_vectors.json
"""

import argparse
import json
import secrets

from eth_utils import decode_hex, encode_hex, to_checksum_address

from .challenge import challenge
from .curve import N, address_digest, bytes32, decode_compressed, encode_compressed, keccak256
from .errors import DomainError
from .preprocess import preprocess
from .signer import KeyPair, sign
from .verifier import recovery_v, verify


def _hex32(value):
    return encode_hex(bytes32(value))


def build_vector(private_key, message, rng=None):
    """
    Sign message with private_key and collect everything a contract test needs
    """
    key_pair = KeyPair.from_private_key(private_key)
    if not key_pair.recoverable:
        raise DomainError("public key x-coordinate must be below the curve order")

    sig = sign(message, key_pair.private_key, rng)
    pre = preprocess(message, sig.R, sig.s, key_pair.x_coord)

    return {
        "description": "Schnorr signature verified via ecrecover",
        "contract_args": {
            "sr": _hex32(pre.sr),
            "er": _hex32(pre.er),
            "px": _hex32(key_pair.x_coord),
            "v": recovery_v(key_pair.parity),
            "m": _hex32(message),
            "e": _hex32(sig.e),
        },
        "signer": {
            "public_key": encode_hex(encode_compressed(key_pair.public_key)),
            "R": encode_hex(encode_compressed(sig.R)),
            "R_address": to_checksum_address(address_digest(sig.R)),
            "s": _hex32(sig.s),
        },
        "verification_passes": verify(pre.sr, pre.er, key_pair.x_coord, key_pair.parity, message, sig.e),
    }


def check_vector(vector):
    """
    Verify a vector loaded from JSON
    Returns (ok, message)
    """
    try:
        args = vector["contract_args"]
        sr = decode_hex(args["sr"])
        er = decode_hex(args["er"])
        px = decode_hex(args["px"])
        m = decode_hex(args["m"])
        e = decode_hex(args["e"])
        parity = int(args["v"]) - 27
    except (KeyError, TypeError, ValueError) as err:
        return False, f"malformed vector: {err}"

    try:
        if not verify(sr, er, px, parity, m, e):
            return False, "ecrecover verification failed"
    except DomainError as err:
        return False, f"malformed vector: {err}"

    signer = vector.get("signer")
    if signer:
        try:
            R = decode_compressed(decode_hex(signer["R"]))
        except (KeyError, ValueError) as err:
            return False, f"malformed signer section: {err}"
        if challenge(R, m) != int.from_bytes(e, 'big'):
            return False, "e does not match challenge(R, m)"
    return True, "ecrecover verification passed"


def write_vectors(path, vectors):
    with open(path, "w") as f:
        json.dump(vectors, f, indent=4)


def load_vectors(path):
    with open(path, "r") as f:
        return json.load(f)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate ecrecover Schnorr test vectors")
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--output", default="schnorr_vectors.json")
    parser.add_argument("--seed-message", default="test",
                        help="messages are keccak256 of this string plus the vector index")
    args = parser.parse_args(argv)

    vectors = []
    for i in range(args.count):
        # retry the rare key whose x-coordinate is >= N
        while True:
            key_pair = KeyPair.from_private_key(secrets.randbelow(N - 1) + 1)
            if key_pair.recoverable:
                break
        message = keccak256(f"{args.seed_message}{i}".encode())
        vector = build_vector(key_pair.private_key, message)
        ok, msg = check_vector(vector)
        print(f"Vector {i}: {msg}")
        if not ok:
            return 1
        vectors.append(vector)

    write_vectors(args.output, vectors)
    print(f"Saved {len(vectors)} vectors to: {args.output}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

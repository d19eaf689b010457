import secrets

import pytest

from ecrecover_schnorr.curve import N, keccak256
from ecrecover_schnorr.signer import KeyPair


@pytest.fixture
def key_pair():
    while True:
        kp = KeyPair.from_private_key(secrets.randbelow(N - 1) + 1)
        if kp.recoverable:
            return kp


@pytest.fixture
def message():
    return keccak256(secrets.token_bytes(32))

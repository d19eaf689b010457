"""
Challenge hash for the address-bound Schnorr variant

    e = keccak256(address(R) || uint256(m))

which is solidityKeccak256(["address", "uint256"], [address(R), m]). The value
is deliberately left unreduced; every consumer multiplies it mod N.
"""

from .curve import ADDRESS_LENGTH, address_digest, bytes32, keccak256
from .errors import DomainError


def challenge_from_address(addr, m):
    addr = bytes(addr)
    if len(addr) != ADDRESS_LENGTH:
        raise DomainError(f"address must be {ADDRESS_LENGTH} bytes, got {len(addr)}")
    return int.from_bytes(keccak256(addr + bytes32(m)), 'big')


def challenge(R, m):
    return challenge_from_address(address_digest(R), m)

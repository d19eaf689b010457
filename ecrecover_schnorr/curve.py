"""
secp256k1 scalar and point arithmetic

Thin layer over py_ecc's secp256k1 module. Points are affine (x, y) tuples of
ints; the identity is never handed out, anything that would produce it raises
DomainError instead.
"""

from eth_utils import keccak
from py_ecc.secp256k1 import secp256k1 as _ec

from .errors import DomainError

# Curve parameters
N = _ec.N  # group order
P = _ec.P  # field modulus
G = _ec.G  # generator point

ADDRESS_LENGTH = 20
_MAX_UINT256 = 2**256


def keccak256(data):
    return keccak(primitive=bytes(data))


def bytes32(value):
    """Encode an int in [0, 2^256) as 32 big-endian bytes"""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 32:
            raise DomainError(f"expected 32 bytes, got {len(value)}")
        return bytes(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise DomainError(f"expected int or 32 bytes, got {type(value).__name__}")
    if not 0 <= value < _MAX_UINT256:
        raise DomainError("integer does not fit in 32 bytes")
    return value.to_bytes(32, 'big')


def int_from_bytes32(value):
    """Accept an int or 32 big-endian bytes and return the int"""
    return int.from_bytes(bytes32(value), 'big')


# Scalar arithmetic mod N
def scalar_add(a, b):
    return (a + b) % N


def scalar_mul(a, b):
    return (a * b) % N


def scalar_negate(a):
    return -a % N


# Point arithmetic
def is_on_curve(pt):
    if pt is None:
        return False
    x, y = pt
    if not (0 <= x < P and 0 <= y < P):
        return False
    # y^2 = x^3 + 7
    return (y * y - (x * x * x + 7)) % P == 0


def _check_point(pt):
    if not is_on_curve(pt):
        raise DomainError(f"{pt} is not a point on secp256k1")
    return pt


def _from_py_ecc(pt):
    # py_ecc encodes the point at infinity as (0, 0)
    if pt[0] == 0 and pt[1] == 0:
        raise DomainError("result is the point at infinity")
    return (int(pt[0]), int(pt[1]))


def point_from_scalar(k):
    """k * G, rejecting k == 0 mod N"""
    if k % N == 0:
        raise DomainError("scalar is zero mod the curve order")
    return _from_py_ecc(_ec.multiply(G, k % N))


def point_mul(pt, k):
    _check_point(pt)
    if k % N == 0:
        raise DomainError("scalar is zero mod the curve order")
    return _from_py_ecc(_ec.multiply(pt, k % N))


def point_add(a, b):
    return _from_py_ecc(_ec.add(_check_point(a), _check_point(b)))


def point_neg(pt):
    x, y = _check_point(pt)
    return (x, (-y) % P)


# Encodings
def compress(pt):
    """Return (32-byte x, parity of y)"""
    x, y = _check_point(pt)
    return x.to_bytes(32, 'big'), y & 1


def decompress(x_bytes, parity):
    if parity not in (0, 1):
        raise DomainError(f"parity must be 0 or 1, got {parity!r}")
    x = int_from_bytes32(x_bytes)
    if x >= P:
        raise DomainError("x-coordinate is not a field element")
    c = (x * x * x + 7) % P
    y = pow(c, (P + 1) // 4, P)
    if (y * y) % P != c:
        raise DomainError(f"no curve point has x-coordinate {x:#066x}")
    if y & 1 != parity:
        y = P - y
    return (x, y)


def encode_compressed(pt):
    x_bytes, parity = compress(pt)
    return bytes([2 + parity]) + x_bytes


def decode_compressed(data):
    data = bytes(data)
    if len(data) != 33 or data[0] not in (2, 3):
        raise DomainError("compressed point must be 33 bytes with a 0x02/0x03 tag")
    return decompress(data[1:], data[0] - 2)


def encode_uncompressed(pt):
    x, y = _check_point(pt)
    return b'\x04' + x.to_bytes(32, 'big') + y.to_bytes(32, 'big')


def address_digest(pt):
    """Ethereum-style address: last 20 bytes of keccak256(X || Y)"""
    return keccak256(encode_uncompressed(pt)[1:])[-ADDRESS_LENGTH:]

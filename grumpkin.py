#| # Grumpkin
#| The auxiliary curve used for the bridge commitment. Grumpkin is the
#| short-Weierstrass curve y^2 = x^3 - 17 over the scalar field of BN254,
#| so its points can be handled natively inside a BN254 circuit. It has prime
#| order N (the BN254 base field), so every non-identity point generates the
#| whole group and scalars may be reduced mod N freely.
import hashlib

from elliptic import EllipticCurve, Point, Ideal
from finitefield.modp import IntegersModP

# Base field of Grumpkin (the BN254 scalar field)
P = 21888242871839275222246405745257275088548364400416034343698204186575808495617
# Group order (the BN254 base field)
N = 21888242871839275222246405745257275088696311157297823662689037894645226208583

Fq = IntegersModP(P)
curve = EllipticCurve(a=Fq(0), b=Fq(-17))

# G = (1, sqrt(-16))
G = Point(curve, Fq(1), Fq(17631683881184975370165255887551781615748388533673675138860))
INFINITY = Ideal(curve)

POINT_BYTES = 64


def add(P1, P2):
    return P1 + P2


def neg(P1):
    return -P1


def mul(k, P1):
    # all points share the prime order N, so reducing first is exact
    return P1 * (k % N)


def eq(P1, P2):
    return P1 == P2


def is_on_curve(x, y):
    return curve.testPoint(Fq(x), Fq(y))


def point(x, y):
    """Build a point from integer coordinates, refusing anything off the curve."""
    if not (0 <= x < P and 0 <= y < P):
        raise ValueError("coordinates must lie in [0, P)")
    return Point(curve, Fq(x), Fq(y))


def serialize(P1):
    """64-byte big-endian x || y. The point at infinity is 64 zero bytes."""
    if P1.infinity:
        return bytes(POINT_BYTES)
    return P1.x.to_bytes() + P1.y.to_bytes()


def deserialize(data):
    if len(data) != POINT_BYTES:
        raise ValueError("a Grumpkin point is %d bytes, got %d" % (POINT_BYTES, len(data)))
    if data == bytes(POINT_BYTES):
        return INFINITY
    x = Fq.from_bytes(data[:32])
    y = Fq.from_bytes(data[32:])
    return Point(curve, x, y)


def seed_to_point(seed):
    """Deterministic point from a string tag: sha256(seed) mod P, times G."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    k = int.from_bytes(digest, "big") % P or 1
    return mul(k, G)

#| # BLS12-381 groups
#| The pairing-friendly side of the protocol. We use the optimized
#| (projective) BLS12-381 implementation from `py_ecc`, and fix the
#| encodings used everywhere else in this project:
#|  - G1: 48-byte compressed (zcash format)
#|  - G2: 96-byte compressed
#|  - GT: the 12 Fq limbs of the Fq2 -> Fq6 -> Fq12 tower, 48 bytes each
import hashlib

from py_ecc import optimized_bls12_381 as bls12_381
from py_ecc.optimized_bls12_381 import FQ12, G1, G2, Z1, Z2, add, neg, multiply, eq, is_inf
from py_ecc.bls.g2_primitives import (
    G1_to_pubkey,
    G2_to_signature,
    pubkey_to_G1,
    signature_to_G2,
    subgroup_check,
)
from py_ecc.bls.hash_to_curve import hash_to_G1

# BLS12_381 group order
r = bls12_381.curve_order
q = bls12_381.field_modulus

G1_BYTES = 48
G2_BYTES = 96
GT_BYTES = 12 * 48

HASH_TO_G1_DST = b"BLS_SIG_BLS12381G1_XMD:SHA-256_SSWU_RO_NUL_"

GT_ONE = FQ12.one()


def pair(P, Q):
    """e(P, Q) for P in G1 and Q in G2 (py_ecc takes them the other way round)."""
    return bls12_381.pairing(Q, P)


def g1_mul(P, k):
    return multiply(P, k % r)


def g2_mul(Q, k):
    return multiply(Q, k % r)


def gt_pow(x, k):
    # GT has order r, and py_ecc only accepts non-negative exponents
    return x ** (k % r)


def hash_to_g1(msg):
    return hash_to_G1(msg, HASH_TO_G1_DST, hashlib.sha256)


def g1_to_bytes(P):
    return bytes(G1_to_pubkey(P))


def g2_to_bytes(Q):
    return bytes(G2_to_signature(Q))


def _w_to_tower(coeffs):
    # Fq12 = Fq[w]/(w^12 - 2w^6 + 2) viewed as Fq2[v][w] with v = w^2, u = w^6 - 1:
    # (x + y*u) * v^i * w^j contributes x - y to w^(2i+j) and y to w^(2i+j+6)
    out = []
    for j in (0, 1):
        for i in (0, 1, 2):
            k = 2 * i + j
            y = coeffs[k + 6] % q
            out += [(coeffs[k] + y) % q, y]
    return out


def _tower_to_w(limbs):
    coeffs = [0] * 12
    for j in (0, 1):
        for i in (0, 1, 2):
            k = 2 * i + j
            x, y = limbs[6 * j + 2 * i], limbs[6 * j + 2 * i + 1]
            coeffs[k] = (x - y) % q
            coeffs[k + 6] = y
    return coeffs


def gt_to_bytes(x):
    """Tower layout c0.c0.c0, c0.c0.c1, c0.c1.c0, ..., c1.c2.c1, 48 bytes each."""
    return b"".join(c.to_bytes(48, "big") for c in _w_to_tower([int(c) for c in x.coeffs]))


def g1_from_bytes(data):
    """Decode a compressed G1 point, checking curve and subgroup membership."""
    if len(data) != G1_BYTES:
        raise ValueError("a G1 element is %d bytes, got %d" % (G1_BYTES, len(data)))
    P = pubkey_to_G1(data)
    if not subgroup_check(P):
        raise ValueError("G1 point is not in the prime-order subgroup")
    return P


def g2_from_bytes(data):
    if len(data) != G2_BYTES:
        raise ValueError("a G2 element is %d bytes, got %d" % (G2_BYTES, len(data)))
    Q = signature_to_G2(data)
    if not subgroup_check(Q):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return Q


def gt_from_bytes(data):
    if len(data) != GT_BYTES:
        raise ValueError("a GT element is %d bytes, got %d" % (GT_BYTES, len(data)))
    limbs = [int.from_bytes(data[i:i + 48], "big") for i in range(0, GT_BYTES, 48)]
    if any(c >= q for c in limbs):
        raise ValueError("GT coefficient is not a canonical field element")
    x = FQ12(_tower_to_w(limbs))
    # the r-th roots of unity in Fq12 are exactly the pairing outputs
    if x == FQ12.zero() or x ** r != GT_ONE:
        raise ValueError("Fq12 element is not in GT")
    return x

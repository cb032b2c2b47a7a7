#| # Credential inputs
#| Turns what the holder has on hand (the issuer's verification bundle, the
#| holder's key pair, the token claims and the message to sign) into the
#| statement and witness of the Syra show proof.
import binascii
import logging

import attr

import bls12
from bls12 import g1_mul, g2_mul, add
from bridge import subject_scalar
from errors import InputError, KeyMaterialError, MissingKeyMaterial, WitnessMismatch
from syra import Signals, Statement, Witness
from util import random_scalar

logger = logging.getLogger(__name__)

# Issuer bundle layout: g1, g2, ivk_hat, W, W_hat
IVK_LAYOUT = (
    ("g1", bls12.G1_BYTES),
    ("g2", bls12.G2_BYTES),
    ("ivk_hat", bls12.G2_BYTES),
    ("W", bls12.G1_BYTES),
    ("W_hat", bls12.G2_BYTES),
)
IVK_BYTES = sum(width for _, width in IVK_LAYOUT)


def _unhex(name, value):
    if not value:
        raise MissingKeyMaterial("missing %s" % name)
    try:
        return binascii.unhexlify(value)
    except (ValueError, TypeError) as e:
        raise KeyMaterialError("%s is not valid hex: %s" % (name, e))


def _decode(name, data, width):
    if len(data) != width:
        raise KeyMaterialError("%s must be %d bytes, got %d" % (name, width, len(data)))
    decode = bls12.g1_from_bytes if width == bls12.G1_BYTES else bls12.g2_from_bytes
    try:
        point = decode(data)
    except ValueError as e:
        raise KeyMaterialError("%s is not a valid group element: %s" % (name, e))
    if bls12.is_inf(point):
        raise KeyMaterialError("%s is the identity element" % name)
    return point


@attr.s(frozen=True)
class IssuerKey(object):
    g1 = attr.ib()
    g2 = attr.ib()
    ivk_hat = attr.ib()
    W = attr.ib()
    W_hat = attr.ib()

    @classmethod
    def from_hex(cls, ivk_hex):
        data = _unhex("ivk", ivk_hex)
        if len(data) != IVK_BYTES:
            raise KeyMaterialError("ivk must be %d bytes, got %d" % (IVK_BYTES, len(data)))
        fields = {}
        offset = 0
        for name, width in IVK_LAYOUT:
            fields[name] = _decode(name, data[offset:offset + width], width)
            offset += width
        return cls(**fields)

    def to_hex(self):
        return b"".join([
            bls12.g1_to_bytes(self.g1),
            bls12.g2_to_bytes(self.g2),
            bls12.g2_to_bytes(self.ivk_hat),
            bls12.g1_to_bytes(self.W),
            bls12.g2_to_bytes(self.W_hat),
        ]).hex()


@attr.s(frozen=True)
class UserKey(object):
    usk = attr.ib()
    usk_hat = attr.ib()

    @classmethod
    def from_hex(cls, usk_hex, usk_hat_hex):
        usk = _decode("usk", _unhex("usk", usk_hex), bls12.G1_BYTES)
        usk_hat = _decode("usk_hat", _unhex("usk_hat", usk_hat_hex), bls12.G2_BYTES)
        return cls(usk=usk, usk_hat=usk_hat)

    def to_hex(self):
        return bls12.g1_to_bytes(self.usk).hex(), bls12.g2_to_bytes(self.usk_hat).hex()


def context_bytes(claims):
    for name in ("aud", "iss"):
        if not isinstance(claims.get(name), str):
            raise InputError("claim %r is missing or not a string" % name)
    return (claims["aud"] + claims["iss"]).encode("utf-8")


def hash_context(ctx):
    """Z = H(aud || iss) in G1, a random-oracle base tied to the relying party."""
    return bls12.hash_to_g1(ctx)


def generate_signals(ivk_hex, usk_hex, usk_hat_hex, claims, message, bridge):
    """Assemble the statement and witness of one show proof.

    `bridge` is the BridgeCommitment whose (s, r) were handed to the bridge
    circuit; its `s` must be the scalar of the `sub` claim.
    """
    if not ivk_hex or not usk_hex or not usk_hat_hex:
        raise MissingKeyMaterial("missing ivk/usk/usk_hat")

    issuer = IssuerKey.from_hex(ivk_hex)
    user = UserKey.from_hex(usk_hex, usk_hat_hex)
    return assemble(issuer, user, claims, message, bridge)


def assemble(issuer, user, claims, message, bridge):
    if "sub" not in claims:
        raise InputError("claim 'sub' is missing")
    s = subject_scalar(claims["sub"])
    if s != bridge.s:
        raise WitnessMismatch("bridge commitment was built for a different subject")

    ctx = context_bytes(claims)
    m = message.encode("utf-8") if isinstance(message, str) else bytes(message)

    Z = hash_context(ctx)
    T = bls12.pair(Z, user.usk_hat)

    alpha = random_scalar(bls12.r)
    beta = random_scalar(bls12.r)

    # C = (g1^beta, W^beta . usk)
    C1 = g1_mul(issuer.g1, beta)
    C2 = add(g1_mul(issuer.W, beta), user.usk)

    # C_hat = (g2^alpha, W_hat^alpha . usk_hat)
    C1hat = g2_mul(issuer.g2, alpha)
    C2hat = add(g2_mul(issuer.W_hat, alpha), user.usk_hat)

    logger.debug("assembled statement for a %d-byte context and %d-byte message", len(ctx), len(m))

    statement = Statement(
        Z=Z, g1=issuer.g1, g2=issuer.g2, ivk_hat=issuer.ivk_hat,
        W=issuer.W, W_hat=issuer.W_hat,
        C1=C1, C2=C2, C1hat=C1hat, C2hat=C2hat, T=T,
        g3=bridge.g3, g4=bridge.g4, bridge=bridge.bridge,
        ctx=ctx, m=m,
    )
    witness = Witness(alpha=alpha, beta=beta, s=bridge.s, r=bridge.r)
    return Signals(statement=statement, witness=witness)

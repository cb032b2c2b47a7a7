#| # Bridge commitment
#| The identity-token circuit exposes the token's subject as a BN254 field
#| element. To carry it over to the Syra proof without revealing it, we
#| commit to it on Grumpkin with a two-generator Pedersen commitment
#|
#|     bridge = s * G3 + r * G4
#|
#| The external bridge circuit proves the committed `s` is the token subject;
#| the Syra proof proves its own `s` opens the same commitment.
import logging
import time

import attr

import grumpkin
from errors import ClaimTooLong, WitnessMismatch
from util import decimal, random_scalar

logger = logging.getLogger(__name__)

G3_SEED = "BN254-Pedersen-G3"
G4_SEED = "BN254-Pedersen-G4"

# Domain-separated generators, fixed for the lifetime of the process.
G3 = grumpkin.seed_to_point(G3_SEED)
G4 = grumpkin.seed_to_point(G4_SEED)

# Audience and issuer travel as fixed-size buffers with an explicit length.
CLAIM_PAD_BYTES = 100
# 31 bytes is the longest string that always stays below the field order.
SUBJECT_MAX_BYTES = 31


def subject_scalar(sub):
    """The subject claim read as a big-endian integer. Zero becomes 1."""
    data = sub.encode("utf-8")
    if len(data) > SUBJECT_MAX_BYTES:
        raise ClaimTooLong("subject is %d bytes, at most %d fit in a field element"
                           % (len(data), SUBJECT_MAX_BYTES))
    return (int.from_bytes(data, "big") % grumpkin.P) or 1


def commit(s, r, g3=G3, g4=G4):
    return grumpkin.add(grumpkin.mul(s, g3), grumpkin.mul(r, g4))


@attr.s(frozen=True)
class BridgeCommitment(object):
    s = attr.ib()
    r = attr.ib()
    bridge = attr.ib()
    g3 = attr.ib(default=G3)
    g4 = attr.ib(default=G4)

    def __attrs_post_init__(self):
        if not self.opens(self.s, self.r):
            raise WitnessMismatch("bridge point does not open to the given (s, r)")

    @classmethod
    def create(cls, s, r=None):
        if r is None:
            r = random_scalar(grumpkin.N)
        logger.debug("building bridge commitment")
        return cls(s=s, r=r, bridge=commit(s, r))

    @classmethod
    def from_subject(cls, sub, r=None):
        return cls.create(subject_scalar(sub), r)

    def opens(self, s, r):
        return grumpkin.eq(commit(s, r, self.g3, self.g4), self.bridge)


def pad_claim(value, size=CLAIM_PAD_BYTES):
    data = value.encode("utf-8")
    if len(data) > size:
        raise ClaimTooLong("value %r exceeds %d bytes" % (value, size))
    padded = data + bytes(size - len(data))
    return {
        "storage": [decimal(b) for b in padded],
        "len": decimal(len(data)),
    }


def noir_point(P):
    if P.infinity:
        return {"x": "0", "y": "0", "is_infinite": True}
    return {"x": decimal(P.x), "y": decimal(P.y), "is_infinite": False}


def bridge_circuit_inputs(commitment, claims, jwt_inputs, current_time=None):
    """Witness mapping for the bridge circuit.

    `jwt_inputs` are the signed-data inputs produced by the JWT helper of the
    circuit toolchain; they pass through untouched. Everything added here is
    a decimal string.
    """
    if current_time is None:
        current_time = int(time.time())

    inputs = dict(jwt_inputs)
    inputs.update({
        "g3": noir_point(commitment.g3),
        "g4": noir_point(commitment.g4),
        "bridge": noir_point(commitment.bridge),
        "domain": pad_claim(claims["aud"]),
        "issuer": pad_claim(claims["iss"]),
        "current_time": decimal(current_time),
        "r": decimal(commitment.r),
    })
    return inputs

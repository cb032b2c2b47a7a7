#| # Syra show proof
#| A holder owns a credential (usk, usk_hat) = (g1, g2)^(1/(x+s)) issued for
#| subject scalar s under the issuer key ivk_hat = g2^x. To show it for a
#| relying-party context Z = H(aud || iss), the holder publishes
#| T = e(Z, usk_hat) together with ElGamal-style encryptions
#|
#|     C     = (g1^beta,  W^beta . usk)
#|     C_hat = (g2^alpha, W_hat^alpha . usk_hat)
#|
#| and proves, in zero knowledge, knowledge of (alpha, beta, s, r) such that
#| the encryptions hide a valid credential for s, T is computed from it, and
#| s is the value committed in the Grumpkin bridge s*G3 + r*G4.
#|
#| Notation: A..J are pairing products computable from the statement, t* are
#| the prover's first-move commitments, resp* are the responses. The protocol
#| is made non-interactive with Fiat-Shamir over a fixed transcript.
import hashlib
import hmac
import logging

import attr

import bls12
import grumpkin
from bls12 import pair, g1_mul, g2_mul, gt_pow, add, neg, is_inf
from bridge import G3, G4, commit
from elliptic import Point
from errors import WitnessMismatch
from util import random_scalar

logger = logging.getLogger(__name__)

# Scalars used only in pairing exponents live mod r. The subject scalar is
# also a Grumpkin multiplier, so its response lives mod r * N, and the bridge
# randomness lives mod N.
SCALAR_ORDER = bls12.r
BRIDGE_ORDER = grumpkin.N
JOINT_ORDER = SCALAR_ORDER * BRIDGE_ORDER

CHALLENGE_BYTES = 64

_bytes = attr.validators.instance_of(bytes)


@attr.s(frozen=True)
class Statement(object):
    Z = attr.ib()
    g1 = attr.ib()
    g2 = attr.ib()
    ivk_hat = attr.ib()
    W = attr.ib()
    W_hat = attr.ib()

    C1 = attr.ib()
    C2 = attr.ib()
    C1hat = attr.ib()
    C2hat = attr.ib()

    T = attr.ib()

    g3 = attr.ib(validator=attr.validators.instance_of(Point))
    g4 = attr.ib(validator=attr.validators.instance_of(Point))
    bridge = attr.ib(validator=attr.validators.instance_of(Point))

    ctx = attr.ib(validator=_bytes)
    m = attr.ib(validator=_bytes)


@attr.s(frozen=True, repr=False)
class Witness(object):
    alpha = attr.ib()
    beta = attr.ib()
    s = attr.ib()
    r = attr.ib()

    def __repr__(self):
        return "Witness(<hidden>)"


@attr.s(frozen=True)
class Signals(object):
    statement = attr.ib(validator=attr.validators.instance_of(Statement))
    witness = attr.ib(validator=attr.validators.instance_of(Witness))


@attr.s(frozen=True)
class Commitments(object):
    K1 = attr.ib()
    K2 = attr.ib()
    tC1 = attr.ib()
    tC1hat = attr.ib()
    tB = attr.ib()
    tE = attr.ib()
    tH = attr.ib()
    tK1 = attr.ib()
    tK2 = attr.ib()
    tK2Product = attr.ib()
    tBridge = attr.ib(validator=attr.validators.instance_of(Point))


@attr.s(frozen=True)
class Responses(object):
    resp_alpha = attr.ib()
    resp_beta = attr.ib()
    resp_s = attr.ib()
    resp_beta_times_s = attr.ib()
    resp_r1 = attr.ib()
    resp_r2 = attr.ib()
    resp_r3 = attr.ib()
    resp_r = attr.ib()

    # modulus each response is reduced by
    ranges = {
        "resp_alpha": SCALAR_ORDER,
        "resp_beta": SCALAR_ORDER,
        "resp_s": JOINT_ORDER,
        "resp_beta_times_s": SCALAR_ORDER,
        "resp_r1": SCALAR_ORDER,
        "resp_r2": SCALAR_ORDER,
        "resp_r3": SCALAR_ORDER,
        "resp_r": BRIDGE_ORDER,
    }


@attr.s(frozen=True)
class Proof(object):
    statement = attr.ib(validator=attr.validators.instance_of(Statement))
    commitments = attr.ib(validator=attr.validators.instance_of(Commitments))
    responses = attr.ib(validator=attr.validators.instance_of(Responses))


#| ## Fiat-Shamir
#| The transcript order below is the verification contract: prover and
#| verifier must serialize exactly these values, in exactly this order.
def compute_challenge_contribution(statement, commitments):
    s, t = statement, commitments
    g1b, g2b, gtb, grb = bls12.g1_to_bytes, bls12.g2_to_bytes, bls12.gt_to_bytes, grumpkin.serialize
    return b"".join([
        g1b(s.Z),
        gtb(s.T),
        g1b(s.C1),
        g1b(s.C2),
        g2b(s.C1hat),
        g2b(s.C2hat),
        gtb(t.K1),
        gtb(t.K2),
        g1b(t.tC1),
        g2b(t.tC1hat),
        gtb(t.tB),
        gtb(t.tE),
        gtb(t.tH),
        gtb(t.tK1),
        gtb(t.tK2),
        gtb(t.tK2Product),
        grb(t.tBridge),
        grb(s.bridge),
    ])


def compute_random_oracle_challenge(transcript):
    digest = hashlib.blake2b(transcript, digest_size=CHALLENGE_BYTES).digest()
    return int.from_bytes(digest, "big") % SCALAR_ORDER


def challenge_for(statement, commitments):
    transcript = compute_challenge_contribution(statement, commitments)
    return compute_random_oracle_challenge(transcript + statement.m)


#| ## Prover
BUILT, COMMITTED, CHALLENGED, RESPONDED = "built", "committed", "challenged", "responded"


class Prover(object):
    """One proving session: Built -> Committed -> Challenged -> Responded.

    A session produces exactly one proof. Its blinding scalars are dropped as
    soon as the responses are computed.
    """

    def __init__(self, statement, witness):
        if not isinstance(statement, Statement) or not isinstance(witness, Witness):
            raise TypeError("Prover needs a Statement and a Witness")
        if not 0 < witness.s < grumpkin.P:
            raise WitnessMismatch("subject scalar out of range")
        # the same (s, r) must open the bridge the external circuit saw
        if not grumpkin.eq(commit(witness.s, witness.r, statement.g3, statement.g4), statement.bridge):
            raise WitnessMismatch("witness (s, r) does not open the statement's bridge")

        self.statement = statement
        self.state = BUILT
        self.commitments = None
        self.c = None
        self._witness = witness
        self._secrets = None

    def commit(self):
        if self.state != BUILT:
            raise RuntimeError("commit() called in state %r" % self.state)
        st, w = self.statement, self._witness
        s = w.s

        A = pair(st.Z, st.W_hat)
        E = pair(st.C2, st.g2) * pair(neg(st.g1), st.C2hat)
        J = pair(st.C2, neg(st.g2))
        F = pair(st.W, st.g2)
        G = pair(neg(st.g1), st.W_hat)
        I = pair(st.W, st.ivk_hat)

        # r3 and omega tie the ciphertext randomness to s
        r1 = random_scalar(SCALAR_ORDER)
        r2 = random_scalar(SCALAR_ORDER)
        r3 = (r2 - w.alpha * s) % SCALAR_ORDER
        omega = (w.beta * s) % SCALAR_ORDER

        K1 = gt_pow(F, s) * gt_pow(G, r1)
        K2 = gt_pow(F, omega) * gt_pow(G, r2)

        b = {
            "alpha": random_scalar(SCALAR_ORDER),
            "beta": random_scalar(SCALAR_ORDER),
            "s": random_scalar(JOINT_ORDER),
            "omega": random_scalar(SCALAR_ORDER),
            "r1": random_scalar(SCALAR_ORDER),
            "r2": random_scalar(SCALAR_ORDER),
            "r3": random_scalar(SCALAR_ORDER),
            "r": random_scalar(BRIDGE_ORDER),
        }

        FBS = gt_pow(F, b["omega"])
        self.commitments = Commitments(
            K1=K1,
            K2=K2,
            tC1=g1_mul(st.g1, b["beta"]),
            tC1hat=g2_mul(st.g2, b["alpha"]),
            tB=gt_pow(A, b["alpha"]),
            tE=gt_pow(F, b["beta"]) * gt_pow(G, b["alpha"]),
            tH=gt_pow(I, b["beta"]) * FBS * gt_pow(J, b["s"]),
            tK1=gt_pow(F, b["s"]) * gt_pow(G, b["r1"]),
            tK2=FBS * gt_pow(G, b["r2"]),
            tK2Product=gt_pow(E, b["s"]) * gt_pow(G, b["r3"]),
            # the link to the bridge: same generators, same (s, r)
            tBridge=grumpkin.add(grumpkin.mul(b["s"], st.g3), grumpkin.mul(b["r"], st.g4)),
        )
        self._secrets = {
            "blinding": b,
            "r1": r1, "r2": r2, "r3": r3, "omega": omega,
        }
        self.state = COMMITTED
        logger.debug("prover commitments computed")
        return self.commitments

    def challenge(self):
        if self.state != COMMITTED:
            raise RuntimeError("challenge() called in state %r" % self.state)
        self.c = challenge_for(self.statement, self.commitments)
        self.state = CHALLENGED
        return self.c

    def respond(self, c=None):
        if self.state not in (COMMITTED, CHALLENGED):
            raise RuntimeError("respond() called in state %r" % self.state)
        if c is None:
            c = self.c if self.c is not None else self.challenge()
        w, sec = self._witness, self._secrets
        b = sec["blinding"]

        def resp(blinding, secret, order=SCALAR_ORDER):
            return (blinding + c * secret) % order

        responses = Responses(
            resp_alpha=resp(b["alpha"], w.alpha),
            resp_beta=resp(b["beta"], w.beta),
            resp_s=resp(b["s"], w.s, JOINT_ORDER),
            resp_beta_times_s=resp(b["omega"], sec["omega"]),
            resp_r1=resp(b["r1"], sec["r1"]),
            resp_r2=resp(b["r2"], sec["r2"]),
            resp_r3=resp(b["r3"], sec["r3"]),
            resp_r=resp(b["r"], w.r, BRIDGE_ORDER),
        )
        self._witness = None
        self._secrets = None
        self.state = RESPONDED
        return Proof(statement=self.statement, commitments=self.commitments, responses=responses)


def init(statement, witness):
    prover = Prover(statement, witness)
    prover.commit()
    return prover


def prove(prover, c):
    return prover.respond(c)


#| ## Verifier
def _same(a, b):
    return hmac.compare_digest(a, b)


def _g1_ok(P):
    return bls12.bls12_381.is_on_curve(P, bls12.bls12_381.b) and bls12.subgroup_check(P)


def _g2_ok(Q):
    return bls12.bls12_381.is_on_curve(Q, bls12.bls12_381.b2) and bls12.subgroup_check(Q)


def _gt_ok(x):
    return isinstance(x, bls12.FQ12) and x ** SCALAR_ORDER == bls12.GT_ONE


def well_formed(proof):
    """Structural checks on a proof that may come from anyone."""
    if not isinstance(proof, Proof):
        return False
    st, t, z = proof.statement, proof.commitments, proof.responses

    for P in (st.Z, st.g1, st.W, st.C1, st.C2, t.tC1):
        if not _g1_ok(P):
            return False
    for Q in (st.g2, st.ivk_hat, st.W_hat, st.C1hat, st.C2hat, t.tC1hat):
        if not _g2_ok(Q):
            return False
    if is_inf(st.g1) or is_inf(st.g2):
        return False
    # the bridge circuit only knows the fixed generators
    if not (grumpkin.eq(st.g3, G3) and grumpkin.eq(st.g4, G4)):
        return False
    # T = e(Z, usk_hat) names a relying party only through Z = H(ctx)
    if not bls12.eq(st.Z, bls12.hash_to_g1(st.ctx)):
        return False
    for x in (t.tB, t.tE, t.tH, t.tK1, t.tK2, t.tK2Product):
        if not isinstance(x, bls12.FQ12):
            return False
    # T, K1 and K2 enter the checks as bases, so they must really be in GT
    for x in (st.T, t.K1, t.K2):
        if not _gt_ok(x):
            return False
    for name, order in Responses.ranges.items():
        value = getattr(z, name)
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < order:
            return False
    return True


def verify(proof, c):
    """Check all nine relations for challenge `c`. Stops at the first mismatch."""
    st, t, z = proof.statement, proof.commitments, proof.responses
    minus_c = -c % SCALAR_ORDER
    g1b, g2b, gtb = bls12.g1_to_bytes, bls12.g2_to_bytes, bls12.gt_to_bytes

    # tC1 == g1^respBeta . C1^-c
    if not _same(g1b(t.tC1), g1b(add(g1_mul(st.g1, z.resp_beta), g1_mul(st.C1, minus_c)))):
        return False

    # tC1hat == g2^respAlpha . C1hat^-c
    if not _same(g2b(t.tC1hat), g2b(add(g2_mul(st.g2, z.resp_alpha), g2_mul(st.C1hat, minus_c)))):
        return False

    # tB == A^respAlpha . B^-c
    A = pair(st.Z, st.W_hat)
    B = pair(st.Z, st.C2hat) / st.T
    if not _same(gtb(t.tB), gtb(gt_pow(A, z.resp_alpha) * gt_pow(B, minus_c))):
        return False

    # tE == F^respBeta . G^respAlpha . E^-c
    F = pair(st.W, st.g2)
    G = pair(neg(st.g1), st.W_hat)
    E = pair(st.C2, st.g2) * pair(neg(st.g1), st.C2hat)
    if not _same(gtb(t.tE), gtb(gt_pow(F, z.resp_beta) * gt_pow(G, z.resp_alpha) * gt_pow(E, minus_c))):
        return False

    # tH == I^respBeta . F^respBetaTimesS . J^respS . H^-c
    I = pair(st.W, st.ivk_hat)
    J = pair(st.C2, neg(st.g2))
    H = pair(st.C2, st.ivk_hat) / pair(st.g1, st.g2)
    FBS = gt_pow(F, z.resp_beta_times_s)
    if not _same(gtb(t.tH), gtb(gt_pow(I, z.resp_beta) * FBS * gt_pow(J, z.resp_s) * gt_pow(H, minus_c))):
        return False

    # tK1 == F^respS . G^respR1 . K1^-c
    if not _same(gtb(t.tK1), gtb(gt_pow(F, z.resp_s) * gt_pow(G, z.resp_r1) * gt_pow(t.K1, minus_c))):
        return False

    # tK2 == F^respBetaTimesS . G^respR2 . K2^-c
    K2c = gt_pow(t.K2, minus_c)
    if not _same(gtb(t.tK2), gtb(FBS * gt_pow(G, z.resp_r2) * K2c)):
        return False

    # tK2Product == E^respS . G^respR3 . K2^-c
    if not _same(gtb(t.tK2Product), gtb(gt_pow(E, z.resp_s) * gt_pow(G, z.resp_r3) * K2c)):
        return False

    # Grumpkin: respS . g3 + respR . g4 == tBridge + c . bridge
    L = grumpkin.add(grumpkin.mul(z.resp_s, st.g3), grumpkin.mul(z.resp_r, st.g4))
    R = grumpkin.add(t.tBridge, grumpkin.mul(c, st.bridge))
    if not _same(grumpkin.serialize(L), grumpkin.serialize(R)):
        return False

    return True


#| ## Non-interactive wrappers
def prove_from_signals(signals):
    """Run a whole session on assembled signals and return the proof."""
    prover = init(signals.statement, signals.witness)
    c = prover.challenge()
    return prover.respond(c)


def verify_from_proof(proof):
    """Re-derive the challenge and verify. Never raises on malformed input."""
    try:
        if not well_formed(proof):
            logger.debug("proof rejected: malformed")
            return False
        c = challenge_for(proof.statement, proof.commitments)
        ok = verify(proof, c)
    except (ValueError, TypeError, AttributeError, AssertionError, ZeroDivisionError) as e:
        logger.debug("proof rejected: %s", type(e).__name__)
        return False
    if not ok:
        logger.debug("proof rejected")
    return ok

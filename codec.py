"""
JSON form of statements and proofs.

Integers are decimal strings so nothing is lost in a JSON number; group
elements are hex of their fixed encodings (G1/G2 compressed, GT as 12 Fq
coefficients, Grumpkin as x || y). Decoding validates every element and
raises ProofFormatError; `verify_serialized` turns any such error into a
rejection.
"""
import binascii
import json
import logging

import bls12
import grumpkin
from errors import ProofFormatError
from syra import Commitments, Proof, Responses, Statement, verify_from_proof
from util import decimal, parse_decimal

logger = logging.getLogger(__name__)

G1, G2, GT, GRUMPKIN = "g1", "g2", "gt", "grumpkin"

_encoders = {
    G1: bls12.g1_to_bytes,
    G2: bls12.g2_to_bytes,
    GT: bls12.gt_to_bytes,
    GRUMPKIN: grumpkin.serialize,
}

_decoders = {
    G1: bls12.g1_from_bytes,
    G2: bls12.g2_from_bytes,
    GT: bls12.gt_from_bytes,
    GRUMPKIN: grumpkin.deserialize,
}

STATEMENT_FIELDS = (
    ("Z", G1), ("g1", G1), ("g2", G2), ("ivk_hat", G2), ("W", G1), ("W_hat", G2),
    ("C1", G1), ("C2", G1), ("C1hat", G2), ("C2hat", G2),
    ("T", GT),
    ("g3", GRUMPKIN), ("g4", GRUMPKIN), ("bridge", GRUMPKIN),
)

COMMITMENT_FIELDS = (
    ("K1", GT), ("K2", GT),
    ("tC1", G1), ("tC1hat", G2),
    ("tB", GT), ("tE", GT), ("tH", GT), ("tK1", GT), ("tK2", GT), ("tK2Product", GT),
    ("tBridge", GRUMPKIN),
)

# python attribute -> wire name
RESPONSE_FIELDS = (
    ("resp_alpha", "respAlpha"),
    ("resp_beta", "respBeta"),
    ("resp_s", "respS"),
    ("resp_beta_times_s", "respBetaTimesS"),
    ("resp_r1", "respR1"),
    ("resp_r2", "respR2"),
    ("resp_r3", "respR3"),
    ("resp_r", "respR"),
)


def _get(data, key):
    try:
        return data[key]
    except (KeyError, TypeError):
        raise ProofFormatError("missing field %r" % key)


def _unhex(key, value):
    if not isinstance(value, str):
        raise ProofFormatError("field %r must be a hex string" % key)
    try:
        return binascii.unhexlify(value)
    except ValueError as e:
        raise ProofFormatError("field %r is not hex: %s" % (key, e))


def _decode_element(key, kind, value):
    try:
        return _decoders[kind](_unhex(key, value))
    except ProofFormatError:
        raise
    except ValueError as e:
        raise ProofFormatError("field %r: %s" % (key, e))


def _decode_int(key, value):
    try:
        return parse_decimal(value)
    except ValueError as e:
        raise ProofFormatError("field %r: %s" % (key, e))


def _decode_bytes(data, key, length_key):
    raw = _unhex(key, _get(data, key))
    if _decode_int(length_key, _get(data, length_key)) != len(raw):
        raise ProofFormatError("%s does not match the length of %s" % (length_key, key))
    return raw


def statement_to_dict(statement):
    out = {key: _encoders[kind](getattr(statement, key)).hex() for key, kind in STATEMENT_FIELDS}
    out["ctx"] = statement.ctx.hex()
    out["ctxLen"] = decimal(len(statement.ctx))
    out["m"] = statement.m.hex()
    out["mLen"] = decimal(len(statement.m))
    return out


def statement_from_dict(data):
    fields = {key: _decode_element(key, kind, _get(data, key)) for key, kind in STATEMENT_FIELDS}
    fields["ctx"] = _decode_bytes(data, "ctx", "ctxLen")
    fields["m"] = _decode_bytes(data, "m", "mLen")
    return Statement(**fields)


def proof_to_dict(proof):
    out = {"statement": statement_to_dict(proof.statement)}
    for key, kind in COMMITMENT_FIELDS:
        out[key] = _encoders[kind](getattr(proof.commitments, key)).hex()
    for attr_name, key in RESPONSE_FIELDS:
        out[key] = decimal(getattr(proof.responses, attr_name))
    return out


def proof_from_dict(data):
    statement = statement_from_dict(_get(data, "statement"))
    commitments = Commitments(**{
        key: _decode_element(key, kind, _get(data, key)) for key, kind in COMMITMENT_FIELDS
    })
    values = {}
    for attr_name, key in RESPONSE_FIELDS:
        value = _decode_int(key, _get(data, key))
        if value >= Responses.ranges[attr_name]:
            raise ProofFormatError("field %r is out of range" % key)
        values[attr_name] = value
    return Proof(statement=statement, commitments=commitments, responses=Responses(**values))


def dumps(proof, **kwargs):
    return json.dumps(proof_to_dict(proof), **kwargs)


def loads(text):
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ProofFormatError("proof is not valid JSON: %s" % e)
    return proof_from_dict(data)


def verify_serialized(data):
    """Verify a proof in JSON or dict form coming from an untrusted party."""
    try:
        proof = loads(data) if isinstance(data, (str, bytes)) else proof_from_dict(data)
    except ProofFormatError as e:
        logger.debug("proof rejected while decoding: %s", e)
        return False
    return verify_from_proof(proof)

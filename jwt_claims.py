"""Claim extraction from an identity token and the subject-circuit inputs.

Only what the proofs need is read from the token: the header `kid`, and the
`sub`, `aud`, `iss` claims. Signature checking happens inside the circuit.
"""
import base64
import binascii
import json

from errors import TokenFormatError
from util import decimal

SUB_KEY = '"sub":'
REQUIRED_CLAIMS = ("sub", "aud", "iss")


def b64url_decode(segment):
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, ValueError) as e:
        raise TokenFormatError("bad base64url segment: %s" % e)


def _json_object(name, raw):
    try:
        value = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise TokenFormatError("token %s is not JSON: %s" % (name, e))
    if not isinstance(value, dict):
        raise TokenFormatError("token %s is not a JSON object" % name)
    return value


def decode_jwt(raw_jwt):
    """Split and decode a compact JWT. Returns (header, payload, payload_text)."""
    parts = raw_jwt.split(".")
    if len(parts) != 3:
        raise TokenFormatError("expected 3 dot-separated parts, got %d" % len(parts))
    header_b64, payload_b64, _ = parts
    if not header_b64:
        raise TokenFormatError("JWT header segment is empty")

    header = _json_object("header", b64url_decode(header_b64))
    if not header.get("kid"):
        raise TokenFormatError("no 'kid' in JWT header")

    payload_raw = b64url_decode(payload_b64)
    payload = _json_object("payload", payload_raw)
    return header, payload, payload_raw.decode("utf-8")


def required_claims(payload):
    claims = {}
    for name in REQUIRED_CLAIMS:
        value = payload.get(name)
        if not isinstance(value, str):
            raise TokenFormatError("claim %r is missing or not a string" % name)
        claims[name] = value
    return claims


def subject_circuit_inputs(raw_jwt, verifier_inputs):
    """Witness mapping for the subject circuit.

    `verifier_inputs` come from the circuit's own JWT input generator
    (padded message, signature, modulus limbs). We add where the `sub` key
    sits in the decoded payload and the claimed value.
    """
    _, payload, payload_text = decode_jwt(raw_jwt)
    index = payload_text.find(SUB_KEY)
    if index < 0:
        raise TokenFormatError("could not find %s in payload" % SUB_KEY)

    inputs = dict(verifier_inputs)
    inputs["subKeyStartIndex"] = decimal(index)
    inputs["subStatement"] = required_claims(payload)["sub"]
    return inputs


def rsa_public_key(jwk):
    """{n, e} for the circuit input generator, from a JWKS entry."""
    if jwk.get("kty", "RSA") != "RSA" or "n" not in jwk or "e" not in jwk:
        raise TokenFormatError("JWK is not an RSA public key")
    e = int.from_bytes(b64url_decode(jwk["e"]), "big")
    return {"n": jwk["n"], "e": e}


def find_jwk(jwks, kid):
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    raise TokenFormatError("no JWK found for kid=%s" % kid)

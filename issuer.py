"""Credential issuance.

`request_user_keys` talks to the issuer's admin endpoint. The rest is a
reference issuer, used by the demo and the tests, that produces key material
of the same shape:

    ivk_hat = g2^x,  W = g1^w,  W_hat = g2^w
    usk = g1^(1/(x+s)),  usk_hat = g2^(1/(x+s))
"""
import base64
import json
import logging
import os

import attr
import requests

import bls12
from errors import IssuanceError, KeyMaterialError
from syra_input import IssuerKey, UserKey
from util import random_scalar

logger = logging.getLogger(__name__)

ISSUER_URL = os.environ.get("SYRA_ISSUER_URL", "http://127.0.0.1:9000/admin/generate_user_key")
TIMEOUT = 30


def request_user_keys(user_id, kid, sub_proof, url=None, timeout=TIMEOUT):
    """Exchange a subject proof for credential key material.

    Returns the hex strings {ivk, usk, usk_hat}.
    """
    proof_b64 = base64.b64encode(json.dumps(sub_proof).encode("utf-8")).decode("ascii")
    try:
        response = requests.post(url or ISSUER_URL, json={
            "user_id": user_id,
            "kid": kid,
            "proof": proof_b64,
        }, timeout=timeout)
    except requests.RequestException as e:
        raise IssuanceError("generate_user_key request failed: %s" % e)

    if not response.ok:
        raise IssuanceError("generate_user_key failed (%d): %s" % (response.status_code, response.text),
                            status=response.status_code)
    try:
        body = response.json()
    except ValueError:
        raise IssuanceError("generate_user_key returned a non-JSON body")
    for key in ("ivk", "usk", "usk_hat"):
        if not isinstance(body.get(key), str):
            raise IssuanceError("generate_user_key response is missing %r" % key)
    return {"ivk": body["ivk"], "usk": body["usk"], "usk_hat": body["usk_hat"]}


@attr.s(frozen=True, repr=False)
class IssuerSecret(object):
    x = attr.ib()
    w = attr.ib()

    def __repr__(self):
        return "IssuerSecret(<hidden>)"


def keygen():
    x = random_scalar(bls12.r)
    w = random_scalar(bls12.r)
    key = IssuerKey(
        g1=bls12.G1,
        g2=bls12.G2,
        ivk_hat=bls12.g2_mul(bls12.G2, x),
        W=bls12.g1_mul(bls12.G1, w),
        W_hat=bls12.g2_mul(bls12.G2, w),
    )
    return IssuerSecret(x=x, w=w), key


def issue_user_key(secret, s):
    """Weak-BB style credential on subject scalar s."""
    e = (secret.x + s) % bls12.r
    if e == 0:
        raise KeyMaterialError("subject scalar collides with the issuer secret")
    k = pow(e, -1, bls12.r)
    logger.debug("issuing user key")
    return UserKey(usk=bls12.g1_mul(bls12.G1, k), usk_hat=bls12.g2_mul(bls12.G2, k))

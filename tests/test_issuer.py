import sys, os
sys.path.append(os.path.realpath(os.path.dirname(__file__)+"/.."))

import base64
import json

import attr
import pytest
import requests

import bls12
import issuer
from errors import IssuanceError, KeyMaterialError


class FakeResponse(object):
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


KEYS = {"ivk": "aa", "usk": "bb", "usk_hat": "cc"}


def test_request_user_keys(monkeypatch):
    seen = {}

    def post(url, json=None, timeout=None):
        seen.update(url=url, body=json, timeout=timeout)
        return FakeResponse(200, dict(KEYS, extra="ignored"))

    monkeypatch.setattr(issuer.requests, "post", post)
    out = issuer.request_user_keys("user-1", "kid-1", {"pi_a": ["1"]}, url="http://issuer/keys", timeout=5)
    assert out == KEYS
    assert seen["url"] == "http://issuer/keys"
    assert seen["timeout"] == 5
    assert seen["body"]["user_id"] == "user-1"
    assert seen["body"]["kid"] == "kid-1"
    assert json.loads(base64.b64decode(seen["body"]["proof"])) == {"pi_a": ["1"]}


def test_request_user_keys_http_error(monkeypatch):
    monkeypatch.setattr(issuer.requests, "post",
                        lambda url, json=None, timeout=None: FakeResponse(403, text="bad proof"))
    with pytest.raises(IssuanceError) as info:
        issuer.request_user_keys("u", "k", {})
    assert info.value.status == 403
    assert "bad proof" in str(info.value)


def test_request_user_keys_bad_body(monkeypatch):
    monkeypatch.setattr(issuer.requests, "post",
                        lambda url, json=None, timeout=None: FakeResponse(200))
    with pytest.raises(IssuanceError):
        issuer.request_user_keys("u", "k", {})

    monkeypatch.setattr(issuer.requests, "post",
                        lambda url, json=None, timeout=None: FakeResponse(200, {"ivk": "aa"}))
    with pytest.raises(IssuanceError):
        issuer.request_user_keys("u", "k", {})


def test_request_user_keys_connection_error(monkeypatch):
    def post(url, json=None, timeout=None):
        raise requests.ConnectionError("refused")
    monkeypatch.setattr(issuer.requests, "post", post)
    with pytest.raises(IssuanceError) as info:
        issuer.request_user_keys("u", "k", {})
    assert info.value.status is None


def test_keygen_shape(issuer_keys):
    secret, key = issuer_keys
    assert "hidden" in repr(secret)
    assert bls12.eq(key.g1, bls12.G1) and bls12.eq(key.g2, bls12.G2)
    assert bls12.eq(key.ivk_hat, bls12.g2_mul(bls12.G2, secret.x))
    assert bls12.eq(key.W, bls12.g1_mul(bls12.G1, secret.w))


def test_user_key_is_weak_bb_signature(issuer_keys, user_key, fixed_bridge):
    _, key = issuer_keys
    # e(usk, ivk_hat * g2^s) == e(g1, g2)
    lhs = bls12.pair(user_key.usk, bls12.add(key.ivk_hat, bls12.g2_mul(key.g2, fixed_bridge.s)))
    assert lhs == bls12.pair(key.g1, key.g2)


def test_issue_rejects_colliding_subject(issuer_keys):
    secret, _ = issuer_keys
    clash = attr.evolve(secret, x=bls12.r - 7)
    with pytest.raises(KeyMaterialError):
        issuer.issue_user_key(clash, 7)

import sys, os
sys.path.append(os.path.realpath(os.path.dirname(__file__)+"/.."))

import pytest

import bls12
from vectors import CLAIMS, FIXED_S, FIXED_R
from errors import InputError, KeyMaterialError, MissingKeyMaterial, WitnessMismatch
from syra_input import IVK_BYTES, IssuerKey, UserKey, context_bytes, generate_signals, hash_context


def g1b(P):
    return bls12.g1_to_bytes(P)


def g2b(Q):
    return bls12.g2_to_bytes(Q)


def test_ivk_hex_layout(issuer_keys):
    _, ivk = issuer_keys
    text = ivk.to_hex()
    assert len(text) == 2 * IVK_BYTES == 768
    # fixed cuts: 96 / 192 / 192 / 96 / 192 hex characters
    assert text[:96] == g1b(ivk.g1).hex()
    assert text[96:288] == g2b(ivk.g2).hex()
    assert text[288:480] == g2b(ivk.ivk_hat).hex()
    assert text[480:576] == g1b(ivk.W).hex()
    assert text[576:] == g2b(ivk.W_hat).hex()


def test_ivk_round_trip(issuer_keys):
    _, ivk = issuer_keys
    decoded = IssuerKey.from_hex(ivk.to_hex())
    assert decoded.to_hex() == ivk.to_hex()


def test_user_key_round_trip(user_key):
    usk_hex, usk_hat_hex = user_key.to_hex()
    assert len(usk_hex) == 96 and len(usk_hat_hex) == 192
    decoded = UserKey.from_hex(usk_hex, usk_hat_hex)
    assert decoded.to_hex() == (usk_hex, usk_hat_hex)


def test_missing_material(issuer_keys, user_key, fixed_bridge):
    _, ivk = issuer_keys
    usk_hex, usk_hat_hex = user_key.to_hex()
    with pytest.raises(MissingKeyMaterial):
        IssuerKey.from_hex("")
    with pytest.raises(MissingKeyMaterial):
        generate_signals(ivk.to_hex(), None, usk_hat_hex, CLAIMS, "m", fixed_bridge)
    with pytest.raises(MissingKeyMaterial):
        generate_signals(None, usk_hex, usk_hat_hex, CLAIMS, "m", fixed_bridge)


def test_malformed_material(issuer_keys, user_key):
    _, ivk = issuer_keys
    usk_hex, usk_hat_hex = user_key.to_hex()
    with pytest.raises(KeyMaterialError):
        IssuerKey.from_hex("zz" * IVK_BYTES)
    with pytest.raises(KeyMaterialError):
        IssuerKey.from_hex(ivk.to_hex()[:-2])
    with pytest.raises(KeyMaterialError):
        UserKey.from_hex(usk_hex + "00", usk_hat_hex)
    # x coordinate above the field modulus
    with pytest.raises(KeyMaterialError):
        UserKey.from_hex("9f" + "ff" * 47, usk_hat_hex)
    # the identity is not a usable key
    with pytest.raises(KeyMaterialError):
        UserKey.from_hex(g1b(bls12.Z1).hex(), usk_hat_hex)


def test_key_errors_are_input_errors():
    assert issubclass(KeyMaterialError, InputError)
    assert issubclass(MissingKeyMaterial, ValueError)


def test_context():
    assert context_bytes({"aud": "a", "iss": "b"}) == b"ab"
    with pytest.raises(InputError):
        context_bytes({"aud": "a"})
    Z1 = hash_context(b"ab")
    Z2 = hash_context(b"ab")
    assert g1b(Z1) == g1b(Z2)
    assert g1b(Z1) != g1b(hash_context(b"ba"))


def test_signals(signals, issuer_keys, user_key):
    _, ivk = issuer_keys
    st, w = signals.statement, signals.witness
    assert w.s == FIXED_S
    assert w.r == FIXED_R
    assert st.ctx == (CLAIMS["aud"] + CLAIMS["iss"]).encode()
    assert st.m == b"hello"
    assert g1b(st.Z) == g1b(hash_context(st.ctx))
    assert g1b(st.C1) == g1b(bls12.g1_mul(ivk.g1, w.beta))
    assert g1b(st.C2) == g1b(bls12.add(bls12.g1_mul(ivk.W, w.beta), user_key.usk))
    assert g2b(st.C1hat) == g2b(bls12.g2_mul(ivk.g2, w.alpha))
    assert g2b(st.C2hat) == g2b(bls12.add(bls12.g2_mul(ivk.W_hat, w.alpha), user_key.usk_hat))
    assert 0 < w.alpha < bls12.r and 0 < w.beta < bls12.r
    assert "hidden" in repr(w)


def test_subject_must_match_bridge(issuer_keys, user_key, fixed_bridge):
    _, ivk = issuer_keys
    usk_hex, usk_hat_hex = user_key.to_hex()
    claims = dict(CLAIMS, sub="10")
    with pytest.raises(WitnessMismatch):
        generate_signals(ivk.to_hex(), usk_hex, usk_hat_hex, claims, "m", fixed_bridge)


def test_missing_audience(issuer_keys, user_key, fixed_bridge):
    _, ivk = issuer_keys
    usk_hex, usk_hat_hex = user_key.to_hex()
    claims = {"sub": CLAIMS["sub"], "iss": CLAIMS["iss"]}
    with pytest.raises(InputError):
        generate_signals(ivk.to_hex(), usk_hex, usk_hat_hex, claims, "m", fixed_bridge)

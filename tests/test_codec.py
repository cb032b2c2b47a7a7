import sys, os
sys.path.append(os.path.realpath(os.path.dirname(__file__)+"/.."))

import json

import pytest

import codec
from errors import ProofFormatError


@pytest.fixture(scope="module")
def encoded(proof):
    return codec.proof_to_dict(proof)


def flip_last_bit(hex_string):
    data = bytearray(bytes.fromhex(hex_string))
    data[-1] ^= 1
    return data.hex()


def test_integers_are_decimal_strings(encoded, proof):
    assert encoded["respAlpha"] == str(proof.responses.resp_alpha)
    assert encoded["respS"] == str(proof.responses.resp_s)
    for key, _ in codec.RESPONSE_FIELDS:
        assert isinstance(encoded[key], str) and encoded[key].isdigit()
    assert encoded["statement"]["mLen"] == "5"
    assert bytes.fromhex(encoded["statement"]["m"]) == b"hello"


def test_element_widths(encoded):
    st = encoded["statement"]
    assert len(st["Z"]) == 96
    assert len(st["C1hat"]) == 192
    assert len(st["T"]) == 1152
    assert len(st["bridge"]) == 128
    assert len(encoded["tBridge"]) == 128


def test_round_trip(encoded):
    decoded = codec.proof_from_dict(encoded)
    assert codec.proof_to_dict(decoded) == encoded


def test_json_round_trip_verifies(proof):
    text = codec.dumps(proof)
    assert codec.verify_serialized(text)
    assert json.loads(text)["statement"]["ctxLen"] == str(len(proof.statement.ctx))


def test_bridge_bit_flip_rejected(encoded):
    tampered = json.loads(json.dumps(encoded))
    tampered["statement"]["bridge"] = flip_last_bit(tampered["statement"]["bridge"])
    assert not codec.verify_serialized(tampered)
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(tampered)


def test_decoding_errors(encoded):
    missing = dict(encoded)
    del missing["respR"]
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(missing)

    bad_hex = dict(encoded, tC1="zz")
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(bad_hex)

    negative = dict(encoded, respBeta="-3")
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(negative)

    too_big = dict(encoded, respAlpha=str(2 ** 300))
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(too_big)

    statement = dict(encoded["statement"], mLen="6")
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(dict(encoded, statement=statement))

    not_in_gt = dict(encoded, K1="00" * 576)
    with pytest.raises(ProofFormatError):
        codec.proof_from_dict(not_in_gt)


def test_untrusted_garbage_is_rejected():
    assert not codec.verify_serialized("not json")
    assert not codec.verify_serialized("[]")
    assert not codec.verify_serialized({})
    assert not codec.verify_serialized({"statement": 5})

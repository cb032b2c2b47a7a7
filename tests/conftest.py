import sys, os
sys.path.append(os.path.realpath(os.path.dirname(__file__)+"/.."))

import pytest

import issuer
from bridge import BridgeCommitment
from syra import prove_from_signals
from syra_input import assemble

from vectors import CLAIMS, FIXED_R, FIXED_S


@pytest.fixture(scope="session")
def issuer_keys():
    return issuer.keygen()


@pytest.fixture(scope="session")
def fixed_bridge():
    return BridgeCommitment.create(FIXED_S, FIXED_R)


@pytest.fixture(scope="session")
def user_key(issuer_keys, fixed_bridge):
    secret, _ = issuer_keys
    return issuer.issue_user_key(secret, fixed_bridge.s)


@pytest.fixture(scope="session")
def signals(issuer_keys, user_key, fixed_bridge):
    _, ivk = issuer_keys
    return assemble(ivk, user_key, CLAIMS, "hello", fixed_bridge)


@pytest.fixture(scope="session")
def proof(signals):
    return prove_from_signals(signals)

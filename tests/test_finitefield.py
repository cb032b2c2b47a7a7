import sys, os
sys.path.append(os.path.realpath(os.path.dirname(__file__)+"/.."))

import pytest

from finitefield.euclidean import extendedEuclideanAlgorithm, gcd
from finitefield.modp import IntegersModP
from grumpkin import Fq, P


def test_extended_euclid():
    for a, b in [(240, 46), (17, 5), (5, 17), (12345, P)]:
        x, y, d = extendedEuclideanAlgorithm(a, b)
        assert x * a + y * b == d
        assert d == gcd(a, b)


def test_arithmetic_reduces_into_range():
    assert Fq(P + 5) == Fq(5)
    assert int(Fq(3) - Fq(5)) == P - 2
    assert int(-Fq(1)) == P - 1
    assert 0 <= int(Fq(P - 1) * Fq(P - 1)) < P


def test_inverse():
    for n in [1, 2, 17, P - 1, 123456789]:
        assert Fq(n) * Fq(n).inverse() == 1
        assert Fq(1) / Fq(n) == Fq(n).inverse()


def test_inverse_of_zero():
    with pytest.raises(ZeroDivisionError):
        Fq(0).inverse()


def test_small_field():
    mod7 = IntegersModP(7)
    assert mod7(3) + mod7(6) == mod7(2)
    assert mod7(3) ** 6 == 1
    assert mod7(3) ** -1 == mod7(5)
    assert IntegersModP(7) is mod7


def test_bytes():
    assert Fq(1).to_bytes() == bytes(31) + b"\x01"
    assert Fq.from_bytes(Fq(99).to_bytes()) == Fq(99)
    with pytest.raises(ValueError):
        Fq.from_bytes(P.to_bytes(32, "big"))
    with pytest.raises(ValueError):
        Fq.from_bytes(b"\x01")


def test_rejects_non_integers():
    with pytest.raises(TypeError):
        Fq(1.5)
    with pytest.raises(TypeError):
        Fq(1) + "a"

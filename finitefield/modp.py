from .euclidean import extendedEuclideanAlgorithm
from .numbertype import FieldElement, memoize, typecheck

# so all IntegersModP are instances of the same base class
class _Modular(FieldElement):
    pass


@memoize
def IntegersModP(p):
    # assume p is prime

    class IntegerModP(_Modular):
        __slots__ = ('n',)

        def __init__(self, n):
            if isinstance(n, IntegerModP):
                n = n.n
            if not isinstance(n, int) or isinstance(n, bool):
                raise TypeError(
                    "Can't cast type %s to %s in __init__"
                    % (type(n).__name__, type(self).__name__)
                )
            self.n = n % IntegerModP.p

        @property
        def field(self):
            return IntegerModP

        @typecheck
        def __add__(self, other):
            return IntegerModP(self.n + other.n)

        @typecheck
        def __sub__(self, other):
            return IntegerModP(self.n - other.n)

        @typecheck
        def __mul__(self, other):
            return IntegerModP(self.n * other.n)

        def __neg__(self):
            return IntegerModP(-self.n)

        def __eq__(self, other):
            if isinstance(other, int):
                return self.n == other % IntegerModP.p
            return isinstance(other, IntegerModP) and self.n == other.n

        def __ne__(self, other):
            return not self == other

        def inverse(self):
            # need to use the division algorithm *as integers* because we're
            # doing it on the modulus itself (which would otherwise be zero)
            x, y, d = extendedEuclideanAlgorithm(self.n, self.p)

            if d != 1:
                raise ZeroDivisionError("%r has no inverse in %s" % (self, IntegerModP.__name__))

            return IntegerModP(x)

        def __str__(self):
            return str(self.n)

        def __repr__(self):
            return "%d (mod %d)" % (self.n, self.p)

        def __int__(self):
            return self.n

        def __index__(self):
            return self.n

        def __hash__(self):
            return hash((self.n, self.p))

        def to_bytes(self):
            """Fixed-width big-endian encoding, wide enough for any residue."""
            return self.n.to_bytes(IntegerModP.byte_length, 'big')

        @classmethod
        def from_bytes(cls, data):
            """Inverse of `to_bytes`. Rejects residues that are not canonical."""
            if len(data) != cls.byte_length:
                raise ValueError("expected %d bytes, got %d" % (cls.byte_length, len(data)))
            n = int.from_bytes(data, 'big')
            if n >= cls.p:
                raise ValueError("%d is not a canonical element of %s" % (n, cls.__name__))
            return cls(n)

    IntegerModP.p = p
    IntegerModP.byte_length = (p.bit_length() + 7) // 8
    IntegerModP.__name__ = 'Z/%d' % (p)
    return IntegerModP


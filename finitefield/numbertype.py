# Shared machinery for the number types in this package: a memoizing class
# factory decorator, operand coercion, and the reflected operators every
# field element gets for free.


def memoize(f):
   cache = {}

   def memoizedFunction(*args, **kwargs):
      argTuple = args + tuple(sorted(kwargs.items()))
      if argTuple not in cache:
         cache[argTuple] = f(*args, **kwargs)
      return cache[argTuple]

   memoizedFunction.cache = cache
   return memoizedFunction


def typecheck(f):
   """Cast the right-hand operand to the type of `self` before calling `f`.

   Plain ints are promoted, so `Fq(3) + 1` works. Operands of a type that
   binds tighter (higher operatorPrecedence) get NotImplemented so Python
   tries their reflected method instead.
   """
   def newF(self, other):
      if (hasattr(other.__class__, 'operatorPrecedence') and
            other.__class__.operatorPrecedence > self.__class__.operatorPrecedence):
         return NotImplemented

      if type(self) is not type(other):
         try:
            other = self.__class__(other)
         except TypeError:
            message = 'Not able to typecast %s of type %s to type %s in function %s'
            raise TypeError(message % (other, type(other).__name__, type(self).__name__, f.__name__))

      return f(self, other)

   newF.__name__ = f.__name__
   return newF


class DomainElement(object):
   operatorPrecedence = 1

   def __radd__(self, other): return self + other
   def __rsub__(self, other): return -self + other
   def __rmul__(self, other): return self * other

   def __pow__(self, n):
      if not isinstance(n, int):
         raise TypeError("Can't raise %s to a non-integer power" % type(self).__name__)
      if n < 0:
         return self.inverse() ** -n

      Q = self
      R = self if n & 1 else self.__class__(1)

      i = 2
      while i <= n:
         Q = Q * Q

         if n & i == i:
            R = Q * R

         i = i << 1

      return R


class FieldElement(DomainElement):

   def __truediv__(self, other):
      return self * other.inverse()

   def __rtruediv__(self, other):
      return self.inverse() * other

class EllipticCurve(object):
   def __init__(self, a, b):
      # assume we're already in the Weierstrass form
      self.a = a
      self.b = b

      self.discriminant = -16 * (4 * a*a*a + 27 * b * b)
      if not self.isSmooth():
         raise ValueError("The curve %s is not smooth!" % self)


   def isSmooth(self):
      return self.discriminant != 0


   def testPoint(self, x, y):
      return y*y == x*x*x + self.a * x + self.b


   def __str__(self):
      return 'y^2 = x^3 + %sx + %s' % (self.a, self.b)


   def __repr__(self):
      return str(self)


   def __eq__(self, other):
      return isinstance(other, EllipticCurve) and (self.a, self.b) == (other.a, other.b)


   def __hash__(self):
      return hash((self.a, self.b))



class Point(object):
   """An affine point. Points are values: nothing mutates them after __init__."""

   infinity = False

   def __init__(self, curve, x, y):
      self.curve = curve # the curve containing this point
      self.x = x
      self.y = y

      if not curve.testPoint(x,y):
         raise ValueError("The point %s is not on the given curve %s!" % (self, curve))


   def __str__(self):
      return "(%r, %r)" % (self.x, self.y)


   def __repr__(self):
      return str(self)


   def __neg__(self):
      return Point(self.curve, self.x, -self.y)


   def __add__(self, Q):
      if self.curve != Q.curve:
         raise ValueError("Can't add points on different curves!")
      if isinstance(Q, Ideal):
         return self

      x_1, y_1, x_2, y_2 = self.x, self.y, Q.x, Q.y

      if (x_1, y_1) == (x_2, y_2):
         if y_1 == 0:
            return Ideal(self.curve)

         # slope of the tangent line
         m = (3 * x_1 * x_1 + self.curve.a) / (2 * y_1)
      else:
         # P + (-P)
         if x_1 == x_2:
            return Ideal(self.curve)

         # slope of the secant line
         m = (y_2 - y_1) / (x_2 - x_1)

      x_3 = m*m - x_2 - x_1
      y_3 = m*(x_3 - x_1) + y_1

      return Point(self.curve, x_3, -y_3)


   def __mul__(self, n):
      if not isinstance(n, int):
         raise TypeError("Can't scale a point by something which isn't an int!")
      if n < 0:
         return -self * -n
      if n == 0:
         return Ideal(self.curve)

      # double-and-add, scanning the bits of n from the low end
      Q = self
      R = self if n & 1 == 1 else Ideal(self.curve)

      i = 2
      while i <= n:
         Q = Q + Q

         if n & i == i:
            R = Q + R

         i = i << 1

      return R


   def __rmul__(self, n):
      return self * n


   def __eq__(self, other):
      if not isinstance(other, Point) or isinstance(other, Ideal):
         return False

      return self.curve == other.curve and (self.x, self.y) == (other.x, other.y)


   def __ne__(self, other):
      return not self == other


   def __hash__(self):
      return hash((self.x, self.y))


class Ideal(Point):
   infinity = True

   def __init__(self, curve):
      self.curve = curve

   def __neg__(self):
      return self

   def __str__(self):
      return "Ideal"

   def __add__(self, Q):
      if self.curve != Q.curve:
         raise ValueError("Can't add points on different curves!")
      return Q

   def __mul__(self, n):
      if not isinstance(n, int):
         raise TypeError("Can't scale a point by something which isn't an int!")
      return self

   def __eq__(self, other):
      return isinstance(other, Ideal)

   def __hash__(self):
      return hash("Ideal")
import secrets


def random_scalar(order):
    """Uniform nonzero scalar from a CSPRNG, in [1, order)."""
    return secrets.randbelow(order - 1) + 1


def decimal(n):
    # integers cross process and JSON boundaries as decimal strings
    return str(int(n))


def parse_decimal(value):
    if not isinstance(value, str) or not value.isdigit():
        raise ValueError("expected a non-negative decimal string, got %r" % (value,))
    return int(value)

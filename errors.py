"""Exceptions raised by the escape-time evaluators and grid builder
"""


class MandelbrotError(Exception):
    pass


class InvalidArgument(MandelbrotError, ValueError):
    """An iteration bound, sample point or coordinate axis was rejected."""
    pass


class NumericOverflow(MandelbrotError, ArithmeticError):
    """The orbit magnitude left the representable range without escaping."""
    pass

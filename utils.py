import math
import numbers
import numpy
import torch
from config import LOG_LEVEL
from errors import InvalidArgument

def log_message(level, msg):
    """Simple logging function that respects config.LOG_LEVEL."""
    levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if levels.index(level) >= levels.index(LOG_LEVEL):
        print(f"[{level}] {msg}")

def check_iterate_max(iterate_max):
    """
    Validate an iteration bound and return it as a plain int.
    Raises InvalidArgument unless it is an integer >= 1.
    """
    if isinstance(iterate_max, bool) or not isinstance(iterate_max, numbers.Integral):
        raise InvalidArgument(f"iterate_max must be an integer, got {iterate_max!r}")
    if iterate_max < 1:
        raise InvalidArgument(f"iterate_max must be at least 1, got {iterate_max}")
    return int(iterate_max)

def check_sample(c):
    """
    Split a complex sample into finite (real, imag) floats.
    Accepts a complex or real number, or a (real, imag) pair.
    """
    try:
        if isinstance(c, tuple):
            c_real, c_imag = c
            if isinstance(c_real, bool) or isinstance(c_imag, bool):
                raise TypeError("bool is not a coordinate")
            c_real, c_imag = float(c_real), float(c_imag)
        else:
            c_real, c_imag = float(c.real), float(c.imag)
    except (AttributeError, TypeError, ValueError, OverflowError) as e:
        raise InvalidArgument(f"Expected a complex sample, got {c!r}") from e
    if not (math.isfinite(c_real) and math.isfinite(c_imag)):
        raise InvalidArgument(f"Sample must be finite, got {c!r}")
    return c_real, c_imag

def _is_bool_axis(values):
    if isinstance(values, torch.Tensor):
        return values.dtype == torch.bool
    if isinstance(values, numpy.ndarray):
        return values.dtype == numpy.bool_
    if isinstance(values, (list, tuple)):
        return any(isinstance(v, (bool, numpy.bool_)) for v in values)
    return False

def as_axis(values, name="axis"):
    """
    Convert a 1-D sequence of reals into a float64 tensor.
    Args:
        values: list, tuple, numpy array or tensor of coordinates
        name: label used in error messages
    Returns:
        contiguous tensor of shape (N,), possibly N == 0
    """
    if _is_bool_axis(values):
        raise InvalidArgument(f"{name} must hold real numbers, not booleans")
    try:
        axis = torch.as_tensor(values, dtype=torch.float64)
    except (TypeError, ValueError, RuntimeError, OverflowError) as e:
        raise InvalidArgument(f"{name} must be a sequence of real numbers") from e

    if axis.dim() != 1:
        raise InvalidArgument(f"{name} must be one-dimensional, got shape {tuple(axis.shape)}")
    if not torch.all(torch.isfinite(axis)):
        raise InvalidArgument(f"{name} contains non-finite coordinates")
    return axis.contiguous()

def make_axis(lo, hi, steps):
    """Evenly spaced float64 coordinates from lo to hi inclusive."""
    if steps < 0:
        raise InvalidArgument(f"steps must be non-negative, got {steps}")
    return torch.linspace(lo, hi, steps=steps, dtype=torch.float64)

def balance(N, P, p):
    """
    Compute p'th interval when N is distributed over P bins.
    The first N % P bins receive one extra element.
    """
    L = N // P
    K = N - P * L
    if p < K:
        lo = p * L + p
        hi = lo + L + 1
    else:
        lo = p * L + K
        hi = lo + L
    return lo, hi

"""
Escape-time evaluation of the map f_c(z) = z*z + c, starting from z = 0.

For a sample c and a bound iterate_max every evaluator returns the first
iteration i in [1, iterate_max] at which |z_i|**2 > 4.0, or iterate_max
when the orbit stays inside the disk. The strategies below are
interchangeable and produce identical counts; they differ only in how the
orbit is represented while iterating.
"""
import torch
from errors import InvalidArgument, NumericOverflow
from utils import check_iterate_max, check_sample

# Beyond |z| = 2 the orbit is guaranteed to diverge.
ESCAPE_RADIUS_SQUARED = 4.0


def _overflow(c):
    return NumericOverflow(f"Orbit magnitude is not representable for c={c!r}")


class EscapeEvaluator:
    """
    Base class for escape-count strategies.

    Subclasses implement escape_count() on already validated arguments and
    may override count_grid() when they can evaluate a whole grid at once.
    """
    name = None

    def evaluate(self, c, iterate_max):
        """
        Number of iterations before the orbit of c escapes, capped at
        iterate_max. Raises InvalidArgument for a bound below 1 or a
        non-finite sample.
        """
        c_real, c_imag = check_sample(c)
        iterate_max = check_iterate_max(iterate_max)
        return self.escape_count(c_real, c_imag, iterate_max)

    def escape_count(self, c_real, c_imag, iterate_max):
        raise NotImplementedError

    def count_grid(self, xs, ys, iterate_max):
        """
        Escape counts for every pair (xs[i], ys[j]).
        Args:
            xs, ys: validated float64 tensors of shape (N,) and (M,)
            iterate_max: validated iteration bound
        Returns:
            int64 tensor of shape (N, M)
        """
        ys_list = ys.tolist()
        rows = [[self.escape_count(x, y, iterate_max) for y in ys_list]
                for x in xs.tolist()]
        return torch.tensor(rows, dtype=torch.int64).reshape(len(xs), len(ys))

    def __repr__(self):
        return f"{type(self).__name__}()"


class ReferenceEvaluator(EscapeEvaluator):
    """Straightforward orbit kept as a native complex number."""
    name = "reference"

    def escape_count(self, c_real, c_imag, iterate_max):
        c = complex(c_real, c_imag)
        z = 0j
        for i in range(1, iterate_max + 1):
            z = z * z + c
            magnitude = z.real * z.real + z.imag * z.imag
            # Written as a negated <= so that NaN lands in this branch
            if not magnitude <= ESCAPE_RADIUS_SQUARED:
                if magnitude != magnitude:
                    raise _overflow(c)
                return i
        return iterate_max


class OptimizedEvaluator(EscapeEvaluator):
    """
    Orbit held as a pair of floats for the whole loop. The squares computed
    for the escape test are reused by the next update.
    """
    name = "optimized"

    def escape_count(self, c_real, c_imag, iterate_max):
        z_real = z_imag = 0.0
        z_real_sq = z_imag_sq = 0.0
        for i in range(1, iterate_max + 1):
            z_imag = 2.0 * (z_real * z_imag) + c_imag
            z_real = z_real_sq - z_imag_sq + c_real
            z_real_sq = z_real * z_real
            z_imag_sq = z_imag * z_imag
            magnitude = z_real_sq + z_imag_sq
            if not magnitude <= ESCAPE_RADIUS_SQUARED:
                if magnitude != magnitude:
                    raise _overflow(complex(c_real, c_imag))
                return i
        return iterate_max


class TensorEvaluator(EscapeEvaluator):
    """
    Whole-grid evaluation with float64 tensors. Each iteration advances
    only the cells that have not escaped yet.
    """
    name = "tensor"

    def escape_count(self, c_real, c_imag, iterate_max):
        xs = torch.tensor([c_real], dtype=torch.float64)
        ys = torch.tensor([c_imag], dtype=torch.float64)
        return int(self.count_grid(xs, ys, iterate_max)[0, 0])

    def count_grid(self, xs, ys, iterate_max):
        n, m = len(xs), len(ys)
        c_real = xs.unsqueeze(1).expand(n, m).reshape(-1)
        c_imag = ys.unsqueeze(0).expand(n, m).reshape(-1)

        counts = torch.full((n * m,), iterate_max, dtype=torch.int64)
        active = torch.arange(n * m)
        z_real = torch.zeros(n * m, dtype=torch.float64)
        z_imag = torch.zeros_like(z_real)
        z_real_sq = torch.zeros_like(z_real)
        z_imag_sq = torch.zeros_like(z_real)

        for i in range(1, iterate_max + 1):
            if active.numel() == 0:
                break
            z_imag = 2.0 * (z_real * z_imag) + c_imag
            z_real = z_real_sq - z_imag_sq + c_real
            z_real_sq = z_real * z_real
            z_imag_sq = z_imag * z_imag
            magnitude = z_real_sq + z_imag_sq

            escaped = ~(magnitude <= ESCAPE_RADIUS_SQUARED)
            if not escaped.any():
                continue
            if torch.isnan(magnitude[escaped]).any():
                k = int(torch.nonzero(torch.isnan(magnitude))[0, 0])
                raise _overflow(complex(float(c_real[k]), float(c_imag[k])))

            counts[active[escaped]] = i
            bounded = ~escaped
            active = active[bounded]
            c_real, c_imag = c_real[bounded], c_imag[bounded]
            z_real, z_imag = z_real[bounded], z_imag[bounded]
            z_real_sq, z_imag_sq = z_real_sq[bounded], z_imag_sq[bounded]

        return counts.reshape(n, m)


EVALUATORS = {
    cls.name: cls
    for cls in (ReferenceEvaluator, OptimizedEvaluator, TensorEvaluator)
}


def get_evaluator(name):
    """Instantiate a registered evaluator by name."""
    try:
        return EVALUATORS[name]()
    except KeyError:
        raise InvalidArgument(
            f"Unknown evaluator {name!r}, expected one of {sorted(EVALUATORS)}") from None

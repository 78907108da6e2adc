"""
Grid driver: evaluates the escape count of every sample on a Cartesian grid
of complex points and normalises it by the iteration bound.

Element (i, j) of every grid returned here corresponds to the sample
xs[i] + 1j * ys[j], so a row holds a fixed real coordinate.
"""
import numbers
from concurrent.futures import ProcessPoolExecutor
import torch
from config import EVALUATOR, WORKERS
from errors import InvalidArgument
from escape_evaluator import EscapeEvaluator, get_evaluator
from utils import as_axis, balance, check_iterate_max, log_message, make_axis


def _resolve_evaluator(evaluator):
    if evaluator is None:
        return get_evaluator(EVALUATOR)
    if isinstance(evaluator, str):
        return get_evaluator(evaluator)
    if isinstance(evaluator, EscapeEvaluator):
        return evaluator
    raise InvalidArgument(f"Expected an EscapeEvaluator or a name, got {evaluator!r}")


def _resolve_workers(workers):
    if workers is None:
        return WORKERS
    if isinstance(workers, bool) or not isinstance(workers, numbers.Integral) or workers < 1:
        raise InvalidArgument(f"workers must be a positive integer, got {workers!r}")
    return int(workers)


def _count_block(evaluator, xs_values, ys_values, iterate_max):
    # Runs in a worker process; plain lists cross the process boundary.
    xs = torch.tensor(xs_values, dtype=torch.float64)
    ys = torch.tensor(ys_values, dtype=torch.float64)
    return evaluator.count_grid(xs, ys, iterate_max).tolist()


def _parallel_counts(evaluator, xs, ys, iterate_max, workers):
    n = len(xs)
    xs_values, ys_values = xs.tolist(), ys.tolist()
    blocks = [balance(n, workers, p) for p in range(workers)]

    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_count_block, evaluator, xs_values[lo:hi],
                                   ys_values, iterate_max)
                   for lo, hi in blocks]
        try:
            rows = [row for future in futures for row in future.result()]
        except BaseException:
            executor.shutdown(wait=False, cancel_futures=True)
            raise

    return torch.tensor(rows, dtype=torch.int64).reshape(n, len(ys))


def escape_counts(xs, ys, iterate_max, evaluator=None, workers=None):
    """
    Raw escape counts for the grid spanned by xs and ys.
    Args:
        xs, ys: 1-D sequences of finite reals
        iterate_max: positive integer iteration bound
        evaluator: EscapeEvaluator instance or registered name
                   (defaults to config.EVALUATOR)
        workers: number of processes (defaults to config.WORKERS)
    Returns:
        int64 tensor of shape (len(xs), len(ys)) with values in [1, iterate_max]
    """
    iterate_max = check_iterate_max(iterate_max)
    xs = as_axis(xs, "xs")
    ys = as_axis(ys, "ys")
    evaluator = _resolve_evaluator(evaluator)
    workers = _resolve_workers(workers)

    n, m = len(xs), len(ys)
    if n == 0 or m == 0:
        return torch.zeros((n, m), dtype=torch.int64)

    workers = min(workers, n)
    log_message("DEBUG", f"Evaluating {n}x{m} grid, iterate_max={iterate_max}, "
                         f"evaluator={evaluator.name}, workers={workers}")
    if workers == 1:
        return evaluator.count_grid(xs, ys, iterate_max)
    return _parallel_counts(evaluator, xs, ys, iterate_max, workers)


def build(xs, ys, iterate_max, evaluator=None, workers=None):
    """
    Normalised escape fractions count / iterate_max for every grid cell.
    Returns a float64 tensor of shape (len(xs), len(ys)) with values in (0, 1].
    An empty axis yields an empty grid.
    """
    iterate_max = check_iterate_max(iterate_max)
    counts = escape_counts(xs, ys, iterate_max, evaluator=evaluator, workers=workers)
    return counts.to(torch.float64) / iterate_max


def generate_mandelbrot(width, height, x_min, x_max, y_min, y_max, iterate_max,
                        evaluator=None, workers=None):
    """
    Sample the window [x_min, x_max] x [y_min, y_max] with width real and
    height imaginary coordinates (endpoints included).
    Returns a float64 tensor of shape (width, height).
    """
    xs = make_axis(x_min, x_max, width)
    ys = make_axis(y_min, y_max, height)
    return build(xs, ys, iterate_max, evaluator=evaluator, workers=workers)

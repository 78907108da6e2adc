import argparse
import sys
import time
import numpy as np

# Import user config and modules
from config import width, height, x_min, x_max, y_min, y_max, \
                   DEFAULT_ITERATE_MAX, WORKERS
from errors import MandelbrotError
from escape_evaluator import EVALUATORS, get_evaluator
from grid_builder import escape_counts
from utils import log_message, make_axis


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Time escape-time evaluators on the classic Mandelbrot window.")
    parser.add_argument("--width", type=int, default=width,
                        help="number of real coordinates (default: %(default)s)")
    parser.add_argument("--height", type=int, default=height,
                        help="number of imaginary coordinates (default: %(default)s)")
    parser.add_argument("--iterate-max", type=int, default=DEFAULT_ITERATE_MAX,
                        help="iteration bound (default: %(default)s)")
    parser.add_argument("--evaluator", action="append", choices=sorted(EVALUATORS),
                        help="evaluator to run, may be repeated (default: all)")
    parser.add_argument("--workers", type=int, default=WORKERS,
                        help="worker processes per grid (default: %(default)s)")
    parser.add_argument("--compare", action="store_true",
                        help="fail unless every evaluator produces identical counts")
    return parser.parse_args(argv)


def run_benchmark(names, grid_width, grid_height, iterate_max, workers):
    """
    Evaluate the classic window once per evaluator name.
    Returns a dict mapping each name to its int64 count grid.
    """
    xs = make_axis(x_min, x_max, grid_width)
    ys = make_axis(y_min, y_max, grid_height)

    results = {}
    for name in names:
        evaluator = get_evaluator(name)
        start = time.perf_counter()
        results[name] = escape_counts(xs, ys, iterate_max,
                                      evaluator=evaluator, workers=workers)
        elapsed = time.perf_counter() - start
        log_message("INFO", f"{name:>10}: {grid_width}x{grid_height} grid in {elapsed:.3f} s")
    return results


def compare_results(results):
    """True when every count grid matches the first one exactly."""
    names = list(results)
    baseline = results[names[0]].numpy()
    agree = True
    for name in names[1:]:
        mismatches = int(np.count_nonzero(results[name].numpy() != baseline))
        if mismatches:
            log_message("ERROR", f"{name} disagrees with {names[0]} in {mismatches} cells")
            agree = False
        else:
            log_message("INFO", f"{name} agrees with {names[0]}")
    return agree


def main(argv=None):
    """
    Entrypoint; returns the process exit status.
    """
    args = parse_args(argv)
    names = args.evaluator or list(EVALUATORS)

    try:
        results = run_benchmark(names, args.width, args.height,
                                args.iterate_max, args.workers)
    except MandelbrotError as e:
        log_message("ERROR", str(e))
        return 2

    if args.compare and not compare_results(results):
        return 1

    counts = results[names[0]].numpy()
    if counts.size:
        bounded = np.count_nonzero(counts == args.iterate_max)
        log_message("INFO", f"{bounded} of {counts.size} samples stayed bounded")
    return 0


if __name__ == '__main__':
    sys.exit(main())

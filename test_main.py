"""
  Tests of the benchmark driver within main.py
"""

import contextlib
import io
import unittest
import torch
from main import compare_results, main, run_benchmark


#-------------------------------------------------------------

class TestCase(unittest.TestCase):

    def run_main(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(argv)
        return status, out.getvalue()

    def test_compare_all_evaluators(self):
        status, output = self.run_main(["--width", "12", "--height", "10",
                                        "--iterate-max", "200", "--compare"])
        self.assertEqual(status, 0)
        assert "agrees with reference" in output, output

    def test_single_evaluator(self):
        results = run_benchmark(["tensor"], 8, 6, 50, 1)
        self.assertEqual(list(results), ["tensor"])
        self.assertEqual(tuple(results["tensor"].shape), (8, 6))

    def test_compare_detects_disagreement(self):
        a = torch.ones((2, 2), dtype=torch.int64)
        b = a.clone()
        b[1, 0] = 2
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertTrue(compare_results({"reference": a, "optimized": a.clone()}))
            self.assertFalse(compare_results({"reference": a, "optimized": b}))

    def test_invalid_bound_exit_status(self):
        status, output = self.run_main(["--width", "4", "--height", "4",
                                        "--iterate-max", "0"])
        self.assertEqual(status, 2)
        assert "[ERROR]" in output, output

    def test_unknown_evaluator_rejected(self):
        with contextlib.redirect_stderr(io.StringIO()):
            self.assertRaises(SystemExit, main, ["--evaluator", "newton"])


#-------------------------------------------------------------
if __name__ == "__main__":
    unittest.main()

"""Test utilities and helpers"""

import threading
import time

from streamgrab.utils import ensure_directory, run_in_parallel, sanitize_filename


class TestHelpers:
    """Test helper functions"""

    def test_sanitize_filename(self):
        """Test filename sanitization"""
        assert sanitize_filename("(Track) Song - Band") == "(Track) Song - Band"
        assert "/" not in sanitize_filename("AC/DC")
        assert sanitize_filename("") == "_"

    def test_ensure_directory(self, temp_dir):
        """Test nested directory creation"""
        path = temp_dir / "a" / "b"

        assert ensure_directory(path) == path
        assert path.is_dir()
        assert ensure_directory(path) == path


class TestRunInParallel:
    """Test the worker pool"""

    def test_results_in_input_order(self):
        """Test results follow input order even when completion order differs"""
        def slow_for_small(n):
            time.sleep(0.01 * (5 - n))
            return n * 10

        results = run_in_parallel(slow_for_small, [1, 2, 3, 4], num_threads=4, show_progress=False)

        assert results == [(1, 10), (2, 20), (3, 30), (4, 40)]

    def test_exceptions_returned(self):
        """Test a failing item doesn't stop the others"""
        def check(n):
            if n == 2:
                raise ValueError("two")
            return n

        results = run_in_parallel(check, [1, 2, 3], num_threads=2, show_progress=False)

        assert results[0] == (1, 1)
        assert isinstance(results[1][1], ValueError)
        assert results[2] == (3, 3)

    def test_uses_threads(self):
        seen = set()

        def record(n):
            seen.add(threading.current_thread().name)
            time.sleep(0.02)
            return n

        run_in_parallel(record, range(4), num_threads=4, show_progress=False)

        assert len(seen) > 1

    def test_empty(self):
        assert run_in_parallel(str, [], show_progress=False) == []

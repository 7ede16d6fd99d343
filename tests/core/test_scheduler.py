import threading
import time
import unittest
from unittest.mock import patch

from reconlab.core.exceptions import ProbeFailure
from reconlab.core.models import ProbeOutcome
from reconlab.core.scheduler import BoundedScheduler, run_scan


class InFlightProbe:
    """Probe that records how many copies of itself run at once."""

    def __init__(self, delay: float = 0.02):
        self.delay = delay
        self.lock = threading.Lock()
        self.current = 0
        self.peak = 0
        self.calls = []

    def __call__(self, candidate):
        with self.lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
            self.calls.append(candidate)
        time.sleep(self.delay)
        with self.lock:
            self.current -= 1
        return ProbeOutcome(candidate=candidate, positive=candidate % 2 == 0)


class TestBoundedScheduler(unittest.TestCase):

    def test_never_exceeds_concurrency_cap(self):
        for workers in (1, 3, 8):
            probe = InFlightProbe()
            scheduler = BoundedScheduler(max_workers=workers)
            collector = scheduler.run(range(25), probe)

            self.assertLessEqual(probe.peak, workers)
            self.assertLessEqual(scheduler.peak_in_flight, workers)
            self.assertEqual(len(collector), 25)

    def test_probes_actually_run_in_parallel(self):
        barrier = threading.Barrier(4, timeout=5)

        def probe(candidate):
            barrier.wait()
            return ProbeOutcome(candidate=candidate, positive=True)

        collector = BoundedScheduler(max_workers=4).run(range(4), probe)

        self.assertTrue(all(outcome.positive for outcome in collector))

    def test_every_candidate_probed_exactly_once(self):
        probe = InFlightProbe(delay=0.001)
        collector = BoundedScheduler(max_workers=7).run(range(200), probe)

        self.assertEqual(sorted(collector.candidates()), list(range(200)))
        self.assertEqual(sorted(probe.calls), list(range(200)))

    def test_returns_only_after_last_outcome_recorded(self):
        def slow_probe(candidate):
            time.sleep(0.1 if candidate == 9 else 0.0)
            return ProbeOutcome(candidate=candidate, positive=True)

        collector = BoundedScheduler(max_workers=10).run(range(10), slow_probe)

        self.assertEqual(len(collector), 10)
        self.assertIn(9, collector.candidates())

    def test_empty_candidate_set_completes_immediately(self):
        collector = BoundedScheduler(max_workers=5).run([], InFlightProbe())
        self.assertEqual(len(collector), 0)

    def test_probe_errors_become_negative_outcomes(self):
        def flaky_probe(candidate):
            if candidate == "boom":
                raise RuntimeError("socket exploded")
            if candidate == "refused":
                raise ProbeFailure("connection refused")
            return ProbeOutcome(candidate=candidate, positive=True)

        collector = BoundedScheduler(max_workers=2).run(["ok", "boom", "refused"], flaky_probe)
        outcomes = {outcome.candidate: outcome for outcome in collector}

        self.assertEqual(len(outcomes), 3)
        self.assertTrue(outcomes["ok"].positive)
        self.assertFalse(outcomes["boom"].positive)
        self.assertEqual(outcomes["boom"].error, "socket exploded")
        self.assertFalse(outcomes["refused"].positive)
        self.assertEqual(outcomes["refused"].error, "connection refused")

    @patch("threading.excepthook")
    def test_interrupted_worker_still_recorded(self, mock_excepthook):
        class Interrupted(BaseException):
            pass

        def probe(candidate):
            if candidate == "stop":
                raise Interrupted("stopping")
            return ProbeOutcome(candidate=candidate, positive=True)

        collector = BoundedScheduler(max_workers=2).run(["ok", "stop", "also-ok"], probe)
        outcomes = {outcome.candidate: outcome for outcome in collector}

        self.assertEqual(len(outcomes), 3)
        self.assertFalse(outcomes["stop"].positive)
        self.assertIn("stopping", outcomes["stop"].error)
        self.assertTrue(outcomes["also-ok"].positive)

    def test_rejects_non_positive_worker_count(self):
        with self.assertRaises(ValueError):
            BoundedScheduler(max_workers=0)


class TestRunScan(unittest.TestCase):

    def test_report_summarises_all_outcomes(self):
        report = run_scan(range(10), InFlightProbe(delay=0.0), max_workers=3, target="evens")

        self.assertEqual(report.target, "evens")
        self.assertEqual(report.summary.total, 10)
        self.assertEqual(report.summary.positive_count, 5)
        self.assertEqual(sorted(o.candidate for o in report.summary.positives), [0, 2, 4, 6, 8])
        self.assertGreaterEqual(report.summary.elapsed, 0.0)


if __name__ == '__main__':
    unittest.main()

"""
Bounded-concurrency probe scheduler.

Every candidate gets its own worker thread, but a launch only happens after a
slot has been taken from a counting admission gate, so no more than
``max_workers`` probes are ever in flight. Workers hand their outcome to a
shared ResultCollector and give the slot back once it is recorded.
"""

import logging
import threading
import time
from typing import Any, Callable, Iterable, Optional

from reconlab.core.collector import ResultCollector
from reconlab.core.exceptions import ProbeFailure
from reconlab.core.models import ProbeOutcome, ScanReport
from reconlab.core.summary import summarize

logger = logging.getLogger(__name__)

Probe = Callable[[Any], ProbeOutcome]


class BoundedScheduler:
    """Runs one probe per candidate with at most ``max_workers`` in flight."""

    def __init__(self, max_workers: int = 50):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers
        self.peak_in_flight = 0
        self._in_flight = 0
        self._state_lock = threading.Lock()

    def run(self, candidates: Iterable[Any], probe: Probe,
            collector: Optional[ResultCollector] = None) -> ResultCollector:
        """
        Probes every candidate and returns once the last outcome is recorded.

        :param candidates: Candidates to probe, each exactly once.
        :param probe: Callable turning one candidate into a ProbeOutcome.
        :param collector: Optional sink to record into.
        :return: The collector holding one outcome per candidate.
        """
        if collector is None:
            collector = ResultCollector()
        gate = threading.BoundedSemaphore(self.max_workers)
        launched = 0

        for candidate in candidates:
            gate.acquire()
            worker = threading.Thread(
                target=self._execute,
                args=(candidate, probe, collector, gate),
                daemon=True,
            )
            try:
                worker.start()
            except RuntimeError:
                gate.release()
                raise
            launched += 1

        # A worker only gives its slot back after recording, so holding every
        # slot means every launched probe has been recorded.
        for _ in range(self.max_workers):
            gate.acquire()
        for _ in range(self.max_workers):
            gate.release()

        logger.debug(f"Scheduler finished {launched} probes (peak in flight: {self.peak_in_flight}).")
        return collector

    def _execute(self, candidate: Any, probe: Probe, collector: ResultCollector,
                 gate: threading.BoundedSemaphore):
        with self._state_lock:
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        outcome = None
        try:
            outcome = probe(candidate)
        except ProbeFailure as e:
            logger.debug(f"Probe failed for {candidate}: {e}")
            outcome = ProbeOutcome(candidate=candidate, positive=False, error=str(e))
        except Exception as e:
            logger.warning(f"Unexpected error probing {candidate}: {e}")
            outcome = ProbeOutcome(candidate=candidate, positive=False, error=str(e))
        except BaseException as e:
            logger.warning(f"Probe for {candidate} interrupted: {e!r}")
            outcome = ProbeOutcome(candidate=candidate, positive=False, error=repr(e))
            raise
        finally:
            # Recorded before the slot is released, whatever the probe did.
            try:
                collector.add(outcome)
            finally:
                with self._state_lock:
                    self._in_flight -= 1
                gate.release()


def run_scan(candidates: Iterable[Any], probe: Probe, max_workers: int,
             target: str = "") -> ScanReport:
    """Schedules a full run and summarises it once every probe has finished."""
    candidates = list(candidates)
    scheduler = BoundedScheduler(max_workers)
    start_time = time.perf_counter()
    collector = scheduler.run(candidates, probe)
    elapsed = time.perf_counter() - start_time

    outcomes = collector.snapshot()
    summary = summarize(outcomes, elapsed=elapsed, iterations=len(candidates))
    logger.info(
        f"Scan of {target or 'candidates'} completed in {elapsed:.2f} seconds: "
        f"{summary.positive_count}/{summary.total} positive."
    )
    return ScanReport(target=target, outcomes=outcomes, summary=summary)

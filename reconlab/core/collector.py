import threading
from typing import Any, Iterator, List

from reconlab.core.models import ProbeOutcome


class ResultCollector:
    """
    Thread-safe sink for probe outcomes.

    Every worker appends exactly one outcome; the lock covers the whole append
    so concurrent completions never overwrite each other.
    """

    def __init__(self):
        self._outcomes: List[ProbeOutcome] = []
        self._lock = threading.Lock()

    def add(self, outcome: ProbeOutcome):
        with self._lock:
            self._outcomes.append(outcome)

    def snapshot(self) -> List[ProbeOutcome]:
        with self._lock:
            return list(self._outcomes)

    def candidates(self) -> List[Any]:
        return [outcome.candidate for outcome in self.snapshot()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self) -> Iterator[ProbeOutcome]:
        return iter(self.snapshot())

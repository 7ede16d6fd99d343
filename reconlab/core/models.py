from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

Measurement = Union[int, float]


@dataclass(frozen=True)
class ProbeOutcome:
    """
    The result of probing one candidate.

    :param candidate: The probed address, port, path or hostname.
    :param positive: True when the candidate is reachable or present.
    :param measurement: RTT in milliseconds, status code or byte size.
    :param error: Description of the failure, if any.
    :param details: Extra per-probe fields (status_code, size, addresses, ...).
    """
    candidate: Any
    positive: bool
    measurement: Optional[Measurement] = None
    error: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        record = {"candidate": self.candidate, "positive": self.positive}
        if self.measurement is not None:
            record["measurement"] = self.measurement
        if self.error is not None:
            record["error"] = self.error
        record.update(self.details)
        return record


@dataclass(frozen=True)
class ScanSummary:
    total: int
    positive_count: int
    positives: Tuple[ProbeOutcome, ...]
    negatives: Tuple[ProbeOutcome, ...]
    elapsed: float = 0.0
    ops_per_second: float = 0.0

    @property
    def negative_count(self) -> int:
        return self.total - self.positive_count


@dataclass
class ScanReport:
    """Everything one scan run produced: all outcomes plus their summary."""
    target: str
    outcomes: List[ProbeOutcome]
    summary: ScanSummary

    def records(self, positive_only: bool = False) -> List[Dict[str, Any]]:
        source = self.summary.positives if positive_only else self.outcomes
        return [outcome.to_dict() for outcome in source]

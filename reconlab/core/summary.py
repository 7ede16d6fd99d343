from typing import Iterable, List, Optional, Tuple

from reconlab.core.models import ProbeOutcome, ScanSummary


def partition(outcomes: Iterable[ProbeOutcome]) -> Tuple[List[ProbeOutcome], List[ProbeOutcome]]:
    """Splits outcomes into (positives, negatives), keeping their order."""
    positives, negatives = [], []
    for outcome in outcomes:
        (positives if outcome.positive else negatives).append(outcome)
    return positives, negatives


def summarize(outcomes: Iterable[ProbeOutcome], elapsed: float = 0.0,
              iterations: Optional[int] = None) -> ScanSummary:
    """
    Builds the summary of a completed result set.

    :param outcomes: The complete result set.
    :param elapsed: Wall time of the run in seconds.
    :param iterations: Operation count for the throughput figure. Defaults to
        the number of outcomes.
    """
    outcomes = list(outcomes)
    positives, negatives = partition(outcomes)
    if iterations is None:
        iterations = len(outcomes)
    ops_per_second = iterations / elapsed if elapsed > 0 else 0.0
    return ScanSummary(
        total=len(outcomes),
        positive_count=len(positives),
        positives=tuple(positives),
        negatives=tuple(negatives),
        elapsed=elapsed,
        ops_per_second=ops_per_second,
    )

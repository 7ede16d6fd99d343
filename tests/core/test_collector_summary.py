import threading

import pytest

from reconlab.core.collector import ResultCollector
from reconlab.core.models import ProbeOutcome, ScanReport
from reconlab.core.summary import partition, summarize


def test_collector_keeps_every_concurrent_append():
    collector = ResultCollector()

    def writer(offset):
        for i in range(250):
            collector.add(ProbeOutcome(candidate=offset + i, positive=True))

    threads = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    candidates = collector.candidates()
    assert len(candidates) == 2000
    assert len(set(candidates)) == 2000


def test_snapshot_is_a_copy():
    collector = ResultCollector()
    collector.add(ProbeOutcome(candidate="a", positive=True))
    snapshot = collector.snapshot()
    collector.add(ProbeOutcome(candidate="b", positive=False))

    assert [o.candidate for o in snapshot] == ["a"]
    assert len(collector) == 2


def test_partition_splits_positive_and_negative():
    outcomes = [
        ProbeOutcome(candidate=1, positive=True),
        ProbeOutcome(candidate=2, positive=False),
        ProbeOutcome(candidate=3, positive=True),
    ]
    positives, negatives = partition(outcomes)

    assert [o.candidate for o in positives] == [1, 3]
    assert [o.candidate for o in negatives] == [2]


def test_summarize_counts_and_throughput():
    outcomes = [ProbeOutcome(candidate=i, positive=i < 3) for i in range(10)]
    summary = summarize(outcomes, elapsed=2.0)

    assert summary.total == 10
    assert summary.positive_count == 3
    assert summary.negative_count == 7
    assert summary.ops_per_second == pytest.approx(5.0)


def test_summarize_explicit_iterations_and_zero_elapsed():
    outcomes = [ProbeOutcome(candidate=0, positive=True)]

    assert summarize(outcomes, elapsed=0.5, iterations=100).ops_per_second == pytest.approx(200.0)
    assert summarize(outcomes, elapsed=0.0).ops_per_second == 0.0
    assert summarize([]).total == 0


def test_outcome_to_dict_omits_missing_fields():
    outcome = ProbeOutcome(candidate="admin", positive=True, measurement=403, details={"size": 12})
    assert outcome.to_dict() == {"candidate": "admin", "positive": True, "measurement": 403, "size": 12}

    failed = ProbeOutcome(candidate="x", positive=False, error="timed out")
    assert failed.to_dict() == {"candidate": "x", "positive": False, "error": "timed out"}


def test_report_records_can_be_filtered():
    outcomes = [ProbeOutcome(candidate=1, positive=True), ProbeOutcome(candidate=2, positive=False)]
    report = ScanReport(target="t", outcomes=outcomes, summary=summarize(outcomes))

    assert len(report.records()) == 2
    assert report.records(positive_only=True) == [{"candidate": 1, "positive": True}]

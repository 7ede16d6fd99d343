from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from reconlab.core.config import ScanSettings
from reconlab.core.models import ScanReport


class ReconScanner(ABC):
    """
    Common plumbing for the scanners: settings injection plus per-instance
    worker and timeout overrides.
    """

    default_workers_attr = "port_workers"
    default_timeout_attr = "port_timeout"

    def __init__(self, settings: Optional[ScanSettings] = None,
                 max_workers: Optional[int] = None, timeout: Optional[float] = None):
        self.settings = settings or ScanSettings.from_env()
        self.max_workers = max_workers or getattr(self.settings, self.default_workers_attr)
        self.timeout = timeout or getattr(self.settings, self.default_timeout_attr)

    @staticmethod
    @abstractmethod
    def as_payload(report: ScanReport) -> Any:
        """
        Shapes a report into the plain records handed to callers.

        :param report: A completed scan report.
        :return: Lists and dicts of plain values.
        """
        pass


def rtt_record(record: Dict[str, Any], outcome) -> Dict[str, Any]:
    if outcome.measurement is not None:
        record["rtt_ms"] = outcome.measurement
    return record

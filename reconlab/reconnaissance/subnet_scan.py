# -*- coding: utf-8 -*-
"""
subnet_scan.py: Live host discovery across a CIDR block.

Hosts are considered alive when they accept a TCP connection on port 80, or
on 443 as a fallback. No ICMP is used, so no elevated privileges are needed.

MITRE ATT&CK Mapping:
- T1595.001: Active Scanning: Scanning IP Blocks
"""

import functools
import logging
from typing import Any, Dict

from reconlab.core.models import ScanReport
from reconlab.core.scheduler import run_scan
from reconlab.reconnaissance.base import ReconScanner, rtt_record
from reconlab.reconnaissance.enumeration import expand_cidr
from reconlab.reconnaissance.probes import reachability_probe

logger = logging.getLogger(__name__)


class SubnetScanner(ReconScanner):
    """Sweeps every host address of a CIDR block for TCP reachability."""

    default_workers_attr = "subnet_workers"
    default_timeout_attr = "subnet_timeout"

    def scan(self, cidr: str) -> ScanReport:
        """
        Scans a CIDR block.

        Raises InvalidSpecification for a malformed block and
        ResourceExhaustion when it holds more hosts than allowed.
        """
        hosts = expand_cidr(cidr, max_hosts=self.settings.max_hosts)
        logger.info(f"Starting subnet scan on {cidr}: {len(hosts)} hosts with {self.max_workers} workers.")
        probe = functools.partial(
            reachability_probe, timeout=self.timeout, ports=self.settings.reachability_ports
        )
        return run_scan(hosts, probe, self.max_workers, target=cidr)

    @staticmethod
    def as_payload(report: ScanReport) -> Dict[str, Any]:
        alive = [
            rtt_record({"ip": outcome.candidate, "alive": True, "port": outcome.details.get("port")}, outcome)
            for outcome in report.summary.positives
        ]
        return {
            "scanned": report.summary.total,
            "alive": report.summary.positive_count,
            "hosts": alive,
        }

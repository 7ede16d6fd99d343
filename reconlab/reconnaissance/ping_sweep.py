# -*- coding: utf-8 -*-
"""
ping_sweep.py: TCP-based "ping" of a single host and of a whole network.

Real ICMP echo needs raw sockets; reachability is approximated by a TCP
handshake instead.
"""

import functools
import logging
from typing import Any, Dict, Optional

import dns.resolver

from reconlab.core.config import PING_FALLBACK_PORT, ScanSettings
from reconlab.core.exceptions import InvalidSpecification
from reconlab.core.models import ProbeOutcome, ScanReport
from reconlab.core.scheduler import run_scan
from reconlab.reconnaissance.base import ReconScanner, rtt_record
from reconlab.reconnaissance.enumeration import expand_cidr
from reconlab.reconnaissance.probes import tcp_ping

logger = logging.getLogger(__name__)


class PingSweeper(ReconScanner):
    default_workers_attr = "sweep_workers"
    default_timeout_attr = "sweep_timeout"

    def __init__(self, settings: Optional[ScanSettings] = None, max_workers: Optional[int] = None,
                 timeout: Optional[float] = None, resolver: Optional[dns.resolver.Resolver] = None):
        super().__init__(settings, max_workers, timeout)
        self.resolver = resolver

    def ping(self, host: str, port: int = PING_FALLBACK_PORT) -> ProbeOutcome:
        """TCP-pings one host, falling back to port 80 if ``port`` does not answer."""
        if not host:
            raise InvalidSpecification("Host is required.")
        if not 0 < port < 65536:
            raise InvalidSpecification(f"Invalid port: {port}")
        return tcp_ping(host, port, self.settings.ping_timeout, self.resolver)

    def sweep(self, cidr: str) -> ScanReport:
        hosts = expand_cidr(cidr, max_hosts=self.settings.max_hosts)
        logger.info(f"Starting ping sweep on {cidr}: {len(hosts)} hosts with {self.max_workers} workers.")
        probe = functools.partial(tcp_ping, port=PING_FALLBACK_PORT, timeout=self.timeout, resolver=self.resolver)
        return run_scan(hosts, probe, self.max_workers, target=cidr)

    @staticmethod
    def record(outcome: ProbeOutcome) -> Dict[str, Any]:
        record = {"host": outcome.candidate, "reachable": outcome.positive}
        if outcome.details.get("ip"):
            record["ip"] = outcome.details["ip"]
        if outcome.error:
            record["error"] = outcome.error
        return rtt_record(record, outcome)

    @staticmethod
    def as_payload(report: ScanReport) -> Dict[str, Any]:
        return {
            "network": report.target,
            "total_hosts": report.summary.total,
            "alive_hosts": report.summary.positive_count,
            "hosts": [PingSweeper.record(outcome) for outcome in report.outcomes],
        }

# -*- coding: utf-8 -*-
"""
tcp_connect_scan.py: Multi-threaded TCP connect port scanner.

A full TCP handshake is attempted on each port and closed straight away; no
raw packets are crafted.

MITRE ATT&CK Mapping:
- T1046: Network Service Scanning
"""

import functools
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from reconlab.core.config import MAX_PORT
from reconlab.core.exceptions import InvalidSpecification, ResourceExhaustion
from reconlab.core.models import ScanReport
from reconlab.core.scheduler import run_scan
from reconlab.reconnaissance.base import ReconScanner, rtt_record
from reconlab.reconnaissance.enumeration import parse_port_spec
from reconlab.reconnaissance.probes import is_ip_address, tcp_connect_probe

logger = logging.getLogger(__name__)

IP_PATTERN = re.compile(r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$")
HOSTNAME_PATTERN = re.compile(r"^[a-zA-Z0-9.-]+$")


def validate_target(target: str) -> bool:
    """Validate the target to be a valid IP address or hostname."""
    if not target:
        return False
    return bool(IP_PATTERN.match(target) or HOSTNAME_PATTERN.match(target) or is_ip_address(target))


class PortScanner(ReconScanner):
    """Scans a list of ports on one host with a TCP connect probe."""

    default_workers_attr = "port_workers"
    default_timeout_attr = "port_timeout"

    def resolve_ports(self, ports: Optional[Union[str, Iterable[int]]]) -> List[int]:
        """
        Turns a spec string or port iterable into the list to scan.

        Ports outside 1-65535 are skipped.

        Raises:
            ResourceExhaustion: More than settings.max_ports ports.
        """
        limit = self.settings.max_ports
        if ports is None:
            return list(self.settings.default_ports)
        if isinstance(ports, str):
            return parse_port_spec(ports, max_ports=limit)

        port_list = []
        for port in ports:
            port = int(port)
            if not 0 < port <= MAX_PORT:
                logger.debug(f"Skipping out-of-range port: {port}")
                continue
            if len(port_list) >= limit:
                raise ResourceExhaustion(
                    len(port_list) + 1, limit, f"Too many ports ({len(port_list) + 1}+). Max {limit} ports allowed."
                )
            port_list.append(port)
        return port_list

    def scan(self, host: str, ports: Optional[Union[str, Iterable[int]]] = None) -> ScanReport:
        """
        Scans ``ports`` on ``host``.

        Args:
            host: Target IP address or hostname.
            ports: Port spec string ('22,80,8000-8002'), an iterable of ports,
                or None for the default port list.
        """
        if not validate_target(host):
            raise InvalidSpecification(f"Invalid target: {host!r}")
        port_list = self.resolve_ports(ports)
        if not port_list:
            raise InvalidSpecification(f"Port spec {ports!r} produced no ports to scan.")

        logger.info(f"Starting scan on {host} for {len(port_list)} ports with {self.max_workers} threads.")
        probe = functools.partial(self._probe_port, host)
        return run_scan(port_list, probe, self.max_workers, target=host)

    def _probe_port(self, host: str, port: int):
        return tcp_connect_probe(host, port, self.timeout, candidate=port)

    @staticmethod
    def as_payload(report: ScanReport) -> List[Dict[str, Any]]:
        return [
            rtt_record({"port": outcome.candidate, "open": outcome.positive}, outcome)
            for outcome in report.outcomes
        ]

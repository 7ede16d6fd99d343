# -*- coding: utf-8 -*-
"""
dns_recon.py: Subdomain brute forcing and single hostname resolution.

MITRE ATT&CK Mapping:
- T1590.002: Gather Victim Network Information: DNS
- T1596.001: Search Open Technical Databases: DNS/Passive DNS
"""

import functools
import logging
import re
from typing import Any, Dict, List, Optional

import dns.resolver

from reconlab.core.config import ScanSettings
from reconlab.core.exceptions import InvalidSpecification
from reconlab.core.models import ProbeOutcome, ScanReport
from reconlab.core.scheduler import run_scan
from reconlab.reconnaissance.base import ReconScanner
from reconlab.reconnaissance.enumeration import load_wordlist
from reconlab.reconnaissance.probes import dns_probe

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_domain(domain: str) -> bool:
    """Validate the domain format."""
    return bool(domain and DOMAIN_PATTERN.match(domain))


def qualify_hostname(hostname: str, domain: Optional[str] = None) -> str:
    """Appends ``domain`` to bare labels that carry no dot."""
    if domain and "." not in hostname:
        return f"{hostname}.{domain}"
    return hostname


class SubdomainScanner(ReconScanner):
    """Resolves wordlist-derived subdomains of a domain."""

    default_workers_attr = "dns_workers"
    default_timeout_attr = "dns_timeout"

    def __init__(self, settings: Optional[ScanSettings] = None, max_workers: Optional[int] = None,
                 timeout: Optional[float] = None, resolver: Optional[dns.resolver.Resolver] = None):
        super().__init__(settings, max_workers, timeout)
        self.resolver = resolver

    def bruteforce(self, domain: str, wordlist_path: Optional[str] = None) -> ScanReport:
        """Resolves '<word>.<domain>' for every wordlist entry."""
        if not validate_domain(domain):
            raise InvalidSpecification(f"Invalid domain name: {domain!r}")
        words = load_wordlist(wordlist_path, default=self.settings.subdomain_wordlist)
        hostnames = [f"{word}.{domain}" for word in words]
        if not hostnames:
            raise InvalidSpecification("Wordlist produced no subdomains to resolve.")

        logger.info(f"Starting DNS reconnaissance for {domain}: {len(hostnames)} names with {self.max_workers} threads.")
        probe = functools.partial(dns_probe, timeout=self.timeout, resolver=self.resolver)
        return run_scan(hostnames, probe, self.max_workers, target=domain)

    def resolve(self, hostname: str, domain: Optional[str] = None) -> ProbeOutcome:
        """Resolves one hostname, qualifying it with ``domain`` if it is a bare label."""
        if not hostname:
            raise InvalidSpecification("Hostname is required.")
        return dns_probe(qualify_hostname(hostname, domain), self.settings.resolve_timeout, self.resolver)

    @staticmethod
    def record(outcome: ProbeOutcome) -> Dict[str, Any]:
        record = {
            "hostname": outcome.candidate,
            "ips": list(outcome.details.get("addresses", [])),
            "found": outcome.positive,
        }
        if outcome.error:
            record["error"] = outcome.error
        return record

    @staticmethod
    def as_payload(report: ScanReport) -> List[Dict[str, Any]]:
        return [SubdomainScanner.record(outcome) for outcome in report.summary.positives]


def group_by_address(report: ScanReport) -> Dict[str, List[str]]:
    """Maps each resolved address to the subdomains pointing at it."""
    results: Dict[str, List[str]] = {}
    for outcome in report.summary.positives:
        for ip in outcome.details.get("addresses", []):
            results.setdefault(ip, []).append(outcome.candidate)
    return {ip: sorted(names) for ip, names in sorted(results.items())}

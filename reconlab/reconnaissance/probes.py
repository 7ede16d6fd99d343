# -*- coding: utf-8 -*-
"""
Probe functions. Each one checks a single candidate within a timeout and
always returns a ProbeOutcome; network failures become negative outcomes.

MITRE ATT&CK Mapping:
- T1046: Network Service Scanning (TCP connect probe)
- T1595.003: Active Scanning: Wordlist Scanning (HTTP probe)
- T1590.002: Gather Victim Network Information: DNS (DNS probe)
"""

import ipaddress
import logging
import socket
import time
from typing import Any, List, Optional, Sequence, Tuple

import dns.exception
import dns.resolver
import requests

from reconlab.core.config import DEFAULT_REACHABILITY_PORTS, FOUND_STATUS_CODES, PING_FALLBACK_PORT, USER_AGENT
from reconlab.core.exceptions import ProbeFailure
from reconlab.core.models import ProbeOutcome

logger = logging.getLogger(__name__)

ADDRESS_RECORD_TYPES = ("A", "AAAA")


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


def connect(host: str, port: int, timeout: float) -> int:
    """
    Opens and immediately closes a TCP connection.

    Returns the connect time in milliseconds, or raises ProbeFailure.
    """
    start_time = time.perf_counter()
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return _elapsed_ms(start_time)
    except OSError as e:
        raise ProbeFailure(f"{host}:{port} - {e}") from e


def resolve(hostname: str, timeout: float,
            resolver: Optional[dns.resolver.Resolver] = None) -> List[str]:
    """
    Resolves a hostname to its A and AAAA addresses within ``timeout`` seconds.

    Raises ProbeFailure if nothing could be resolved.
    """
    if resolver is None:
        try:
            resolver = dns.resolver.get_default_resolver()
        except dns.exception.DNSException as e:
            raise ProbeFailure(f"lookup {hostname}: {e}") from e
    deadline = time.monotonic() + timeout
    addresses: List[str] = []
    last_error: Optional[Exception] = None

    for record_type in ADDRESS_RECORD_TYPES:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        try:
            answers = resolver.resolve(hostname, record_type, lifetime=remaining)
            addresses.extend(str(rdata.address) for rdata in answers)
        except dns.resolver.NXDOMAIN as e:
            last_error = e
            break
        except dns.exception.DNSException as e:
            last_error = e

    if not addresses:
        reason = last_error if last_error is not None else "no addresses found"
        raise ProbeFailure(f"lookup {hostname}: {reason}")
    return addresses


def is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
        return True
    except ValueError:
        return False


def tcp_connect_probe(host: str, port: int, timeout: float, candidate: Any = None) -> ProbeOutcome:
    """
    Checks whether host:port accepts a TCP connection.

    :param candidate: Identity recorded on the outcome. Defaults to 'host:port'.
    """
    if candidate is None:
        candidate = f"{host}:{port}"
    try:
        rtt_ms = connect(host, port, timeout)
    except ProbeFailure as e:
        logger.debug(f"Port {port} on {host} is Closed ({e})")
        return ProbeOutcome(candidate=candidate, positive=False, error=str(e), details={"port": port})
    logger.info(f"Port {port} on {host} is Open")
    return ProbeOutcome(candidate=candidate, positive=True, measurement=rtt_ms, details={"port": port})


def reachability_probe(host: str, timeout: float,
                       ports: Sequence[int] = DEFAULT_REACHABILITY_PORTS) -> ProbeOutcome:
    """
    Treats a host as alive if any of ``ports`` accepts a TCP connection.

    Ports are tried in order. A host that only answers on a later port is
    reported with ``fallback`` set, so it can be told apart from one that
    answered on the primary port.
    """
    last_error = None
    for index, port in enumerate(ports):
        try:
            rtt_ms = connect(host, port, timeout)
        except ProbeFailure as e:
            last_error = str(e)
            continue
        logger.info(f"Host {host} is alive on port {port} ({rtt_ms} ms)")
        return ProbeOutcome(
            candidate=host, positive=True, measurement=rtt_ms,
            details={"port": port, "fallback": index > 0},
        )
    logger.debug(f"Host {host} did not answer on ports {list(ports)}")
    return ProbeOutcome(candidate=host, positive=False, error=last_error)


def is_found_status(status_code: int) -> bool:
    """True for status codes meaning the path exists, even behind auth or a redirect."""
    return 200 <= status_code < 300 or status_code in FOUND_STATUS_CODES


def join_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def http_probe(base_url: str, path: str, timeout: float,
               session: Optional[requests.Session] = None,
               user_agent: str = USER_AGENT) -> ProbeOutcome:
    """
    Requests base_url/path without following redirects and classifies the status.

    The measurement is the status code; ``size`` is the Content-Length header,
    or -1 when the server did not send one.
    """
    url = join_url(base_url, path)
    http = session or requests
    try:
        with http.get(url, headers={"User-Agent": user_agent}, timeout=timeout,
                      allow_redirects=False, stream=True) as response:
            status_code = response.status_code
            try:
                size = int(response.headers.get("Content-Length", -1))
            except ValueError:
                size = -1
    except requests.exceptions.RequestException as e:
        logger.debug(f"Request to {url} failed: {e}")
        return ProbeOutcome(candidate=path, positive=False, error=str(e))

    found = is_found_status(status_code)
    if found:
        logger.info(f"Found {url} (HTTP {status_code})")
    return ProbeOutcome(
        candidate=path, positive=found, measurement=status_code,
        details={"status_code": status_code, "size": size},
    )


def dns_probe(hostname: str, timeout: float,
              resolver: Optional[dns.resolver.Resolver] = None) -> ProbeOutcome:
    """Resolves a hostname; positive when at least one address comes back."""
    start_time = time.perf_counter()
    try:
        addresses = resolve(hostname, timeout, resolver)
    except ProbeFailure as e:
        logger.debug(f"Could not resolve {hostname}: {e}")
        return ProbeOutcome(candidate=hostname, positive=False, error=str(e), details={"addresses": []})
    logger.info(f"Resolved {hostname} -> {', '.join(addresses)}")
    return ProbeOutcome(
        candidate=hostname, positive=True, measurement=_elapsed_ms(start_time),
        details={"addresses": addresses},
    )


def tcp_ping(host: str, port: int, timeout: float,
             resolver: Optional[dns.resolver.Resolver] = None) -> ProbeOutcome:
    """
    TCP "ping": resolve the host, then try to connect to ``port``.

    No ICMP is sent. The connect goes to the resolved address. If ``port``
    refuses, port 80 is tried once as the fallback reachability check.
    """
    details = {}
    if is_ip_address(host):
        details["ip"] = host
    else:
        try:
            details["ip"] = resolve(host, timeout, resolver)[0]
        except ProbeFailure as e:
            return ProbeOutcome(candidate=host, positive=False, error=str(e))

    attempts: Tuple[int, ...] = (port,) if port == PING_FALLBACK_PORT else (port, PING_FALLBACK_PORT)
    outcome = reachability_probe(details["ip"], timeout, attempts)
    details.update(outcome.details)
    return ProbeOutcome(
        candidate=host, positive=outcome.positive, measurement=outcome.measurement,
        error=outcome.error, details=details,
    )

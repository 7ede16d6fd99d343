# -*- coding: utf-8 -*-
"""
Candidate enumeration: turns a compact target description into the list of
things to probe.

- CIDR block  -> host addresses (network and broadcast excluded)
- port spec   -> port numbers ("22,80,8000-8002")
- wordlist    -> paths or subdomain labels, with a built-in fallback
"""

import ipaddress
import logging
import os
from typing import Iterator, List, Optional, Sequence, Union

from reconlab.core.config import MAX_PORT
from reconlab.core.exceptions import InvalidSpecification, ResourceExhaustion

logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def increment_address(raw: bytearray) -> bool:
    """
    Adds one to a big-endian address in place.

    The least significant byte is bumped first; a wrap to zero carries into the
    next byte up. Returns True if every byte wrapped (the address overflowed).
    """
    for index in range(len(raw) - 1, -1, -1):
        raw[index] = (raw[index] + 1) & 0xFF
        if raw[index] != 0:
            return False
    return True


def parse_cidr(cidr: str) -> IPNetwork:
    """Parses 'address/prefix' into a network, masking off host bits."""
    if not isinstance(cidr, str) or cidr.count("/") != 1:
        raise InvalidSpecification(f"Invalid CIDR format: {cidr!r}")
    address, prefix = (part.strip() for part in cidr.split("/"))
    if not prefix.isdigit():
        raise InvalidSpecification(f"Invalid CIDR prefix: {cidr!r}")
    try:
        return ipaddress.ip_network(f"{address}/{int(prefix)}", strict=False)
    except ValueError as e:
        raise InvalidSpecification(f"Invalid CIDR: {e}") from e


def host_count(network: IPNetwork) -> int:
    """Number of addresses expand_cidr returns for this network."""
    total = network.num_addresses
    return total - 2 if total > 2 else total


def iter_network(cidr: Union[str, IPNetwork]) -> Iterator[str]:
    """Yields every address of the block, network and broadcast included."""
    network = parse_cidr(cidr) if isinstance(cidr, str) else cidr
    raw = bytearray(network.network_address.packed)
    while True:
        address = ipaddress.ip_address(bytes(raw))
        if address not in network:
            return
        yield str(address)
        if increment_address(raw):
            return


def expand_cidr(cidr: str, max_hosts: Optional[int] = None) -> List[str]:
    """
    Expands a CIDR block into its host addresses.

    For blocks with more than two addresses the network and broadcast
    addresses are dropped.

    Args:
        cidr: Block such as '192.168.1.0/24'.
        max_hosts: Optional cap. Checked before anything is generated.

    Raises:
        InvalidSpecification: The block cannot be parsed.
        ResourceExhaustion: The block has more hosts than max_hosts.
    """
    network = parse_cidr(cidr)
    count = host_count(network)
    if max_hosts is not None and count > max_hosts:
        raise ResourceExhaustion(count, max_hosts, f"CIDR too large ({count} hosts). Max {max_hosts} hosts allowed.")

    addresses = list(iter_network(network))
    if len(addresses) > 2:
        addresses = addresses[1:-1]
    logger.debug(f"Expanded {cidr} into {len(addresses)} host addresses.")
    return addresses


def parse_port_spec(spec: str, max_ports: Optional[int] = None) -> List[int]:
    """
    Parses a port spec like '22,80,8000-8002'.

    Tokens are single ports or inclusive ranges. Tokens that do not parse, and
    single ports outside 1-65535, are skipped; ranges are clipped to 1-65535.
    Order is kept and duplicates are not removed.

    Raises:
        ResourceExhaustion: The spec expands to more than max_ports ports.
            Checked before each token is expanded.
    """
    ports: List[int] = []

    def extend(start: int, end: int):
        count = end - start + 1
        if max_ports is not None and len(ports) + count > max_ports:
            raise ResourceExhaustion(
                len(ports) + count, max_ports,
                f"Port spec too large ({len(ports) + count}+ ports). Max {max_ports} ports allowed.",
            )
        ports.extend(range(start, end + 1))

    for part in (spec or "").split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            bounds = part.split("-")
            if len(bounds) != 2:
                logger.debug(f"Skipping malformed port range: {part!r}")
                continue
            try:
                start, end = int(bounds[0].strip()), int(bounds[1].strip())
            except ValueError:
                logger.debug(f"Skipping malformed port range: {part!r}")
                continue
            start, end = max(start, 1), min(end, MAX_PORT)
            if start <= end:
                extend(start, end)
        else:
            try:
                port = int(part)
            except ValueError:
                logger.debug(f"Skipping malformed port: {part!r}")
                continue
            if 0 < port <= MAX_PORT:
                extend(port, port)
            else:
                logger.debug(f"Skipping out-of-range port: {port}")
    return ports


def load_wordlist(path: Optional[str] = None, default: Sequence[str] = ()) -> List[str]:
    """
    Loads candidates from a wordlist file, one per line.

    Blank lines and '#' comments are ignored. Without a path, or when the file
    cannot be opened, the built-in default list is returned instead.
    """
    if not path:
        return list(default)
    try:
        with open(os.path.abspath(path), "r", encoding="utf-8", errors="replace") as f:
            words = [line.strip() for line in f]
    except OSError as e:
        logger.warning(f"Wordlist {path} could not be read ({e}). Using built-in default list.")
        return list(default)
    return [word for word in words if word and not word.startswith("#")]

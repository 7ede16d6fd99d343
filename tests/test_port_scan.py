#!/usr/bin/env python3
"""Tests for tcp_connect_scan.py"""

import socket
from unittest.mock import MagicMock, patch

import pytest

from reconlab.core.config import DEFAULT_PORTS, ScanSettings
from reconlab.core.exceptions import InvalidSpecification, ResourceExhaustion
from reconlab.reconnaissance.tcp_connect_scan import PortScanner, validate_target


@pytest.fixture
def scanner():
    return PortScanner(ScanSettings(port_workers=5, port_timeout=0.5))


def accept_only(*ports):
    def connect(address, timeout=None):
        if address[1] in ports:
            return MagicMock()
        raise ConnectionRefusedError(111, "Connection refused")
    return connect


def test_validate_target():
    assert validate_target("192.168.1.10")
    assert validate_target("scanme.example.org")
    assert validate_target("::1")
    assert validate_target("fe80::1")
    assert not validate_target("")
    assert not validate_target("bad host;rm")
    assert not validate_target("bad host;rm:x")
    assert not validate_target("a:b:c:zz")


@patch("socket.create_connection")
def test_scan_port_spec(mock_connect, scanner):
    mock_connect.side_effect = accept_only(80, 8001)

    report = scanner.scan("127.0.0.1", "22,80,8000-8002")
    results = {record["port"]: record["open"] for record in PortScanner.as_payload(report)}

    assert results == {22: False, 80: True, 8000: False, 8001: True, 8002: False}
    assert report.summary.positive_count == 2


@patch("socket.create_connection")
def test_default_ports_used_when_none_given(mock_connect, scanner):
    mock_connect.side_effect = accept_only()

    report = scanner.scan("127.0.0.1")

    assert sorted(o.candidate for o in report.outcomes) == sorted(DEFAULT_PORTS)


@patch("socket.create_connection")
def test_duplicate_ports_each_probed(mock_connect, scanner):
    mock_connect.side_effect = accept_only(443)

    report = scanner.scan("127.0.0.1", [443, 443])

    assert [o.candidate for o in report.outcomes] == [443, 443]
    assert mock_connect.call_count == 2


def test_real_listener_detected(scanner):
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    try:
        port = server.getsockname()[1]
        report = scanner.scan("127.0.0.1", [port])
    finally:
        server.close()

    assert report.summary.positive_count == 1
    assert PortScanner.as_payload(report)[0]["port"] == port


def test_empty_port_spec_rejected(scanner):
    with pytest.raises(InvalidSpecification):
        scanner.scan("127.0.0.1", "abc,0")


def test_invalid_target_rejected(scanner):
    with pytest.raises(InvalidSpecification):
        scanner.scan("not a host!", "80")


def test_colon_junk_target_rejected(scanner):
    with pytest.raises(InvalidSpecification):
        scanner.scan("bad host;rm:x", "80")


@patch("socket.create_connection")
def test_port_cap_enforced(mock_connect):
    scanner = PortScanner(ScanSettings(port_workers=2, port_timeout=0.5, max_ports=10))

    with pytest.raises(ResourceExhaustion):
        scanner.scan("127.0.0.1", "1-11")
    with pytest.raises(ResourceExhaustion):
        scanner.scan("127.0.0.1", range(1, 12))
    mock_connect.assert_not_called()


@patch("socket.create_connection")
def test_out_of_range_ports_never_reach_socket(mock_connect, scanner):
    mock_connect.side_effect = accept_only()

    report = scanner.scan("127.0.0.1", "65534-70000,99999")
    scanner.scan("127.0.0.1", [0, 65535, 65536])

    assert sorted(o.candidate for o in report.outcomes) == [65534, 65535]
    assert all(0 < call.args[0][1] <= 65535 for call in mock_connect.call_args_list)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

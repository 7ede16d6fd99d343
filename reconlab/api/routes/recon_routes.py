"""
Reconnaissance API Routes
"""

import asyncio
import dataclasses
import logging
from typing import Any, Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from reconlab.api.security import get_settings, verify_api_key
from reconlab.core.config import ScanSettings
from reconlab.core.exceptions import InvalidSpecification, ResourceExhaustion
from reconlab.reconnaissance.dir_scan import DirectoryScanner
from reconlab.reconnaissance.dns_recon import SubdomainScanner
from reconlab.reconnaissance.ping_sweep import PingSweeper
from reconlab.reconnaissance.subnet_scan import SubnetScanner
from reconlab.reconnaissance.tcp_connect_scan import PortScanner

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recon",
    tags=["reconnaissance"],
    dependencies=[Depends(verify_api_key)],
)


# --- Request models ---

class ScanOptions(BaseModel):
    workers: Optional[int] = Field(None, ge=1, le=1000)
    timeout: Optional[float] = Field(None, gt=0, le=60)


class SubnetScanRequest(ScanOptions):
    cidr: str


class PortScanRequest(ScanOptions):
    host: str
    ports: Optional[str] = Field(None, description="Port spec, e.g. '22,80,8000-8002'")


class DirScanRequest(ScanOptions):
    base_url: str
    wordlist: Optional[List[str]] = None


class SubdomainScanRequest(ScanOptions):
    domain: str
    wordlist: Optional[List[str]] = None


class ResolveRequest(BaseModel):
    hostname: str
    domain: Optional[str] = None


class PingRequest(BaseModel):
    host: str
    port: int = 80


class SweepRequest(ScanOptions):
    cidr: str


# --- Response models ---

class HostRecord(BaseModel):
    ip: str
    alive: bool
    port: Optional[int] = None
    rtt_ms: Optional[int] = None


class SubnetScanResponse(BaseModel):
    scanned: int
    alive: int
    hosts: List[HostRecord]
    execution_time: str


class PortRecord(BaseModel):
    port: int
    open: bool
    rtt_ms: Optional[int] = None


class PortScanResponse(BaseModel):
    host: str
    open_ports: int
    results: List[PortRecord]
    execution_time: str


class DirRecord(BaseModel):
    path: str
    status_code: int
    found: bool
    size: int


class DirScanResponse(BaseModel):
    base_url: str
    scanned: int
    found: List[DirRecord]
    execution_time: str


class DnsRecord(BaseModel):
    hostname: str
    ips: List[str]
    found: bool
    error: Optional[str] = None


class SubdomainScanResponse(BaseModel):
    domain: str
    scanned: int
    found: List[DnsRecord]
    execution_time: str


class PingRecord(BaseModel):
    host: str
    reachable: bool
    ip: Optional[str] = None
    rtt_ms: Optional[int] = None
    error: Optional[str] = None


class SweepResponse(BaseModel):
    network: str
    total_hosts: int
    alive_hosts: int
    hosts: List[PingRecord]
    execution_time: str


async def _run_blocking(func: Callable, *args) -> Any:
    """Runs a blocking scan in a worker thread and maps reconlab errors to HTTP errors."""
    try:
        return await asyncio.to_thread(func, *args)
    except InvalidSpecification as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResourceExhaustion as e:
        raise HTTPException(status_code=413, detail=str(e))
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred: {e}")


def _execution_time(report) -> str:
    return f"{report.summary.elapsed:.4f} seconds"


@router.get("/health")
async def recon_health():
    return {"status": "healthy", "module": "reconnaissance"}


@router.post("/subnet", response_model=SubnetScanResponse, summary="Discover live hosts in a CIDR block")
async def scan_subnet(request: SubnetScanRequest, settings: ScanSettings = Depends(get_settings)):
    scanner = SubnetScanner(settings, max_workers=request.workers, timeout=request.timeout)
    report = await _run_blocking(scanner.scan, request.cidr)
    return SubnetScanResponse(**SubnetScanner.as_payload(report), execution_time=_execution_time(report))


@router.post("/ports", response_model=PortScanResponse, summary="TCP connect scan of a host")
async def scan_ports(request: PortScanRequest, settings: ScanSettings = Depends(get_settings)):
    scanner = PortScanner(settings, max_workers=request.workers, timeout=request.timeout)
    report = await _run_blocking(scanner.scan, request.host, request.ports)
    results = sorted(PortScanner.as_payload(report), key=lambda record: record["port"])
    return PortScanResponse(
        host=request.host,
        open_ports=report.summary.positive_count,
        results=results,
        execution_time=_execution_time(report),
    )


@router.post("/dirs", response_model=DirScanResponse, summary="Discover paths on a web server")
async def scan_dirs(request: DirScanRequest, settings: ScanSettings = Depends(get_settings)):
    if request.wordlist is not None:
        settings = dataclasses.replace(settings, dir_wordlist=tuple(request.wordlist))
    scanner = DirectoryScanner(settings, max_workers=request.workers, timeout=request.timeout)
    report = await _run_blocking(scanner.scan, request.base_url)
    return DirScanResponse(
        base_url=request.base_url,
        scanned=report.summary.total,
        found=DirectoryScanner.as_payload(report),
        execution_time=_execution_time(report),
    )


@router.post("/subdomains", response_model=SubdomainScanResponse, summary="Brute force subdomains of a domain")
async def scan_subdomains(request: SubdomainScanRequest, settings: ScanSettings = Depends(get_settings)):
    if request.wordlist is not None:
        settings = dataclasses.replace(settings, subdomain_wordlist=tuple(request.wordlist))
    scanner = SubdomainScanner(settings, max_workers=request.workers, timeout=request.timeout)
    report = await _run_blocking(scanner.bruteforce, request.domain)
    return SubdomainScanResponse(
        domain=request.domain,
        scanned=report.summary.total,
        found=SubdomainScanner.as_payload(report),
        execution_time=_execution_time(report),
    )


@router.post("/resolve", response_model=DnsRecord, summary="Resolve a single hostname")
async def resolve_hostname(request: ResolveRequest, settings: ScanSettings = Depends(get_settings)):
    scanner = SubdomainScanner(settings)
    outcome = await _run_blocking(scanner.resolve, request.hostname, request.domain)
    return DnsRecord(**SubdomainScanner.record(outcome))


@router.post("/ping", response_model=PingRecord, summary="TCP ping a single host")
async def ping_host(request: PingRequest, settings: ScanSettings = Depends(get_settings)):
    sweeper = PingSweeper(settings)
    outcome = await _run_blocking(sweeper.ping, request.host, request.port)
    return PingRecord(**PingSweeper.record(outcome))


@router.post("/sweep", response_model=SweepResponse, summary="TCP ping sweep of a CIDR block")
async def sweep_network(request: SweepRequest, settings: ScanSettings = Depends(get_settings)):
    sweeper = PingSweeper(settings, max_workers=request.workers, timeout=request.timeout)
    report = await _run_blocking(sweeper.sweep, request.cidr)
    return SweepResponse(**PingSweeper.as_payload(report), execution_time=_execution_time(report))

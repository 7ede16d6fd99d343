# -*- coding: utf-8 -*-
"""
dir_scan.py: Web content discovery against a base URL.

Each wordlist entry is requested as base_url/entry. Redirects are not
followed; a 301/302 is itself evidence that the path exists.

MITRE ATT&CK Mapping:
- T1595.003: Active Scanning: Wordlist Scanning
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter

from reconlab.core.exceptions import InvalidSpecification
from reconlab.core.models import ScanReport
from reconlab.core.scheduler import run_scan
from reconlab.reconnaissance.base import ReconScanner
from reconlab.reconnaissance.enumeration import load_wordlist
from reconlab.reconnaissance.probes import http_probe

logger = logging.getLogger(__name__)


def validate_base_url(base_url: str) -> bool:
    parsed = urlparse(base_url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class DirectoryScanner(ReconScanner):
    """Probes wordlist paths on a web server and keeps the ones that exist."""

    default_workers_attr = "dir_workers"
    default_timeout_attr = "dir_timeout"

    def build_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=self.max_workers)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers["User-Agent"] = self.settings.user_agent
        return session

    def scan(self, base_url: str, wordlist_path: Optional[str] = None) -> ScanReport:
        """
        Requests every wordlist path under ``base_url``.

        A missing wordlist file falls back to the built-in path list.
        """
        if not validate_base_url(base_url):
            raise InvalidSpecification(f"Invalid base URL: {base_url!r}")
        paths = load_wordlist(wordlist_path, default=self.settings.dir_wordlist)
        if not paths:
            raise InvalidSpecification("Wordlist produced no paths to probe.")

        logger.info(f"Starting directory scan on {base_url}: {len(paths)} paths with {self.max_workers} workers.")
        with self.build_session() as session:
            def probe(path: str):
                return http_probe(base_url, path, self.timeout, session=session,
                                  user_agent=self.settings.user_agent)

            return run_scan(paths, probe, self.max_workers, target=base_url)

    @staticmethod
    def as_payload(report: ScanReport) -> List[Dict[str, Any]]:
        return [
            {
                "path": outcome.candidate,
                "status_code": outcome.details.get("status_code"),
                "found": True,
                "size": outcome.details.get("size"),
            }
            for outcome in report.summary.positives
        ]

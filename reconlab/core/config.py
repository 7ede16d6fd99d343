"""
Default settings for the reconnaissance tools.

Values can be overridden through RECONLAB_* environment variables, which are
also read from a local .env file.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

MAX_HOSTS = 1024
MAX_PORT = 65535
MAX_PORTS = 65535

DEFAULT_PORTS = (22, 80, 443, 3306, 3389, 8080)
DEFAULT_REACHABILITY_PORTS = (80, 443)
PING_FALLBACK_PORT = 80

# 2xx is always found; these indicate the resource exists behind a redirect or auth.
FOUND_STATUS_CODES = frozenset({301, 302, 401, 403, 407})

DEFAULT_DIR_WORDLIST = (
    "admin", "api", "backup", "config", "dashboard", "login",
    "phpmyadmin", "wp-admin", "wp-content", "wp-includes",
    ".env", ".git", ".htaccess", "robots.txt", "sitemap.xml",
    "api/v1", "api/v2", "swagger", "docs", "test", "dev",
)

DEFAULT_SUBDOMAIN_WORDLIST = (
    "www", "mail", "ftp", "admin", "blog", "shop", "api",
    "dev", "test", "staging", "demo", "portal", "remote",
    "vpn", "dns", "mx", "smtp", "pop", "imap", "ns1", "ns2",
    "git", "svn", "cvs", "webmail", "secure", "support",
    "docs", "wiki", "forum", "news", "mail2", "mx1", "mx2",
    "ldap", "db", "mysql", "postgres", "redis", "mongo",
    "jenkins", "gitlab", "github", "docker", "kubernetes",
    "grafana", "prometheus", "elastic", "kibana", "logstash",
    "nagios", "zabbix", "cacti", "backup", "archive",
)

USER_AGENT = "reconlab-dirscan/1.0"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid integer for {name}: {raw!r}. Using {default}.")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive value for {name}: {value}. Using {default}.")
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid number for {name}: {raw!r}. Using {default}.")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive value for {name}: {value}. Using {default}.")
        return default
    return value


@dataclass
class ScanSettings:
    """Worker counts, timeouts, candidate caps and built-in wordlists for one process."""
    max_hosts: int = MAX_HOSTS
    max_ports: int = MAX_PORTS

    subnet_workers: int = 100
    port_workers: int = 50
    dir_workers: int = 20
    dns_workers: int = 50
    sweep_workers: int = 50

    subnet_timeout: float = 2.0
    port_timeout: float = 2.0
    dir_timeout: float = 10.0
    dns_timeout: float = 5.0
    resolve_timeout: float = 10.0
    ping_timeout: float = 5.0
    sweep_timeout: float = 2.0

    default_ports: Tuple[int, ...] = DEFAULT_PORTS
    reachability_ports: Tuple[int, ...] = DEFAULT_REACHABILITY_PORTS
    dir_wordlist: Tuple[str, ...] = DEFAULT_DIR_WORDLIST
    subdomain_wordlist: Tuple[str, ...] = DEFAULT_SUBDOMAIN_WORDLIST
    user_agent: str = USER_AGENT
    api_key: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "ScanSettings":
        defaults = cls()
        return cls(
            max_hosts=_env_int("RECONLAB_MAX_HOSTS", defaults.max_hosts),
            max_ports=_env_int("RECONLAB_MAX_PORTS", defaults.max_ports),
            subnet_workers=_env_int("RECONLAB_SUBNET_WORKERS", defaults.subnet_workers),
            port_workers=_env_int("RECONLAB_PORT_WORKERS", defaults.port_workers),
            dir_workers=_env_int("RECONLAB_DIR_WORKERS", defaults.dir_workers),
            dns_workers=_env_int("RECONLAB_DNS_WORKERS", defaults.dns_workers),
            sweep_workers=_env_int("RECONLAB_SWEEP_WORKERS", defaults.sweep_workers),
            subnet_timeout=_env_float("RECONLAB_SUBNET_TIMEOUT", defaults.subnet_timeout),
            port_timeout=_env_float("RECONLAB_PORT_TIMEOUT", defaults.port_timeout),
            dir_timeout=_env_float("RECONLAB_DIR_TIMEOUT", defaults.dir_timeout),
            dns_timeout=_env_float("RECONLAB_DNS_TIMEOUT", defaults.dns_timeout),
            resolve_timeout=_env_float("RECONLAB_RESOLVE_TIMEOUT", defaults.resolve_timeout),
            ping_timeout=_env_float("RECONLAB_PING_TIMEOUT", defaults.ping_timeout),
            sweep_timeout=_env_float("RECONLAB_SWEEP_TIMEOUT", defaults.sweep_timeout),
            api_key=os.getenv("RECONLAB_API_KEY") or None,
        )

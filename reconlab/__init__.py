"""
reconlab: bounded-concurrency reconnaissance probes for host, port, web path
and subdomain discovery. For authorized security testing only.
"""

__version__ = "1.0.0"

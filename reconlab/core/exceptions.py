"""
Error types shared by the reconnaissance tools.
"""


class ReconError(Exception):
    """Base class for all reconlab errors."""


class InvalidSpecification(ReconError, ValueError):
    """Raised when a CIDR block, port spec or target cannot be parsed."""


class ResourceExhaustion(ReconError):
    """Raised when a scan would generate more candidates than allowed."""

    def __init__(self, count: int, limit: int, message: str = None):
        self.count = count
        self.limit = limit
        super().__init__(message or f"Too many candidates ({count}). Max {limit} allowed.")


class ProbeFailure(ReconError):
    """A single probe failed. Absorbed into a negative outcome by the scheduler."""

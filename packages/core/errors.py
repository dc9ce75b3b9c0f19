# error taxonomy shared by fetchers, poller and api
from typing import Optional


class UpstreamError(Exception):
    """Upstream answered with something we cannot use (status, body or shape)."""

    def __init__(self, source: str, reason: str, status: Optional[int] = None):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
        self.status = status


class EmptyUpstream(UpstreamError):
    """Upstream answered fine but had nothing in it."""


class InvalidMintError(ValueError):
    def __init__(self, mint: str):
        super().__init__(f"Invalid token mint address: {mint!r}")
        self.mint = mint


class AggregationError(Exception):
    """A full leaderboard refresh failed after every retry."""

    def __init__(self, attempts: int, cause: BaseException):
        super().__init__(f"refresh failed after {attempts} attempt(s): {cause}")
        self.attempts = attempts
        self.cause = cause

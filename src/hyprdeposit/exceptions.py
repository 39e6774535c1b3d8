"""Exceptions raised by bridge providers and wallet signers."""

from typing import Optional


class QuoteError(Exception):
    """Base class for quote failures."""


class NoRouteError(QuoteError):
    """No route exists for the requested pair and amount. Do not retry."""


class TransientQuoteError(QuoteError):
    """Quote failed for a temporary reason (network, timeout, rate limit)."""


class ExecutionError(Exception):
    """Raised when a route or transfer fails to execute."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class UserRejectedError(ExecutionError):
    """The wallet owner refused to sign."""

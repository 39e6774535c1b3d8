"""Web boundary layer for non-custodial planning.

Everything in this layer is read-only: it scans balances and quotes
routes, and never signs or broadcasts. Strategies are executed by the
client's own wallet.
"""

__all__ = [
    "contracts",
    "services",
    "controllers",
]

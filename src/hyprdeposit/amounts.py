"""Conversions between human token amounts and raw on-chain integers.

Every conversion rounds down: quoting more than the wallet holds makes
aggregator validation reject the route.
"""

from decimal import ROUND_DOWN, Decimal

from hyprdeposit.chains import is_stablecoin

# Non-stablecoin amounts are bridged with at most this many decimals
MAX_BRIDGE_PRECISION = 4


def from_raw_amount(raw_amount: int, decimals: int) -> Decimal:
    """Convert a raw integer amount to human units."""
    return Decimal(raw_amount) / (Decimal(10) ** decimals)


def to_raw_amount(amount: Decimal, decimals: int) -> int:
    """Convert a human amount to raw units, flooring any sub-unit remainder.

    The whole and fractional parts are scaled separately so the result
    never picks up rounding from a single large multiplication.
    """
    if amount <= 0:
        return 0

    whole = int(amount.to_integral_value(rounding=ROUND_DOWN))
    fraction = amount - whole
    scale = 10**decimals
    fraction_raw = int((fraction * scale).to_integral_value(rounding=ROUND_DOWN))
    return whole * scale + fraction_raw


def round_token_amount(amount: Decimal, decimals: int, symbol: str) -> int:
    """Round a token amount down to a bridgeable raw amount.

    Stablecoins round down to whole units (12.05 USDC -> 12 USDC).
    Other tokens keep at most four decimals of precision.

    Returns:
        Raw integer amount, 0 if nothing remains after rounding
    """
    if amount <= 0:
        return 0

    if is_stablecoin(symbol):
        whole_units = int(amount.to_integral_value(rounding=ROUND_DOWN))
        if whole_units <= 0:
            return 0
        return whole_units * 10**decimals

    effective_decimals = min(decimals, MAX_BRIDGE_PRECISION)
    quantum = Decimal(1).scaleb(-effective_decimals)
    rounded = amount.quantize(quantum, rounding=ROUND_DOWN)
    if rounded <= 0:
        return 0

    return to_raw_amount(rounded, decimals)


def floor_usd(amount: Decimal) -> Decimal:
    """Floor a USD amount to whole cents."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_DOWN)

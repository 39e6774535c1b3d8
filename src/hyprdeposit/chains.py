"""Chain registry: metadata, known stable assets and gas reserves.

Balances are only scanned for the native asset and a small fixed set of
stable assets per chain. Native assets keep a per-chain gas reserve out of
every allocation so the wallet can still pay for the bridge transaction.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

NATIVE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000000"

# Addresses aggregators use for the native asset
NATIVE_TOKEN_ADDRESSES = frozenset(
    {
        NATIVE_TOKEN_ADDRESS,
        "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee",
    }
)

# Gas tokens on their respective chains
NATIVE_TOKEN_SYMBOLS = frozenset(
    {
        "ETH",  # Ethereum, Optimism, Base, Arbitrum, Linea, Scroll, zkSync
        "MATIC",
        "POL",
        "BNB",
        "FTM",
        "AVAX",
        "MON",
        "HYPE",
        "CELO",
        "GLMR",
        "MOVR",
        "ONE",
        "KLAY",
        "CRO",
        "METIS",
        "BOBA",
    }
)

# Stablecoins are bridged in whole units only
STABLECOIN_SYMBOLS = (
    "USDC",
    "USDT",
    "DAI",
    "BUSD",
    "TUSD",
    "USDP",
    "GUSD",
    "FRAX",
    "LUSD",
    "SUSD",
    "UST",
    "MIM",
)

# Conservative gas reserves in native units
GAS_RESERVE_BY_CHAIN: dict[int, Decimal] = {
    1: Decimal("0.005"),  # Ethereum
    10: Decimal("0.001"),  # Optimism
    56: Decimal("0.0005"),  # BSC
    137: Decimal("3"),  # Polygon
    250: Decimal("1.5"),  # Fantom
    8453: Decimal("0.003"),  # Base
    42161: Decimal("0.001"),  # Arbitrum
    43114: Decimal("0.05"),  # Avalanche
    59144: Decimal("0.001"),  # Linea
    324: Decimal("0.001"),  # zkSync Era
    534352: Decimal("0.001"),  # Scroll
    999: Decimal("0.03"),  # HyperEVM
    143: Decimal("0.4"),  # Monad
}
DEFAULT_GAS_RESERVE = Decimal("0.6")


@dataclass(frozen=True)
class TokenInfo:
    """An asset that can be scanned on a chain."""

    address: str
    symbol: str
    decimals: int
    chain_id: int

    @property
    def is_native(self) -> bool:
        return is_native_token(self.address, self.symbol)


@dataclass(frozen=True)
class ChainInfo:
    """Configuration for a blockchain."""

    id: int
    name: str
    key: str
    native_symbol: str
    rpc_url: str
    native_decimals: int = 18
    native_address: str = NATIVE_TOKEN_ADDRESS
    explorer_url: Optional[str] = None

    @property
    def native_token(self) -> TokenInfo:
        return TokenInfo(
            address=self.native_address,
            symbol=self.native_symbol,
            decimals=self.native_decimals,
            chain_id=self.id,
        )


# ======================
# Chain Configurations
# ======================

SUPPORTED_CHAINS: dict[int, ChainInfo] = {
    1: ChainInfo(
        id=1,
        name="Ethereum",
        key="eth",
        native_symbol="ETH",
        rpc_url="https://eth.llamarpc.com",
        explorer_url="https://etherscan.io",
    ),
    10: ChainInfo(
        id=10,
        name="Optimism",
        key="opt",
        native_symbol="ETH",
        rpc_url="https://mainnet.optimism.io",
        explorer_url="https://optimistic.etherscan.io",
    ),
    56: ChainInfo(
        id=56,
        name="BNB Smart Chain",
        key="bsc",
        native_symbol="BNB",
        rpc_url="https://bsc-dataseed.binance.org/",
        explorer_url="https://bscscan.com",
    ),
    137: ChainInfo(
        id=137,
        name="Polygon",
        key="pol",
        native_symbol="POL",
        rpc_url="https://polygon-rpc.com/",
        explorer_url="https://polygonscan.com",
    ),
    8453: ChainInfo(
        id=8453,
        name="Base",
        key="bas",
        native_symbol="ETH",
        rpc_url="https://mainnet.base.org",
        explorer_url="https://basescan.org",
    ),
    42161: ChainInfo(
        id=42161,
        name="Arbitrum One",
        key="arb",
        native_symbol="ETH",
        rpc_url="https://arb1.arbitrum.io/rpc",
        explorer_url="https://arbiscan.io",
    ),
    43114: ChainInfo(
        id=43114,
        name="Avalanche C-Chain",
        key="ava",
        native_symbol="AVAX",
        rpc_url="https://api.avax.network/ext/bc/C/rpc",
        explorer_url="https://snowtrace.io",
    ),
    999: ChainInfo(
        id=999,
        name="HyperEVM",
        key="hyp",
        native_symbol="HYPE",
        rpc_url="https://rpc.hyperliquid.xyz/evm",
    ),
    143: ChainInfo(
        id=143,
        name="Monad",
        key="mon",
        native_symbol="MON",
        rpc_url="https://rpc.monad.xyz",
    ),
}

# Known stable assets per chain id
STABLECOIN_CONTRACTS: dict[int, list[TokenInfo]] = {
    1: [
        TokenInfo("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", 6, 1),
        TokenInfo("0xdAC17F958D2ee523a2206206994597C13D831ec7", "USDT", 6, 1),
    ],
    137: [
        TokenInfo("0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359", "USDC", 6, 137),
        TokenInfo("0xc2132D05D31c914a87C6611C10748AEb04B58e8F", "USDT", 6, 137),
    ],
    42161: [
        TokenInfo("0xaf88d065e77c8cC2239327C5EDb3A432268e5831", "USDC", 6, 42161),
        TokenInfo("0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9", "USDT", 6, 42161),
    ],
    8453: [
        TokenInfo("0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "USDC", 6, 8453),
    ],
    10: [
        TokenInfo("0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85", "USDC", 6, 10),
        TokenInfo("0x94b008aA00579c1307B0EF2c499aD98a8ce58e58", "USDT", 6, 10),
    ],
    43114: [
        TokenInfo("0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E", "USDC", 6, 43114),
        TokenInfo("0x9702230A8Ea53601f5cD2dc00fDBc13d4dF4A8c7", "USDT", 6, 43114),
    ],
    56: [
        TokenInfo("0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d", "USDC", 18, 56),
        TokenInfo("0x55d398326f99059fF775485246999027B3197955", "USDT", 18, 56),
    ],
    143: [
        TokenInfo("0x754704Bc059F8C67012fEd69BC8A327a5aafb603", "USDC", 6, 143),
    ],
    999: [
        TokenInfo("0x2Df1c51E09aECF9cacB7bc98cB1742757f163dF7", "USDC", 6, 999),
    ],
}


def get_chain(chain_id: int) -> Optional[ChainInfo]:
    """Look up a supported chain by id."""
    return SUPPORTED_CHAINS.get(chain_id)


def get_stablecoins(chain_id: int) -> list[TokenInfo]:
    """Known stable assets for a chain (empty for unknown chains)."""
    return list(STABLECOIN_CONTRACTS.get(chain_id, []))


def find_token(chain_id: int, address: str) -> Optional[TokenInfo]:
    """Resolve a native or known stable asset by address."""
    if address.lower() in NATIVE_TOKEN_ADDRESSES:
        chain = SUPPORTED_CHAINS.get(chain_id)
        return chain.native_token if chain else None

    for token in STABLECOIN_CONTRACTS.get(chain_id, []):
        if token.address.lower() == address.lower():
            return token
    return None


def is_known_stablecoin(chain_id: int, address: str) -> bool:
    """Check whether an address is in the stable-asset table."""
    return any(
        token.address.lower() == address.lower()
        for token in STABLECOIN_CONTRACTS.get(chain_id, [])
    )


def is_native_token(token_address: str, token_symbol: Optional[str] = None) -> bool:
    """Check if a token is a native gas token (by address or symbol)."""
    if token_address.lower() in NATIVE_TOKEN_ADDRESSES:
        return True

    if token_symbol:
        return token_symbol.upper() in NATIVE_TOKEN_SYMBOLS

    return False


def get_gas_reserve(chain_id: int) -> Decimal:
    """Get gas reserve amount for a chain (native units)."""
    return GAS_RESERVE_BY_CHAIN.get(chain_id, DEFAULT_GAS_RESERVE)


def is_stablecoin(token_symbol: str) -> bool:
    """Check if a token is a stablecoin based on its symbol.

    Matches the known list, any symbol containing a known stablecoin
    symbol, and USD-prefixed or USD-suffixed symbols (USDe, crvUSD, ...).
    """
    symbol = token_symbol.upper()
    if symbol.startswith("USD") or symbol.endswith("USD"):
        return True
    return any(stable in symbol for stable in STABLECOIN_SYMBOLS)

"""
Token universe and fee tiers for the scanned network
"""
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Token:
    """Token configuration"""
    symbol: str
    name: str
    address: str
    decimals: int

    @property
    def address_int(self) -> int:
        """Address as an unsigned integer, used for canonical pool ordering"""
        return int(self.address, 16)


# ==================== STABLECOINS ====================

USDC = Token(
    symbol="USDC",
    name="USD Coin",
    address="0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
    decimals=6,
)

USDT = Token(
    symbol="USDT",
    name="Tether USD",
    address="0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9",
    decimals=6,
)

DAI = Token(
    symbol="DAI",
    name="Dai Stablecoin",
    address="0xDA10009cBd5D07dd0CeCc66161FC93D7c9000da1",
    decimals=18,
)

# ==================== MAJORS ====================

WETH = Token(
    symbol="WETH",
    name="Wrapped Ether",
    address="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    decimals=18,
)

WBTC = Token(
    symbol="WBTC",
    name="Wrapped BTC",
    address="0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f",
    decimals=8,
)

# ==================== ARBITRUM / DEFI ====================

ARB = Token(
    symbol="ARB",
    name="Arbitrum",
    address="0x912CE59144191C1204E64559FE8253a0e49E6548",
    decimals=18,
)

UNI = Token(
    symbol="UNI",
    name="Uniswap",
    address="0xFa7F8980b0f1E64A2062791cc3b0871572f1F7f0",
    decimals=18,
)

ALL_TOKENS: list[Token] = [USDC, USDT, DAI, WETH, WBTC, ARB, UNI]

TOKENS: dict[str, Token] = {t.symbol: t for t in ALL_TOKENS}

# Uniswap V3 fee tiers scanned, in parts per million
FEE_TIERS: Final[list[int]] = [500, 3000]  # 0.05%, 0.3%

"""
Global settings for the Triad Arbitrage Scanner
"""
import os
from decimal import Decimal, InvalidOperation
from typing import Final

from dotenv import load_dotenv

from core.exceptions import ConfigurationError

# Load .env file
load_dotenv()


# Overrides that failed to parse; raised by check_env_overrides() at startup
INVALID_OVERRIDES: list[ConfigurationError] = []


def _invalid(name: str, message: str, cause: Exception):
    error = ConfigurationError(message, {"variable": name})
    error.__cause__ = cause
    INVALID_OVERRIDES.append(error)


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name)
    if raw is None:
        return Decimal(default)
    try:
        return Decimal(raw)
    except InvalidOperation as e:
        _invalid(name, f"{name} must be a decimal number, got {raw!r}", e)
        return Decimal(default)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        _invalid(name, f"{name} must be an integer, got {raw!r}", e)
        return default


def check_env_overrides():
    """Raise the first invalid environment override, if any"""
    if INVALID_OVERRIDES:
        raise INVALID_OVERRIDES[0]


# Redis set holding the serialized triad routes
REDIS_TRIADS_KEY: Final[str] = "arb_triads_v3"

# Pools with less active liquidity (native units) are ignored
MIN_LIQUIDITY: Final[int] = _env_int("MIN_LIQUIDITY", 10**18)

# Minimum round trip profit, in units of the start token
MIN_PROFIT_THRESHOLD: Final[Decimal] = _env_decimal("MIN_PROFIT_THRESHOLD", "0.001")

# Token every route starts and ends with
START_TOKEN_SYMBOL: Final[str] = os.getenv("START_TOKEN_SYMBOL", "WETH")

# Notional amount pushed through each route
TEST_AMOUNT: Final[Decimal] = _env_decimal("TEST_AMOUNT", "1")

# Tokens expected to trade near parity with each other
STABLE_TOKENS: Final[frozenset[str]] = frozenset({"USDC", "USDT", "DAI"})

# Accepted human price band for a pool between two stable tokens (inclusive)
STABLE_PRICE_BAND: Final[tuple[Decimal, Decimal]] = (Decimal("0.99"), Decimal("1.01"))

# Max calls packed into a single aggregate3 request
MULTICALL_BATCH_SIZE: Final[int] = 500

# Optional CSV export of accepted routes
REPORT_CSV_PATH: Final[str | None] = os.getenv("REPORT_CSV_PATH")

# Logging level
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


def get_rpc_url() -> str:
    """RPC endpoint of the scanned network"""
    url = os.getenv("RPC_URL_ARBITRUM")
    if not url:
        raise ConfigurationError("RPC_URL_ARBITRUM missing")
    return url


def get_redis_url() -> str:
    """Redis connection URL shared by scanner and monitor"""
    url = os.getenv("REDIS_URL")
    if not url:
        raise ConfigurationError("REDIS_URL missing")
    return url

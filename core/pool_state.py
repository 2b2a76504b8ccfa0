"""
Pool state fetching and price normalization
Turns slot0().sqrtPriceX96 into decimal prices and drops pools that
should not be trusted for this run.
"""
from decimal import Decimal, localcontext
from typing import Any, Mapping, Optional

from config.settings import MIN_LIQUIDITY, STABLE_PRICE_BAND, STABLE_TOKENS
from config.tokens import TOKENS, Token
from core.models import PoolConfig, PoolState, PriceData, TriadRoute
from core.network.multicall import Multicall
from core.precision import PRICE_CONTEXT, Q96, pow10
from exchanges.dex.uniswap_v3 import UniswapV3PoolReader
from utils.logger import get_logger

logger = get_logger(__name__)


def price_from_sqrt(sqrt_price_x96: int) -> Decimal:
    """Raw token1-per-token0 ratio in smallest units: (sqrtPriceX96 / 2^96)^2"""
    with localcontext(PRICE_CONTEXT):
        return (Decimal(sqrt_price_x96) / Q96) ** 2


def scale_price(raw_price: Decimal, decimals0: int, decimals1: int) -> Decimal:
    """Whole token1 per whole token0"""
    with localcontext(PRICE_CONTEXT):
        return raw_price * pow10(decimals0 - decimals1)


def collect_pools(routes: list[TriadRoute]) -> dict[str, PoolConfig]:
    """Distinct pools referenced by the routes, with the order stored on each leg"""
    pools: dict[str, PoolConfig] = {}
    for route in routes:
        for leg in route.legs:
            if leg.pool not in pools:
                pools[leg.pool] = PoolConfig(
                    address=leg.pool,
                    token0=leg.token0,
                    token1=leg.token1,
                    fee=leg.fee,
                )
    return pools


def parse_pool_states(
    addresses: list[str],
    results: list[Any],
) -> dict[str, Optional[PoolState]]:
    """
    Pair up (slot0, liquidity) results per pool.
    A pool with either result missing maps to None.
    """
    states: dict[str, Optional[PoolState]] = {}
    for i, address in enumerate(addresses):
        slot0 = results[2 * i] if 2 * i < len(results) else None
        liquidity = results[2 * i + 1] if 2 * i + 1 < len(results) else None

        if not slot0 or liquidity is None:
            states[address] = None
            continue

        states[address] = PoolState(
            address=address,
            sqrt_price_x96=int(slot0[0]),
            liquidity=int(liquidity),
        )
    return states


async def fetch_pool_states(
    multicall: Multicall,
    addresses: list[str],
    reader: Optional[UniswapV3PoolReader] = None,
) -> dict[str, Optional[PoolState]]:
    """slot0 and liquidity for every pool in one batched round trip"""
    reader = reader or UniswapV3PoolReader()
    results = await multicall.aggregate(reader.state_calls(addresses))
    return parse_pool_states(addresses, results)


def build_price_map(
    pools: Mapping[str, PoolConfig],
    states: Mapping[str, Optional[PoolState]],
    tokens: Mapping[str, Token] = TOKENS,
    min_liquidity: int = MIN_LIQUIDITY,
    stable_tokens: frozenset[str] = STABLE_TOKENS,
    stable_band: tuple[Decimal, Decimal] = STABLE_PRICE_BAND,
) -> dict[str, PriceData]:
    """
    Price data for every pool that passes the filters.

    Excluded, logged and skipped:
    - pools whose slot0 or liquidity call failed
    - pools holding a token missing from the configured universe
    - pools with an uninitialized (zero) price
    - pools below min_liquidity
    - stable/stable pools quoting outside the parity band
    """
    price_map: dict[str, PriceData] = {}
    low, high = stable_band

    for address, pool in pools.items():
        state = states.get(address)
        if state is None:
            logger.warning(f"⚠️ Skipping pool with failed state fetch: {address}")
            continue

        if pool.token0 not in tokens or pool.token1 not in tokens:
            logger.warning(f"⚠️ Skipping pool with unknown tokens: {address} ({pool.token0}/{pool.token1})")
            continue

        if state.sqrt_price_x96 <= 0:
            logger.warning(f"⚠️ Skipping uninitialized pool: {address}")
            continue

        if state.liquidity < min_liquidity:
            logger.info(f"⚠️ Skipping low-liquidity pool: {address} (liquidity: {state.liquidity})")
            continue

        raw_price = price_from_sqrt(state.sqrt_price_x96)
        human_price = scale_price(
            raw_price,
            tokens[pool.token0].decimals,
            tokens[pool.token1].decimals,
        )

        if pool.token0 in stable_tokens and pool.token1 in stable_tokens:
            if human_price < low or human_price > high:
                logger.info(
                    f"⚠️ Skipping stable pool with abnormal price: {address} "
                    f"(price: {human_price:.6f}, liquidity: {state.liquidity})"
                )
                continue

        price_map[address] = PriceData(
            price_t1_per_t0=raw_price,
            human_price=human_price,
            token0_symbol=pool.token0,
            token1_symbol=pool.token1,
            liquidity=state.liquidity,
        )

    return price_map

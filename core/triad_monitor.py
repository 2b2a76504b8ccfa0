"""
Triad Arbitrage Monitor
Loads the stored triads, prices every pool they touch and reports the
routes that close with a profit.
"""
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from config.settings import MIN_LIQUIDITY, STABLE_PRICE_BAND, STABLE_TOKENS
from config.tokens import TOKENS, Token
from core.exceptions import EmptyRouteSetError
from core.models import PoolConfig, PriceData
from core.network.multicall import Multicall
from core.pool_state import build_price_map, collect_pools, fetch_pool_states
from core.strategies.triangular import TriadOpportunity, TriangularStrategy
from storage.route_store import RouteStore
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MonitorResult:
    opportunities: list[TriadOpportunity]
    routes_checked: int
    pools_fetched: int
    pools_priced: int
    fetch_ms: float


class TriadMonitor:
    """
    One evaluation pass over the stored route set
    """

    def __init__(
        self,
        multicall: Multicall,
        store: RouteStore,
        strategy: Optional[TriangularStrategy] = None,
        tokens: Mapping[str, Token] = TOKENS,
        min_liquidity: int = MIN_LIQUIDITY,
    ):
        self.multicall = multicall
        self.store = store
        self.tokens = tokens
        self.strategy = strategy or TriangularStrategy(tokens=tokens)
        self.min_liquidity = min_liquidity

    async def fetch_prices(self, pools: dict[str, PoolConfig]) -> tuple[dict[str, PriceData], float]:
        pool_addresses = list(pools)
        logger.info(f"📡 Fetching prices and liquidity for {len(pool_addresses)} unique pools...")
        start = time.time()
        states = await fetch_pool_states(self.multicall, pool_addresses)
        fetch_ms = (time.time() - start) * 1000
        logger.info(f"⚡ Fetched prices in {fetch_ms:.0f}ms")

        price_map = build_price_map(
            pools,
            states,
            tokens=self.tokens,
            min_liquidity=self.min_liquidity,
            stable_tokens=STABLE_TOKENS,
            stable_band=STABLE_PRICE_BAND,
        )
        return price_map, fetch_ms

    async def run(self) -> MonitorResult:
        logger.info("[bold cyan]--- 💰 STARTING TRIAD ARBITRAGE MONITOR ---[/bold cyan]")

        routes = await self.store.load_routes()
        if not routes:
            raise EmptyRouteSetError(self.store.key)

        pools = collect_pools(routes)
        price_map, fetch_ms = await self.fetch_prices(pools)
        logger.info(f"{len(price_map)} of {len(pools)} pools passed liquidity and sanity checks")

        opportunities = self.strategy.find_opportunities(routes, price_map)

        return MonitorResult(
            opportunities=opportunities,
            routes_checked=len(routes),
            pools_fetched=len(pools),
            pools_priced=len(price_map),
            fetch_ms=fetch_ms,
        )

"""
Triad Scanner
Discovers Uniswap V3 pools for every token pair and fee tier, then
enumerates every closed route A -> B -> C -> A the pools allow.
"""
import time
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import combinations, permutations, product
from typing import Any, Mapping, Optional

from config.chains import ACTIVE_CHAIN
from config.tokens import FEE_TIERS, TOKENS, Token
from core.models import PoolConfig, RouteLeg, TriadRoute, ZERO_ADDRESS, canonical_order, pair_key
from core.network.multicall import Multicall
from exchanges.dex.uniswap_v3 import UniswapV3Factory
from storage.route_store import RouteStore
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PoolQuery:
    """One getPool(tokenA, tokenB, fee) question asked to the factory"""
    token_a: str
    token_b: str
    fee: int


@dataclass
class PoolIndex:
    """Pools found by one scan, indexed by pair key"""
    pools_by_pair: dict[str, list[PoolConfig]] = field(default_factory=dict)

    def add(self, pool: PoolConfig):
        pools = self.pools_by_pair.setdefault(pool.key, [])
        if all(p.address != pool.address for p in pools):
            pools.append(pool)

    def get(self, token_a: str, token_b: str) -> list[PoolConfig]:
        return self.pools_by_pair.get(pair_key(token_a, token_b), [])

    @property
    def pool_count(self) -> int:
        return sum(len(pools) for pools in self.pools_by_pair.values())


@dataclass
class ScanResult:
    pool_index: PoolIndex
    routes: list[TriadRoute]
    queries: int
    stored: int
    duration_s: float


def build_pool_queries(symbols: list[str], fee_tiers: list[int]) -> list[PoolQuery]:
    """Every unordered pair of distinct tokens, once per fee tier"""
    return [
        PoolQuery(token_a, token_b, fee)
        for token_a, token_b in combinations(symbols, 2)
        for fee in fee_tiers
    ]


def index_pools(
    queries: list[PoolQuery],
    results: list[Any],
    tokens: Mapping[str, Token],
) -> PoolIndex:
    """
    Turn getPool answers into a PoolIndex.
    Failed calls (None) and the zero address sentinel mean "no pool".
    """
    index = PoolIndex()
    for query, address in zip(queries, results):
        if not address or str(address).lower() == ZERO_ADDRESS:
            continue

        token0, token1 = canonical_order(query.token_a, query.token_b, tokens)
        index.add(PoolConfig(
            address=str(address),
            token0=token0,
            token1=token1,
            fee=query.fee,
        ))
    return index


def generate_triads(symbols: list[str], pool_index: PoolIndex) -> list[TriadRoute]:
    """
    Every combination of one pool per edge for each ordered token triple.
    A -> B -> C and A -> C -> B are different swap sequences and both kept.
    """
    triads: list[TriadRoute] = []

    for token_a, token_b, token_c in permutations(symbols, 3):
        pools_ab = pool_index.get(token_a, token_b)
        pools_bc = pool_index.get(token_b, token_c)
        pools_ca = pool_index.get(token_c, token_a)

        if not (pools_ab and pools_bc and pools_ca):
            continue

        for pool_ab, pool_bc, pool_ca in product(pools_ab, pools_bc, pools_ca):
            triads.append(TriadRoute(legs=(
                RouteLeg.through(pool_ab, token_a, token_b),
                RouteLeg.through(pool_bc, token_b, token_c),
                RouteLeg.through(pool_ca, token_c, token_a),
            )))

    return triads


async def discover_pools(
    multicall: Multicall,
    tokens: Mapping[str, Token] = TOKENS,
    fee_tiers: list[int] = FEE_TIERS,
    factory: Optional[UniswapV3Factory] = None,
) -> tuple[PoolIndex, int]:
    """Ask the factory about every pair and fee tier in one batched round trip"""
    factory = factory or UniswapV3Factory(ACTIVE_CHAIN.uniswap_v3_factory)
    queries = build_pool_queries(list(tokens), fee_tiers)

    calls = [
        factory.get_pool_call(tokens[q.token_a].address, tokens[q.token_b].address, q.fee)
        for q in queries
    ]

    logger.info(f"📡 Checking {len(calls)} potential pairs via Multicall...")
    results = await multicall.aggregate(calls)

    index = index_pools(queries, results, tokens)
    logger.info(f"✅ Found {index.pool_count} active unique pools.")

    pools_per_pair: dict[int, int] = defaultdict(int)
    for pools in index.pools_by_pair.values():
        pools_per_pair[len(pools)] += 1
    for count, pairs in sorted(pools_per_pair.items()):
        logger.debug(f"{pairs} pairs with {count} pool(s)")

    return index, len(queries)


async def run_scan(
    multicall: Multicall,
    store: RouteStore,
    tokens: Mapping[str, Token] = TOKENS,
    fee_tiers: list[int] = FEE_TIERS,
    factory: Optional[UniswapV3Factory] = None,
) -> ScanResult:
    """Discover pools, build every triad and replace the stored route set"""
    logger.info("[bold cyan]--- 🔎 STARTING TRIAD SCANNER ---[/bold cyan]")
    start = time.time()

    pool_index, queries = await discover_pools(multicall, tokens, fee_tiers, factory)

    logger.info("🧭 Searching for Triads (A -> B -> C -> A)...")
    routes = generate_triads(list(tokens), pool_index)
    logger.info(f"🎉 Found {len(routes)} total unique triad routes.")

    stored = await store.replace_routes(routes)

    return ScanResult(
        pool_index=pool_index,
        routes=routes,
        queries=queries,
        stored=stored,
        duration_s=time.time() - start,
    )

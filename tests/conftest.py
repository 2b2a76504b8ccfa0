"""
Shared fixtures and builders for the scanner tests
"""
from decimal import Decimal, localcontext

import pytest

from config.tokens import TOKENS
from core.models import PriceData, RouteLeg, TriadRoute, canonical_order
from core.precision import PRICE_CONTEXT, pow10

POOL_A = "0x1111111111111111111111111111111111111111"
POOL_B = "0x2222222222222222222222222222222222222222"
POOL_C = "0x3333333333333333333333333333333333333333"
POOL_D = "0x4444444444444444444444444444444444444444"
POOL_E = "0x5555555555555555555555555555555555555555"


def make_leg(pool: str, token_in: str, token_out: str, fee: int = 3000) -> RouteLeg:
    token0, token1 = canonical_order(token_in, token_out, TOKENS)
    return RouteLeg(pool=pool, token_in=token_in, token_out=token_out, fee=fee, token0=token0, token1=token1)


def make_route(*legs: RouteLeg) -> TriadRoute:
    return TriadRoute(legs=tuple(legs))


def raw_from_human(human: Decimal, token0: str, token1: str) -> Decimal:
    """Smallest-unit ratio for a whole-unit token1-per-token0 price"""
    with localcontext(PRICE_CONTEXT):
        return Decimal(human) * pow10(TOKENS[token1].decimals - TOKENS[token0].decimals)


def sqrt_price_for(human: Decimal, token0: str, token1: str) -> int:
    """sqrtPriceX96 a pool would report for a whole-unit price"""
    with localcontext(PRICE_CONTEXT):
        return int(raw_from_human(human, token0, token1).sqrt() * Decimal(2**96))


def price_data(pool_tokens: tuple[str, str], human: Decimal) -> PriceData:
    token0, token1 = pool_tokens
    return PriceData(
        price_t1_per_t0=raw_from_human(Decimal(human), token0, token1),
        human_price=Decimal(human),
        token0_symbol=token0,
        token1_symbol=token1,
    )


@pytest.fixture
def tokens():
    return TOKENS

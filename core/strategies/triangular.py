"""
Triangular Arbitrage Strategy
Chains fee-adjusted pool rates along each triad A -> B -> C -> A and keeps
the routes that return more of the start token than they consumed.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, localcontext
from enum import Enum
from typing import Mapping, Optional

from config.settings import MIN_PROFIT_THRESHOLD, START_TOKEN_SYMBOL, TEST_AMOUNT
from config.tokens import TOKENS, Token
from core.models import PriceData, RouteLeg, TriadRoute
from core.precision import FEE_DENOMINATOR, ONE, PRICE_CONTEXT, pow10
from utils.logger import get_logger

logger = get_logger(__name__)


class RejectReason(Enum):
    NOT_BASE_TOKEN = "route does not start with the base token"
    MISSING_PRICE = "a pool has no usable price"
    TOKEN_MISMATCH = "leg input does not follow the previous output"
    UNRESOLVED_DIRECTION = "leg input is neither pool token"
    NOT_CLOSED = "route does not end with the base token"
    BELOW_THRESHOLD = "profit below threshold"


@dataclass
class TriadEvaluation:
    """Outcome of pushing the test amount through one route"""
    route: TriadRoute
    accepted: bool
    reason: Optional[RejectReason] = None
    final_amount: Optional[Decimal] = None
    profit: Optional[Decimal] = None


@dataclass
class TriadOpportunity:
    route: TriadRoute
    start_token: str
    start_amount: Decimal
    final_amount: Decimal
    profit: Decimal
    profit_pct: Decimal
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def description(self) -> str:
        return self.route.describe()

    @property
    def pool_labels(self) -> list[str]:
        return [pool[:8] + "..." for pool in self.route.pools]


def leg_rate(leg: RouteLeg, price: PriceData, tokens: Mapping[str, Token]) -> Optional[Decimal]:
    """
    Whole units of token_out received per whole unit of token_in, before fees.
    None when the leg does not swap one pool token for the other.
    """
    direction = (leg.token_in, leg.token_out)
    with localcontext(PRICE_CONTEXT):
        if direction == (price.token0_symbol, price.token1_symbol):
            raw_rate = price.price_t1_per_t0
        elif direction == (price.token1_symbol, price.token0_symbol):
            raw_rate = ONE / price.price_t1_per_t0
        else:
            return None

        return raw_rate * pow10(tokens[leg.token_in].decimals - tokens[leg.token_out].decimals)


class TriangularStrategy:
    """
    Evaluates triad routes against one run's price map
    """

    def __init__(
        self,
        tokens: Mapping[str, Token] = TOKENS,
        base_token: str = START_TOKEN_SYMBOL,
        test_amount: Decimal = TEST_AMOUNT,
        min_profit: Decimal = MIN_PROFIT_THRESHOLD,
    ):
        self.tokens = tokens
        self.base_token = base_token
        self.test_amount = Decimal(test_amount)
        self.min_profit = Decimal(min_profit)

    def _reject(self, route: TriadRoute, reason: RejectReason, **kwargs) -> TriadEvaluation:
        logger.debug(f"Rejected {route.describe()}: {reason.value}")
        return TriadEvaluation(route=route, accepted=False, reason=reason, **kwargs)

    def evaluate(self, route: TriadRoute, price_map: Mapping[str, PriceData]) -> TriadEvaluation:
        if route.start_token != self.base_token:
            return self._reject(route, RejectReason.NOT_BASE_TOKEN)
        if any(leg.pool not in price_map for leg in route.legs):
            return self._reject(route, RejectReason.MISSING_PRICE)

        amount = self.test_amount
        current_token = self.base_token

        with localcontext(PRICE_CONTEXT):
            for leg in route.legs:
                if leg.token_in != current_token:
                    return self._reject(route, RejectReason.TOKEN_MISMATCH)

                rate = leg_rate(leg, price_map[leg.pool], self.tokens)
                if rate is None:
                    return self._reject(route, RejectReason.UNRESOLVED_DIRECTION)

                amount = amount * rate * (ONE - Decimal(leg.fee) / FEE_DENOMINATOR)
                current_token = leg.token_out

            if current_token != self.base_token:
                return self._reject(route, RejectReason.NOT_CLOSED)

            profit = amount - self.test_amount

        if not profit > self.min_profit:
            return self._reject(
                route, RejectReason.BELOW_THRESHOLD, final_amount=amount, profit=profit
            )

        return TriadEvaluation(route=route, accepted=True, final_amount=amount, profit=profit)

    def to_opportunity(self, evaluation: TriadEvaluation) -> TriadOpportunity:
        with localcontext(PRICE_CONTEXT):
            profit_pct = evaluation.profit / self.test_amount * 100
        return TriadOpportunity(
            route=evaluation.route,
            start_token=self.base_token,
            start_amount=self.test_amount,
            final_amount=evaluation.final_amount,
            profit=evaluation.profit,
            profit_pct=profit_pct,
        )

    def find_opportunities(
        self,
        routes: list[TriadRoute],
        price_map: Mapping[str, PriceData],
    ) -> list[TriadOpportunity]:
        """Profitable routes, best first"""
        results = []
        for route in routes:
            evaluation = self.evaluate(route, price_map)
            if evaluation.accepted:
                results.append(self.to_opportunity(evaluation))

        results.sort(key=lambda opp: opp.profit, reverse=True)
        return results

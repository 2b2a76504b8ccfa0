"""
Pools, route legs and triad routes shared by the scanner and the monitor
"""
import json
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Mapping

from config.tokens import Token
from core.exceptions import InvalidPairError, RouteSchemaError

ROUTE_SCHEMA_VERSION = 1

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_LEG_FIELDS: dict[str, type] = {
    "pool": str,
    "token_in": str,
    "token_out": str,
    "fee": int,
    "token0": str,
    "token1": str,
}


def pair_key(token_a: str, token_b: str) -> str:
    """Order independent key for an unordered token pair: A/B == B/A"""
    return f"{token_a}/{token_b}" if token_a < token_b else f"{token_b}/{token_a}"


def canonical_order(token_a: str, token_b: str, tokens: Mapping[str, Token]) -> tuple[str, str]:
    """
    (token0, token1) of a pool holding both tokens.

    Uniswap sorts pool tokens by address, so the lower address as an unsigned
    integer is token0 whatever order the pair was queried in.
    """
    if token_a == token_b:
        raise InvalidPairError(f"Pair needs two distinct tokens, got {token_a} twice")
    if tokens[token_a].address_int < tokens[token_b].address_int:
        return token_a, token_b
    return token_b, token_a


@dataclass(frozen=True)
class PoolConfig:
    """A discovered pool with its canonical token order"""
    address: str
    token0: str
    token1: str
    fee: int

    @property
    def key(self) -> str:
        return pair_key(self.token0, self.token1)


@dataclass(frozen=True)
class RouteLeg:
    """One hop of a triad, carrying the pool's token0/token1"""
    pool: str
    token_in: str
    token_out: str
    fee: int
    token0: str
    token1: str

    @classmethod
    def through(cls, pool: PoolConfig, token_in: str, token_out: str) -> "RouteLeg":
        return cls(
            pool=pool.address,
            token_in=token_in,
            token_out=token_out,
            fee=pool.fee,
            token0=pool.token0,
            token1=pool.token1,
        )

    @property
    def fee_percent(self) -> Decimal:
        return Decimal(self.fee) / Decimal(10_000)

    def describe(self) -> str:
        return f"{self.token_in} -> {self.token_out} ({self.fee_percent.normalize():f}%)"

    @classmethod
    def from_dict(cls, data: Any) -> "RouteLeg":
        if not isinstance(data, dict):
            raise RouteSchemaError(f"Route leg must be an object, got {type(data).__name__}")

        missing = [name for name in _LEG_FIELDS if name not in data]
        if missing:
            raise RouteSchemaError(f"Route leg is missing fields: {', '.join(missing)}")

        for name, expected in _LEG_FIELDS.items():
            value = data[name]
            # bool is an int subclass, reject it explicitly for the fee
            if not isinstance(value, expected) or isinstance(value, bool):
                raise RouteSchemaError(f"Route leg field {name!r} must be {expected.__name__}")

        leg = cls(**{name: data[name] for name in _LEG_FIELDS})

        if leg.fee < 0 or leg.fee >= 1_000_000:
            raise RouteSchemaError(f"Fee {leg.fee} out of range")
        if leg.token0 == leg.token1:
            raise RouteSchemaError(f"Pool {leg.pool} lists {leg.token0} as both tokens")
        if leg.token_in == leg.token_out:
            raise RouteSchemaError(f"Leg through {leg.pool} swaps {leg.token_in} for itself")
        if {leg.token_in, leg.token_out} != {leg.token0, leg.token1}:
            raise RouteSchemaError(
                f"Leg {leg.token_in}->{leg.token_out} does not match pool tokens "
                f"{leg.token0}/{leg.token1}"
            )
        return leg


@dataclass(frozen=True)
class TriadRoute:
    """Closed three hop walk A -> B -> C -> A"""
    legs: tuple[RouteLeg, RouteLeg, RouteLeg]

    def __post_init__(self):
        if len(self.legs) != 3:
            raise RouteSchemaError(f"A triad needs exactly 3 legs, got {len(self.legs)}")

        for leg, next_leg in zip(self.legs, self.legs[1:] + self.legs[:1]):
            if leg.token_out != next_leg.token_in:
                raise RouteSchemaError(
                    f"Broken route: {leg.token_out} is followed by {next_leg.token_in}"
                )

        if len(set(self.tokens)) != 3:
            raise RouteSchemaError(f"Triad tokens must be distinct: {self.tokens}")

    @property
    def start_token(self) -> str:
        return self.legs[0].token_in

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(leg.token_in for leg in self.legs)

    @property
    def pools(self) -> tuple[str, ...]:
        return tuple(leg.pool for leg in self.legs)

    def describe(self) -> str:
        return " -> ".join(leg.describe() for leg in self.legs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": ROUTE_SCHEMA_VERSION,
            "route": [asdict(leg) for leg in self.legs],
        }

    def to_json(self) -> str:
        # Sorted keys keep identical routes identical inside a Redis set
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Any) -> "TriadRoute":
        if not isinstance(data, dict):
            raise RouteSchemaError(f"Route record must be an object, got {type(data).__name__}")

        version = data.get("version")
        if version != ROUTE_SCHEMA_VERSION:
            raise RouteSchemaError(f"Unsupported route schema version: {version!r}")

        legs = data.get("route")
        if not isinstance(legs, list) or len(legs) != 3:
            raise RouteSchemaError("Route record must hold a list of exactly 3 legs")

        return cls(legs=tuple(RouteLeg.from_dict(leg) for leg in legs))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "TriadRoute":
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RouteSchemaError(f"Route record is not valid JSON: {e}") from e
        return cls.from_dict(data)


@dataclass(frozen=True)
class PoolState:
    """Current on-chain state of a pool"""
    address: str
    sqrt_price_x96: int
    liquidity: int


@dataclass(frozen=True)
class PriceData:
    """Price of a pool for one monitor run"""
    price_t1_per_t0: Decimal  # raw, smallest units of token1 per smallest unit of token0
    human_price: Decimal  # whole token1 per whole token0
    token0_symbol: str
    token1_symbol: str
    liquidity: int = 0

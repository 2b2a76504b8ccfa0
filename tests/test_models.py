"""
Route model tests: pair keys, canonical order and the persisted schema
"""
import json
from itertools import permutations

import pytest

from config.tokens import TOKENS
from core.exceptions import InvalidPairError, RouteSchemaError
from core.models import ROUTE_SCHEMA_VERSION, RouteLeg, TriadRoute, canonical_order, pair_key

from conftest import POOL_A, POOL_B, POOL_C, make_leg, make_route


def weth_usdc_dai_route() -> TriadRoute:
    return make_route(
        make_leg(POOL_A, "WETH", "USDC", 500),
        make_leg(POOL_B, "USDC", "DAI", 100),
        make_leg(POOL_C, "DAI", "WETH", 3000),
    )


class TestPairKey:
    def test_order_independent(self):
        assert pair_key("WETH", "USDC") == pair_key("USDC", "WETH") == "USDC/WETH"

    def test_distinct_pairs_get_distinct_keys(self):
        keys = {pair_key(a, b) for a, b in permutations(TOKENS, 2)}
        n = len(TOKENS)
        assert len(keys) == n * (n - 1) // 2


class TestCanonicalOrder:
    def test_invariant_under_query_order(self):
        for a, b in permutations(TOKENS, 2):
            assert canonical_order(a, b, TOKENS) == canonical_order(b, a, TOKENS)

    def test_lower_address_is_token0(self):
        # 0x82aF... (WETH) < 0xaf88... (USDC) < 0xDA10... (DAI)
        assert canonical_order("USDC", "WETH", TOKENS) == ("WETH", "USDC")
        assert canonical_order("DAI", "USDC", TOKENS) == ("USDC", "DAI")

    def test_ordering_ignores_address_case(self):
        # Mixed-case checksums: "Fd08..." (USDT) sorts above "af88..." (USDC) numerically
        assert canonical_order("USDT", "USDC", TOKENS) == ("USDC", "USDT")

    def test_same_token_rejected(self):
        with pytest.raises(InvalidPairError):
            canonical_order("WETH", "WETH", TOKENS)


class TestTriadRoute:
    def test_properties(self):
        route = weth_usdc_dai_route()
        assert route.start_token == "WETH"
        assert route.tokens == ("WETH", "USDC", "DAI")
        assert route.pools == (POOL_A, POOL_B, POOL_C)

    def test_describe_shows_fee_percent(self):
        assert weth_usdc_dai_route().describe() == (
            "WETH -> USDC (0.05%) -> USDC -> DAI (0.01%) -> DAI -> WETH (0.3%)"
        )

    def test_broken_chain_rejected(self):
        with pytest.raises(RouteSchemaError):
            make_route(
                make_leg(POOL_A, "WETH", "USDC"),
                make_leg(POOL_B, "DAI", "USDT"),
                make_leg(POOL_C, "USDT", "WETH"),
            )

    def test_repeated_token_rejected(self):
        # Closes on itself but only visits two tokens
        self_swap = RouteLeg(
            pool=POOL_C, token_in="WETH", token_out="WETH", fee=3000, token0="WETH", token1="USDC"
        )
        with pytest.raises(RouteSchemaError, match="distinct"):
            make_route(
                make_leg(POOL_A, "WETH", "USDC"),
                make_leg(POOL_B, "USDC", "WETH"),
                self_swap,
            )

    def test_json_is_versioned_and_stable(self):
        route = weth_usdc_dai_route()
        data = json.loads(route.to_json())

        assert data["version"] == ROUTE_SCHEMA_VERSION
        assert len(data["route"]) == 3
        assert data["route"][0] == {
            "pool": POOL_A,
            "token_in": "WETH",
            "token_out": "USDC",
            "fee": 500,
            "token0": "WETH",
            "token1": "USDC",
        }
        assert TriadRoute.from_json(route.to_json()) == route
        assert route.to_json() == weth_usdc_dai_route().to_json()


class TestRouteSchemaValidation:
    def record(self) -> dict:
        return weth_usdc_dai_route().to_dict()

    def test_accepts_bytes(self):
        raw = weth_usdc_dai_route().to_json().encode()
        assert TriadRoute.from_json(raw).start_token == "WETH"

    def test_invalid_json(self):
        with pytest.raises(RouteSchemaError):
            TriadRoute.from_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(RouteSchemaError):
            TriadRoute.from_json("[1, 2, 3]")

    def test_unknown_version(self):
        data = self.record()
        data["version"] = 99
        with pytest.raises(RouteSchemaError, match="version"):
            TriadRoute.from_dict(data)

    def test_legacy_record_without_version(self):
        data = {"route": self.record()["route"]}
        with pytest.raises(RouteSchemaError):
            TriadRoute.from_dict(data)

    def test_wrong_leg_count(self):
        data = self.record()
        data["route"] = data["route"][:2]
        with pytest.raises(RouteSchemaError, match="3 legs"):
            TriadRoute.from_dict(data)

    def test_missing_field(self):
        data = self.record()
        del data["route"][1]["token0"]
        with pytest.raises(RouteSchemaError, match="token0"):
            TriadRoute.from_dict(data)

    def test_wrong_field_type(self):
        data = self.record()
        data["route"][0]["fee"] = "500"
        with pytest.raises(RouteSchemaError, match="fee"):
            TriadRoute.from_dict(data)

    def test_bool_fee_rejected(self):
        data = self.record()
        data["route"][0]["fee"] = True
        with pytest.raises(RouteSchemaError):
            TriadRoute.from_dict(data)

    def test_leg_tokens_must_match_pool(self):
        data = self.record()
        data["route"][0]["token1"] = "DAI"
        with pytest.raises(RouteSchemaError, match="pool tokens"):
            TriadRoute.from_dict(data)

    def test_fee_out_of_range(self):
        data = self.record()
        data["route"][2]["fee"] = 1_000_000
        with pytest.raises(RouteSchemaError):
            TriadRoute.from_dict(data)


def test_leg_through_copies_pool_order():
    from core.models import PoolConfig

    pool = PoolConfig(address=POOL_A, token0="WETH", token1="USDC", fee=500)
    leg = RouteLeg.through(pool, "USDC", "WETH")
    assert (leg.token0, leg.token1) == ("WETH", "USDC")
    assert leg.fee == 500

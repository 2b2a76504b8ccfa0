"""
Uniswap V3 factory and pool readers
Builds Multicall3 calls for pool discovery and pool state
"""
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from core.network.multicall import Call

GET_POOL_SIGNATURE = "getPool(address,address,uint24)"
SLOT0_SIGNATURE = "slot0()"
LIQUIDITY_SIGNATURE = "liquidity()"

GET_POOL_SELECTOR = function_signature_to_4byte_selector(GET_POOL_SIGNATURE)
SLOT0_SELECTOR = function_signature_to_4byte_selector(SLOT0_SIGNATURE)
LIQUIDITY_SELECTOR = function_signature_to_4byte_selector(LIQUIDITY_SIGNATURE)

# slot0() -> (sqrtPriceX96, tick, observationIndex, observationCardinality,
#             observationCardinalityNext, feeProtocol, unlocked)
SLOT0_OUTPUT_TYPES = ["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"]
LIQUIDITY_OUTPUT_TYPES = ["uint128"]


class UniswapV3Factory:
    """
    Uniswap V3 factory
    Answers whether a pool exists for (tokenA, tokenB, fee)
    """

    def __init__(self, address: str):
        self.address = address

    def get_pool_call(self, token_a: str, token_b: str, fee: int) -> Call:
        """Call data for getPool; the factory sorts the tokens itself"""
        args = encode(["address", "address", "uint24"], [token_a, token_b, fee])
        return Call(
            target=self.address,
            allow_failure=True,
            call_data=GET_POOL_SELECTOR + args,
            output_types=["address"],
        )


class UniswapV3PoolReader:
    """Reads current price and active liquidity of V3 pools"""

    @staticmethod
    def slot0_call(pool: str) -> Call:
        return Call(
            target=pool,
            allow_failure=True,
            call_data=SLOT0_SELECTOR,
            output_types=SLOT0_OUTPUT_TYPES,
        )

    @staticmethod
    def liquidity_call(pool: str) -> Call:
        return Call(
            target=pool,
            allow_failure=True,
            call_data=LIQUIDITY_SELECTOR,
            output_types=LIQUIDITY_OUTPUT_TYPES,
        )

    def state_calls(self, pools: list[str]) -> list[Call]:
        """Two calls per pool, slot0 then liquidity"""
        calls = []
        for pool in pools:
            calls.append(self.slot0_call(pool))
            calls.append(self.liquidity_call(pool))
        return calls

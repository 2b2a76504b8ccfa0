"""
Multicall3 batching tests
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_abi import encode

from core.network.multicall import Call, Multicall
from exchanges.dex.uniswap_v3 import (
    GET_POOL_SELECTOR,
    LIQUIDITY_SELECTOR,
    SLOT0_SELECTOR,
    UniswapV3Factory,
    UniswapV3PoolReader,
)

from conftest import POOL_A, POOL_B

FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
WETH = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
USDC = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"


def make_multicall(responder, batch_size=500):
    """Multicall whose aggregate3 answers through `responder(call_structs)`"""
    web3 = MagicMock()
    contract = web3.eth.contract.return_value
    contract.functions.aggregate3.side_effect = lambda structs: MagicMock(
        call=AsyncMock(return_value=responder(structs))
    )
    return Multicall(web3, batch_size=batch_size), contract


def uint_call(target: str) -> Call:
    return Call(target=target, allow_failure=True, call_data=LIQUIDITY_SELECTOR, output_types=["uint128"])


@pytest.mark.asyncio
async def test_decodes_results_and_marks_failures():
    multicall, _ = make_multicall(lambda structs: [
        (True, encode(["uint128"], [42])),
        (False, b""),
        (True, b""),
    ])

    results = await multicall.aggregate([uint_call(POOL_A), uint_call(POOL_B), uint_call(POOL_A)])

    assert results == [42, None, None]


@pytest.mark.asyncio
async def test_multi_value_results_stay_tuples():
    slot0 = (2**96, -5, 1, 2, 3, 0, True)
    multicall, _ = make_multicall(lambda structs: [
        (True, encode(UniswapV3PoolReader.slot0_call(POOL_A).output_types, list(slot0))),
    ])

    [result] = await multicall.aggregate([UniswapV3PoolReader.slot0_call(POOL_A)])

    assert tuple(result) == slot0


@pytest.mark.asyncio
async def test_undecodable_result_is_none():
    multicall, _ = make_multicall(lambda structs: [(True, b"\x01\x02")])
    assert await multicall.aggregate([uint_call(POOL_A)]) == [None]


@pytest.mark.asyncio
async def test_large_batches_are_chunked_in_order():
    def responder(structs):
        return [(True, encode(["uint128"], [len(structs)])) for _ in structs]

    multicall, contract = make_multicall(responder, batch_size=2)

    results = await multicall.aggregate([uint_call(POOL_A)] * 5)

    assert contract.functions.aggregate3.call_count == 3
    assert results == [2, 2, 2, 2, 1]


@pytest.mark.asyncio
async def test_empty_call_list_skips_rpc():
    multicall, contract = make_multicall(lambda structs: [])
    assert await multicall.aggregate([]) == []
    contract.functions.aggregate3.assert_not_called()


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    web3 = MagicMock()
    contract = web3.eth.contract.return_value
    contract.functions.aggregate3.return_value.call = AsyncMock(side_effect=ConnectionError("boom"))

    with pytest.raises(ConnectionError):
        await Multicall(web3).aggregate([uint_call(POOL_A)])


@pytest.mark.asyncio
async def test_failed_chunk_cancels_the_others():
    cancelled = []

    async def slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def fail():
        raise ConnectionError("boom")

    web3 = MagicMock()
    contract = web3.eth.contract.return_value
    # Chunks of 2 and 1: the full chunk fails, the short one hangs
    contract.functions.aggregate3.side_effect = lambda structs: MagicMock(
        call=AsyncMock(side_effect=fail if len(structs) == 2 else slow)
    )

    with pytest.raises(ConnectionError):
        await Multicall(web3, batch_size=2).aggregate([uint_call(POOL_A)] * 3)

    assert cancelled == [True]


def test_get_pool_call_encoding():
    call = UniswapV3Factory(FACTORY).get_pool_call(WETH, USDC, 500)

    assert call.target == FACTORY
    assert call.allow_failure
    assert call.output_types == ["address"]
    assert call.call_data[:4] == GET_POOL_SELECTOR == bytes.fromhex("1698ee82")
    assert call.call_data[4:] == encode(["address", "address", "uint24"], [WETH, USDC, 500])


def test_pool_state_calls():
    calls = UniswapV3PoolReader().state_calls([POOL_A, POOL_B])

    assert [c.call_data for c in calls] == [SLOT0_SELECTOR, LIQUIDITY_SELECTOR] * 2
    assert SLOT0_SELECTOR == bytes.fromhex("3850c7bd")
    assert LIQUIDITY_SELECTOR == bytes.fromhex("1a686502")

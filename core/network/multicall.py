"""
Multicall3 Implementation
Allows batching multiple smart contract read calls into a single RPC request.
Contract Address (All Chains): 0xcA11bde05977b3631167028862bE2a173976CA11
"""
import asyncio
from typing import NamedTuple, Any
from web3 import AsyncWeb3
from eth_abi import decode
from eth_abi.exceptions import DecodingError

from utils.logger import get_logger

logger = get_logger(__name__)

MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

MULTICALL3_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bool", "name": "allowFailure", "type": "bool"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Call3[]",
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "aggregate3",
        "outputs": [
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Result[]",
                "name": "returnData",
                "type": "tuple[]"
            }
        ],
        "stateMutability": "view",
        "type": "function"
    }
]


class Call(NamedTuple):
    target: str
    allow_failure: bool
    call_data: bytes
    output_types: list[str]  # e.g. ['uint256', 'uint256']


class Multicall:
    def __init__(
        self,
        web3: AsyncWeb3,
        address: str = MULTICALL3_ADDRESS,
        batch_size: int = 500,
    ):
        self.web3 = web3
        self.batch_size = batch_size
        self.contract = web3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address),
            abi=MULTICALL3_ABI
        )

    async def aggregate(self, calls: list[Call]) -> list[Any]:
        """
        Execute multiple calls batched through aggregate3.
        Returns a list of decoded results in call order. A call that failed
        on-chain or could not be decoded yields None instead of aborting the batch.
        Calls beyond batch_size are split into chunks sent concurrently.
        """
        if not calls:
            return []

        chunks = [
            calls[i:i + self.batch_size]
            for i in range(0, len(calls), self.batch_size)
        ]
        tasks = [asyncio.create_task(self._aggregate_chunk(chunk)) for chunk in chunks]
        try:
            chunk_results = await asyncio.gather(*tasks)
        except BaseException:
            # One failed chunk fails the pass; don't leave the others in flight
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [result for chunk in chunk_results for result in chunk]

    async def _aggregate_chunk(self, calls: list[Call]) -> list[Any]:
        call_structs = [
            (
                AsyncWeb3.to_checksum_address(call.target),
                call.allow_failure,
                call.call_data
            )
            for call in calls
        ]

        # Transport errors propagate: the whole pass is cheap to re-run
        results = await self.contract.functions.aggregate3(call_structs).call()

        decoded_results = []
        for call, (success, return_data) in zip(calls, results):
            if not success or not return_data:
                decoded_results.append(None)
                continue

            try:
                decoded = decode(call.output_types, return_data)
            except (DecodingError, ValueError) as e:
                logger.debug(f"Failed to decode result from {call.target}: {e}")
                decoded_results.append(None)
                continue

            # Unwrap single values
            if len(decoded) == 1:
                decoded_results.append(decoded[0])
            else:
                decoded_results.append(decoded)

        return decoded_results

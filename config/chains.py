"""
Chain configuration for the scanned network
"""
from dataclasses import dataclass
from enum import Enum
from typing import Final


class ChainId(Enum):
    """Blockchain chain IDs"""
    ARBITRUM = 42161


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a blockchain"""
    chain_id: ChainId
    name: str
    uniswap_v3_factory: str
    multicall3: str = "0xcA11bde05977b3631167028862bE2a173976CA11"


CHAINS: dict[ChainId, ChainConfig] = {
    ChainId.ARBITRUM: ChainConfig(
        chain_id=ChainId.ARBITRUM,
        name="Arbitrum One",
        uniswap_v3_factory="0x1F98431c8aD98523631AE4a59f267346ea31F984",
    ),
}

ACTIVE_CHAIN: Final[ChainConfig] = CHAINS[ChainId.ARBITRUM]

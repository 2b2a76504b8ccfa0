"""
Validation of the static configuration
Run directly to check the token universe and settings before a scan.
"""
from collections import Counter
from typing import Mapping

from eth_utils import is_checksum_address

from config.chains import ACTIVE_CHAIN
from config.settings import (
    START_TOKEN_SYMBOL,
    STABLE_PRICE_BAND,
    STABLE_TOKENS,
    TEST_AMOUNT,
    check_env_overrides,
)
from config.tokens import ALL_TOKENS, FEE_TIERS, TOKENS, Token
from core.exceptions import ConfigurationError


def validate_tokens(tokens: list[Token] = ALL_TOKENS):
    symbols = [t.symbol for t in tokens]
    dupes = [item for item, count in Counter(symbols).items() if count > 1]
    if dupes:
        raise ConfigurationError(f"Duplicate token symbols: {dupes}")

    addresses = Counter(t.address.lower() for t in tokens)
    if any(count > 1 for count in addresses.values()):
        raise ConfigurationError("Two tokens share an address")

    for token in tokens:
        if not is_checksum_address(token.address):
            raise ConfigurationError(f"Invalid address for {token.symbol}: {token.address}")
        if not isinstance(token.decimals, int) or not 0 <= token.decimals <= 36:
            raise ConfigurationError(f"Invalid decimals for {token.symbol}: {token.decimals}")


def validate_settings(tokens: Mapping[str, Token] = TOKENS):
    """Raise ConfigurationError on any inconsistent setting"""
    check_env_overrides()
    validate_tokens(list(tokens.values()))

    if START_TOKEN_SYMBOL not in tokens:
        raise ConfigurationError(f"Start token {START_TOKEN_SYMBOL} is not in the token universe")

    unknown_stables = STABLE_TOKENS - set(tokens)
    if unknown_stables:
        raise ConfigurationError(f"Unknown stable tokens: {sorted(unknown_stables)}")

    low, high = STABLE_PRICE_BAND
    if not low < high:
        raise ConfigurationError(f"Invalid stable price band: {STABLE_PRICE_BAND}")

    if TEST_AMOUNT <= 0:
        raise ConfigurationError(f"TEST_AMOUNT must be positive, got {TEST_AMOUNT}")

    if not FEE_TIERS or any(not 0 < fee < 1_000_000 for fee in FEE_TIERS):
        raise ConfigurationError(f"Invalid fee tiers: {FEE_TIERS}")

    if not is_checksum_address(ACTIVE_CHAIN.uniswap_v3_factory):
        raise ConfigurationError(f"Invalid factory address: {ACTIVE_CHAIN.uniswap_v3_factory}")


if __name__ == "__main__":
    try:
        validate_settings()
        print(f"✓ {len(TOKENS)} tokens, {len(FEE_TIERS)} fee tiers on {ACTIVE_CHAIN.name}")
        print("\n✨ Configuration Validated Successfully")
    except ConfigurationError as e:
        print(f"\n❌ Validation Failed: {e}")
        raise SystemExit(1)

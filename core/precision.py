"""
Decimal context shared by price derivation and route chaining.

sqrtPriceX96 values are up to 160 bits wide; squaring them loses everything
past ~16 digits in float, so every price computation runs in this context.
"""
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_EVEN,
)

PRICE_PRECISION = 80

PRICE_CONTEXT = Context(
    prec=PRICE_PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emin=-999_999,
    Emax=999_999,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

Q96 = Decimal(2**96)

ONE = Decimal(1)

FEE_DENOMINATOR = Decimal(1_000_000)


def pow10(exponent: int) -> Decimal:
    """Exact power of ten, negative exponents included"""
    return Decimal(1).scaleb(exponent, PRICE_CONTEXT)

from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_EVEN

DECIMAL_PLACES = 4
ZERO = Decimal("0")

# Amounts stay below 10^14 so that a balance built from at most 2^32 of them
# (one per tx id) fits the default 28-digit context with 4 decimal places.
MAX_AMOUNT = Decimal(10) ** 14

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)


class InvalidAmountError(ValueError):
    """Raised when an amount field cannot be used as a transaction amount."""


def parse_amount(text: str) -> Decimal:
    """
    Parse an amount field into an exact Decimal with 4 decimal places.

    Digits beyond the 4th decimal place are truncated. Empty, non-numeric,
    non-finite, negative and too large values raise InvalidAmountError.
    """
    text = text.strip()
    if not text:
        raise InvalidAmountError("amount is empty")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(f"amount {text!r} is not a decimal number") from None

    if not amount.is_finite():
        raise InvalidAmountError(f"amount {text!r} is not finite")
    if amount < 0:
        raise InvalidAmountError(f"amount {text!r} is negative")
    if amount >= MAX_AMOUNT:
        raise InvalidAmountError(f"amount {text!r} is too large")

    try:
        return amount.quantize(_QUANTUM, rounding=ROUND_DOWN)
    except InvalidOperation:
        raise InvalidAmountError(f"amount {text!r} can't be represented exactly") from None


def format_amount(value: Decimal) -> str:
    """Format amount with exactly 4 decimal places, never in exponent form."""
    return f"{value.quantize(_QUANTUM, rounding=ROUND_HALF_EVEN):f}"

"""Exact conversion between human-readable token amounts and base units."""

from decimal import Decimal, InvalidOperation

from eth_utils import from_wei, to_wei

TOKEN_DECIMALS = 18

# Named denominations understood by eth_utils, keyed by decimal places.
_UNIT_NAMES = {
    0: "wei",
    3: "kwei",
    6: "mwei",
    9: "gwei",
    12: "szabo",
    15: "finney",
    18: "ether",
}


def parse_units(value: str, decimals: int = TOKEN_DECIMALS) -> int:
    """Parse a decimal string such as ``"10.5"`` into integer base units."""

    unit = _unit_name(decimals)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a decimal amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    if amount < 0:
        raise ValueError("Amounts must be non-negative.")
    if _fraction_digits(amount) > decimals:
        raise ValueError(f"{value} has more than {decimals} fractional digits.")
    return to_wei(amount, unit)


def format_units(value: int, decimals: int = TOKEN_DECIMALS) -> str:
    unit = _unit_name(decimals)
    sign = "-" if value < 0 else ""
    text = format(Decimal(from_wei(abs(value), unit)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{sign}{text}"


def _unit_name(decimals: int) -> str:
    try:
        return _UNIT_NAMES[decimals]
    except KeyError:
        raise ValueError(f"Unsupported decimals: {decimals}") from None


def _fraction_digits(amount: Decimal) -> int:
    # Read from the digit tuple; no context rounding is involved.
    _, digits, exponent = amount.as_tuple()
    if exponent >= 0 or not any(digits):
        return 0
    significant = "".join(str(digit) for digit in digits).rstrip("0")
    trailing_zeros = len(digits) - len(significant)
    return max(0, -exponent - trailing_zeros)

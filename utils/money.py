from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value) -> Decimal:
    if value is None:
        raise ValueError("missing money value")

    if isinstance(value, Decimal):
        return quantize(value)
    if isinstance(value, (int, float)):
        return quantize(Decimal(str(value)))

    normalized = str(value).strip()
    if not normalized:
        raise ValueError("empty money value")

    is_negative = normalized.startswith("(") and normalized.endswith(")")
    normalized = normalized.replace("$", "").replace(",", "")

    if is_negative:
        normalized = normalized[1:-1]

    try:
        amount = quantize(Decimal(normalized))
    except InvalidOperation as exc:
        raise ValueError("invalid money value") from exc

    return -amount if is_negative else amount


def parse_positive_money(value) -> Decimal:
    amount = parse_money(value)
    if amount <= 0:
        raise ValueError("amount must be positive")
    return amount

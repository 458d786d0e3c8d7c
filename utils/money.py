from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Round a finite amount half-up to whole cents; NaN and infinities are rejected."""
    if not amount.is_finite():
        raise ValueError("invalid money value")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_money(value: str) -> Decimal:
    """Strict parse of user-entered money: ``$1,234.50``, ``-12``, ``(50)`` for negatives."""
    if value is None:
        raise ValueError("missing money value")

    text = str(value).strip()
    if not text:
        raise ValueError("empty money value")

    is_negative = text.startswith("(") and text.endswith(")")
    if is_negative:
        text = text[1:-1]
    text = text.replace("$", "").replace(",", "")

    try:
        amount = to_cents(Decimal(text))
    except InvalidOperation as exc:
        raise ValueError("invalid money value") from exc

    return -amount if is_negative else amount


def coerce_amount(value) -> Decimal:
    """Best-effort Decimal for persisted amounts; unreadable or non-finite -> 0."""
    if isinstance(value, bool) or value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def sum_amounts(items) -> Decimal:
    return sum((item.amount for item in items), ZERO)

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')


def to_decimal(value):
    """Exact Decimal for a submitted amount, without rounding"""
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value):
    """Coerce a stored or submitted amount to a two-place Decimal"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_whole_paise(value):
    value = to_decimal(value)
    return value == value.quantize(CENT)


def money_str(value):
    return str(to_money(value))

"""
Currency, number and date formatting.

All rounding in the engine happens here. Generators and the aggregator keep
full float precision; only strings produced for display are rounded.
"""
import datetime
import math
import re

from offer_engine.config import PRIMARY_CURRENCY


def _round_half_up(value: float) -> int:
    """Round like the proposal templates do (0.5 always rounds up)."""
    return int(math.floor(value + 0.5))


def secondary_amount(amount_aed: float, exchange_rate: float) -> float:
    """
    Convert an AED amount to the secondary currency.

    exchange_rate is AED per one secondary unit, so secondary = AED / rate.
    """
    if exchange_rate <= 0:
        raise ValueError(f"Exchange rate must be positive; received {exchange_rate}")
    return amount_aed / exchange_rate


def format_number(value: float) -> str:
    """12900 -> '12,900'; 1234.5 -> '1,234.50'."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_aed(amount: float, with_currency: bool = False) -> str:
    text = format_number(amount)
    return f"{PRIMARY_CURRENCY} {text}" if with_currency else text


def format_amount(amount: float, is_reduction: bool = False) -> str:
    """Table cell text; reductions carry a leading '-'."""
    text = format_number(abs(amount))
    return f"-{text}" if is_reduction else text


def format_secondary(amount_aed: float, exchange_rate: float, currency: str) -> str:
    """'(~ EUR 3,225)' style bracket used next to AED amounts."""
    converted = _round_half_up(secondary_amount(amount_aed, exchange_rate))
    return f"(~ {currency} {converted:,})"


def format_date_for_filename(value: datetime.date) -> str:
    """YYMMDD"""
    return value.strftime("%y%m%d")


def format_period_end(value: datetime.date) -> str:
    """dd.mm.yyyy"""
    return value.strftime("%d.%m.%Y")


def clean_authority_name(name: str) -> str:
    """Drop the bracketed long form: 'IFZA (International ...)' -> 'IFZA'."""
    return re.sub(r"\s*\([^)]*\)", "", name).strip()


def pluralize(count: int, singular: str, plural: str = "") -> str:
    return singular if count == 1 else (plural or f"{singular}s")

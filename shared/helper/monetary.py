"""Validation of monetary custom field values.

Paperless-NGX expects monetary values as ``{CURRENCY_CODE}{amount}``, e.g. USD10.00,
GBP123.45 or EUR9.99. A frequent mistake is a trailing currency symbol ("10.00$"),
which the backend rejects with a generic error. This module only catches that one
mistake, it is not a general monetary validator.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from shared.clients.errors import ValidationError

TRAILING_SYMBOL_REGEX = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([$€£¥₹₪])$")

SYMBOL_TO_CODE: dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "₹": "INR",
    "₪": "ILS",
}

DEFAULT_CURRENCY_CODE = "USD"


def _format_amount(amount: str) -> str:
    try:
        return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return amount


def get_monetary_validation_error(value: str) -> str | None:
    """
    Check whether a value looks like an amount with a trailing currency symbol.

    Args:
        value (str): The custom field value as supplied by the caller.

    Returns:
        str | None: An actionable error message, or None if the value is not this mistake.
    """
    match = TRAILING_SYMBOL_REGEX.fullmatch(value)
    if not match:
        return None

    amount, symbol = match.groups()
    code = SYMBOL_TO_CODE.get(symbol, DEFAULT_CURRENCY_CODE)
    return (
        f'Invalid monetary format "{value}". '
        f'Paperless-NGX requires the currency code as a prefix, e.g. "{code}{_format_amount(amount)}". '
        "Use the format: {CURRENCY_CODE}{amount} (e.g., USD10.00, GBP123.45, EUR9.99)."
    )


def ensure_valid_monetary_value(value) -> None:
    """
    Raise if a string value carries a trailing currency symbol. Non-string values are ignored.

    Raises:
        ValidationError: With the message from get_monetary_validation_error().
    """
    if not isinstance(value, str):
        return
    error = get_monetary_validation_error(value)
    if error:
        raise ValidationError(error)

#!/usr/bin/env python3
"""
Currency Table and Minor-Unit Formatting

ISO-4217 handling for bank amounts. Every provider reports amounts as signed
integers in the currency's smallest unit (pence, cents, yen), so all
formatting here uses integer arithmetic only.

Key Principles:
- Never use floating-point arithmetic to render an amount
- The number of fraction digits comes from the ISO-4217 table below
- Unknown currency codes are reported, never guessed
"""

# Currencies whose minor unit is not 1/100 of the major unit.
_NON_DECIMAL_FRACTIONS: dict[str, int] = {
    # No minor unit
    "BIF": 0,
    "CLP": 0,
    "DJF": 0,
    "GNF": 0,
    "ISK": 0,
    "JPY": 0,
    "KMF": 0,
    "KRW": 0,
    "PYG": 0,
    "RWF": 0,
    "UGX": 0,
    "UYI": 0,
    "VND": 0,
    "VUV": 0,
    "XAF": 0,
    "XOF": 0,
    "XPF": 0,
    # Thousandths
    "BHD": 3,
    "IQD": 3,
    "JOD": 3,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
    # Ten-thousandths (units of account)
    "CLF": 4,
    "UYW": 4,
}

_DECIMAL_CURRENCIES = (
    "AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BMD BND BOB BOV "
    "BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CNY COP COU CRC CUC CUP CVE "
    "CZK DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GTQ GYD HKD "
    "HNL HTG HUF IDR ILS INR IRR JMD KES KGS KHR KPW KYD KZT LAK LBP LKR LRD "
    "LSL MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK MXN MXV MYR MZN NAD NGN "
    "NIO NOK NPR NZD PAB PEN PGK PHP PKR PLN QAR RON RSD RUB SAR SBD SCR SDG "
    "SEK SGD SHP SLE SLL SOS SRD SSP STN SVC SYP SZL THB TJS TMT TOP TRY TTD "
    "TWD TZS UAH USD USN UYU UZS VES WST XCD YER ZAR ZMW ZWL"
).split()

CURRENCY_FRACTIONS: dict[str, int] = {
    **{code: 2 for code in _DECIMAL_CURRENCIES},
    **_NON_DECIMAL_FRACTIONS,
}


def fraction_digits(currency: str) -> int | None:
    """
    Look up the number of minor-unit digits for an ISO-4217 code.

    Args:
        currency: Alphabetic currency code, e.g. "GBP"

    Returns:
        Number of fraction digits (2 for GBP, 0 for JPY), or None if the
        code is not a known currency

    Example:
        fraction_digits("KWD") -> 3
    """
    return CURRENCY_FRACTIONS.get(currency)


def is_known_currency(currency: str) -> bool:
    """Check whether a currency code is in the ISO-4217 table."""
    return currency in CURRENCY_FRACTIONS


def minor_units_to_str(minor_units: int, fraction: int) -> str:
    """
    Convert a minor-unit amount to a major-unit decimal string.

    Uses pure integer arithmetic so no precision is ever lost.

    Args:
        minor_units: Signed amount in the currency's smallest unit
        fraction: Number of fraction digits for the currency

    Returns:
        Decimal string with exactly ``fraction`` digits after the point,
        or no point at all when ``fraction`` is 0

    Examples:
        minor_units_to_str(-280, 2) -> "-2.80"
        minor_units_to_str(10050, 0) -> "10050"
        minor_units_to_str(5, 3) -> "0.005"
    """
    if fraction == 0:
        return str(minor_units)

    is_negative = minor_units < 0
    major, remainder = divmod(abs(int(minor_units)), 10**fraction)
    sign = "-" if is_negative else ""

    return f"{sign}{major}.{remainder:0{fraction}d}"

"""Salary range parsing for compensation strings scraped from job boards."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

NOT_SPECIFIED = "Not specified"

CURRENCY_SYMBOLS = {
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
    "₹": "INR",
}

MULTIPLIERS = {
    "K": Decimal(1_000),
    "M": Decimal(1_000_000),
}

_CODES = r"USD|GBP|EUR|INR|CAD|AUD|CHF|SGD|JPY"
_SYMBOL = r"[$£€₹]"
_DASH = r"\s*[-–—]\s*"
_GROUPED_INT = r"\d{1,3}(?:,\d{3})+|\d+"
_PER_YEAR = r"(?:\s*/\s*(?:year|yr))?"

# "$120K - $175K", "£40K - £80K GBP", "₹700K - ₹1M INR", "USD 120K - 150K"
_MAGNITUDE_RANGE = re.compile(
    rf"(?:\b(?P<code1>{_CODES})\s*)?(?P<sym1>{_SYMBOL})?\s*"
    rf"(?P<min>\d+(?:\.\d+)?)\s*(?P<min_unit>[KkMm])(?![A-Za-z])"
    rf"{_DASH}"
    rf"(?P<sym2>{_SYMBOL})?\s*(?P<max>\d+(?:\.\d+)?)\s*(?P<max_unit>[KkMm])(?![A-Za-z])"
    rf"(?:\s*(?P<code2>{_CODES})\b)?{_PER_YEAR}"
)

# "USD 265,000 - 340,000 / year"
_CODE_INT_RANGE = re.compile(
    rf"\b(?P<code1>{_CODES})\s*(?P<min>{_GROUPED_INT}){_DASH}"
    rf"(?P<max>{_GROUPED_INT})(?:\s*(?P<code2>{_CODES})\b)?{_PER_YEAR}",
    re.IGNORECASE,
)

# "$150,000 - $200,000 USD / year"
_SYMBOL_INT_RANGE = re.compile(
    rf"(?P<sym1>{_SYMBOL})\s*(?P<min>{_GROUPED_INT}){_DASH}"
    rf"(?P<sym2>{_SYMBOL})?\s*(?P<max>{_GROUPED_INT})"
    rf"(?:\s*(?P<code2>{_CODES})\b)?{_PER_YEAR}",
    re.IGNORECASE,
)

_EQUITY = re.compile(r"\bequity\b|\d+(?:\.\d+)?%\s*[-–—]\s*\d+(?:\.\d+)?%", re.IGNORECASE)

Number = Union[int, float]


@dataclass
class SalaryInfo:
    """Parsed salary range. All fields None when nothing was recognised."""

    min: Optional[Number] = None
    max: Optional[Number] = None
    currency: Optional[str] = None
    display_text: str = NOT_SPECIFIED

    @property
    def found(self) -> bool:
        return self.min is not None


def _to_number(value: Decimal) -> Number:
    return int(value) if value == value.to_integral_value() else float(value)


def _amount(raw: str, unit: Optional[str] = None) -> Number:
    value = Decimal(raw.replace(",", ""))
    if unit:
        value *= MULTIPLIERS[unit.upper()]
    return _to_number(value)


def _currency(match: "re.Match[str]") -> Optional[str]:
    groups = match.groupdict()
    for key in ("code1", "code2"):
        code = groups.get(key)
        if code:
            return code.upper()
    for key in ("sym1", "sym2"):
        symbol = groups.get(key)
        if symbol:
            return CURRENCY_SYMBOLS[symbol]
    return None


def parse_salary(text: Optional[str]) -> SalaryInfo:
    """
    Parse a salary range out of free text.

    An explicit 3-letter code wins over a currency symbol. Symbols map
    $→USD, £→GBP, €→EUR, ₹→INR.

    Args:
        text: Compensation text, or a whole card's text.

    Returns:
        SalaryInfo; display_text is "Not specified" when no range matched.

    Example:
        >>> parse_salary("$120K - $175K")
        SalaryInfo(min=120000, max=175000, currency='USD', display_text='$120K - $175K')
    """
    if not text:
        return SalaryInfo()

    match = _MAGNITUDE_RANGE.search(text)
    if match:
        try:
            return SalaryInfo(
                min=_amount(match.group("min"), match.group("min_unit")),
                max=_amount(match.group("max"), match.group("max_unit")),
                currency=_currency(match),
                display_text=match.group(0).strip(),
            )
        except InvalidOperation:
            pass

    for pattern in (_CODE_INT_RANGE, _SYMBOL_INT_RANGE):
        match = pattern.search(text)
        if match:
            return SalaryInfo(
                min=_amount(match.group("min")),
                max=_amount(match.group("max")),
                currency=_currency(match),
                display_text=match.group(0).strip(),
            )

    return SalaryInfo()


def mentions_equity(text: Optional[str]) -> Optional[bool]:
    """True when the text advertises equity, None when it says nothing."""
    if text and _EQUITY.search(text):
        return True
    return None

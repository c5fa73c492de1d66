#!/usr/bin/env python3

import calendar
import logging
import re
from decimal import Decimal

from beancount_import_mt940.errors import MalformedAmount, MalformedDate
from beancount_import_mt940.models import LongDate, ShortDate, TransactionType
from beancount_import_mt940.tags import LONG_DATE_LENGTH, SHORT_DATE_LENGTH

logger = logging.getLogger(__name__)

_TWO_DIGITS = re.compile(r"[0-9]{2}")
_PLAIN_DECIMAL = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def _two_digit_groups(s: str, length: int) -> list[int]:
    if len(s) != length:
        logger.debug(f"Incorrect date length {s=}")
        raise MalformedDate(f"incorrect date length: {s!r} (expected {length})")
    groups = [s[i : i + 2] for i in range(0, length, 2)]
    if not all(_TWO_DIGITS.fullmatch(group) for group in groups):
        raise MalformedDate(f"date contains non-numeric segments: {s!r}")
    return [int(group) for group in groups]


def _check_calendar(s: str, month: int, day: int, year: int | None = None) -> None:
    if not 1 <= month <= 12:
        raise MalformedDate(f"month out of range in {s!r}")
    # without a year Feb 29 has to be allowed
    leap_year = 2000 if year is None else 2000 + year
    if not 1 <= day <= calendar.monthrange(leap_year, month)[1]:
        raise MalformedDate(f"day out of range in {s!r}")


def parse_long_date(s: str, strict: bool = False) -> LongDate:
    """Splits ``YYMMDD`` into its two-digit components.

    Lenient mode keeps any two-digit values as they are written, so ``"031399"``
    yields month 13 and day 99. With ``strict`` the month and day have to form
    a calendar date.
    """
    year, month, day = _two_digit_groups(s, LONG_DATE_LENGTH)
    if strict:
        _check_calendar(s, month=month, day=day, year=year)
    return LongDate(year=year, month=month, day=day)


def parse_short_date(s: str, strict: bool = False) -> ShortDate:
    month, day = _two_digit_groups(s, SHORT_DATE_LENGTH)
    if strict:
        _check_calendar(s, month=month, day=day)
    return ShortDate(month=month, day=day)


def parse_amount(s: str) -> Decimal:
    """Removes the decimal comma and scales the digits by 1/100.

    ``"73447,91"`` becomes ``Decimal("73447.91")``.
    """
    cleaned = s.replace(",", "")
    if not _PLAIN_DECIMAL.fullmatch(cleaned):
        raise MalformedAmount(f"cannot parse amount: {s!r}")
    return Decimal(cleaned).scaleb(-2)


def parse_transaction_type(s: str) -> TransactionType:
    """Raises ``ValueError`` for anything but ``D`` or ``C``."""
    return TransactionType(s)

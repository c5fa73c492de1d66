#!/usr/bin/env python3

"""Grammar of the MT940 statement block.

Every tag literal, length bound and pattern the decoders rely on is defined
here so the accepted format can be read in one place.
"""

import re
from dataclasses import dataclass

from beancount_import_mt940.models import BalanceType


@dataclass(frozen=True)
class TagSpec:
    literal: str
    max_length: int | None = None


LINE_TERMINATOR = "\n"
CARRIAGE_RETURN = "\r"

REFERENCE_NUMBER = TagSpec(literal=":20:", max_length=16)
RELATED_REFERENCE = TagSpec(literal=":21:", max_length=16)
ACCOUNT_IDENTIFICATION = TagSpec(literal=":25:", max_length=35)
STATEMENT_NUMBER = TagSpec(literal=":28C:", max_length=5)
OPENING_BALANCE = TagSpec(literal=":60F:")
CLOSING_BALANCE = TagSpec(literal=":62F:")
AVAILABLE_BALANCE = TagSpec(literal=":64:")

TRANSACTION = ":61:"
TRANSACTION_DESCRIPTION = ":86:"

BALANCE_TAGS: dict[BalanceType, TagSpec] = {
    BalanceType.OPENING: OPENING_BALANCE,
    BalanceType.CLOSING: CLOSING_BALANCE,
    BalanceType.AVAILABLE: AVAILABLE_BALANCE,
}
BALANCE_MIN_LENGTH = 10
BALANCE_MAX_LENGTH = 25

COUNTRY_CODE_LENGTH = 2
CURRENCY_LENGTH = 3

LONG_DATE_LENGTH = 6
SHORT_DATE_LENGTH = 4
# flag + long date + short date
STATEMENT_HEAD_LENGTH = 1 + LONG_DATE_LENGTH + SHORT_DATE_LENGTH

# third currency letter, amount, description prefix, description
STATEMENT_PATTERN = re.compile(
    r"([A-Za-z])?"
    r"([0-9]{1,12},[0-9]{2}|[0-9]{1,3},[0-9]{3},[0-9]{2}|[0-9]{1,15})"
    r"([A-Za-z])(.*)",
    flags=re.DOTALL,
)
LINE_BREAK_PATTERN = re.compile(r"\r?\n")

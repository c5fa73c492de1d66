#!/usr/bin/env python3

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal

from beancount_import_mt940.errors import MalformedDate


class TransactionType(str, enum.Enum):
    DEBIT = "D"
    CREDIT = "C"


class BalanceType(str, enum.Enum):
    OPENING = "O"
    CLOSING = "C"
    AVAILABLE = "A"


@dataclass(frozen=True)
class LongDate:
    """Two-digit ``YYMMDD`` date exactly as written in the message."""

    year: int
    month: int
    day: int

    def to_date(self, century: int = 2000) -> date:
        try:
            return date(century + self.year, self.month, self.day)
        except ValueError as e:
            raise MalformedDate(f"{self} is not a calendar date: {e}") from e


@dataclass(frozen=True)
class ShortDate:
    month: int
    day: int


@dataclass(frozen=True)
class ReferenceNumber:
    value: str


@dataclass(frozen=True)
class RelatedReference:
    value: str


@dataclass(frozen=True)
class StatementNumber:
    value: str


@dataclass(frozen=True)
class AccountIdentification:
    country_iso: str
    iban: str
    currency: str

    @property
    def full_iban(self) -> str:
        return self.country_iso + self.iban


@dataclass(frozen=True)
class Balance:
    transaction_type: TransactionType
    date: LongDate
    currency: str
    amount: Decimal
    balance_type: BalanceType


@dataclass(frozen=True)
class TransactionStatement:
    long_date: LongDate
    short_date: ShortDate
    transaction_type: TransactionType
    third_currency_character: str
    amount: Decimal
    description_prefix: str
    description: str


@dataclass(frozen=True)
class TransactionInformation:
    info: str


@dataclass(frozen=True)
class Transaction:
    index: int
    statement: TransactionStatement
    information: TransactionInformation


@dataclass
class InducedPosting:
    flag: Literal["*"] | Literal["!"]
    account: str


@dataclass
class TXN:
    """Mutable import record handed to the rule processors."""

    index: int
    date: date
    transaction_type: str
    description_prefix: str
    description: str
    information: str
    amount: Decimal
    currency: str
    induced_postings: list[InducedPosting] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)

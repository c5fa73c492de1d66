#!/usr/bin/env python3

import datetime
import logging
import re
from dataclasses import dataclass

from beancount.core import flags
from beancount.core.data import Directive
from beangulp import Importer

from beancount_import_mt940.errors import MT940Error, TagNotFound
from beancount_import_mt940.fields import (
    get_account_identification,
    get_balance,
    get_reference_number,
)
from beancount_import_mt940.models import TXN, BalanceType, Transaction, TransactionType
from beancount_import_mt940.tags import (
    AVAILABLE_BALANCE,
    CLOSING_BALANCE,
    TRANSACTION,
)
from beancount_import_mt940.transactions import get_transactions
from beancount_import_mt940.utils import make_balance, make_transaction

logger = logging.getLogger(__name__)


def transaction_block(message: str) -> str:
    """Cuts the message before the trailing balance tags.

    The narrative of the last transaction would otherwise run into them.
    """
    ends = [
        position
        for position in (
            message.find(CLOSING_BALANCE.literal),
            message.find(AVAILABLE_BALANCE.literal),
        )
        if position != -1
    ]
    return message[: min(ends)] if ends else message


def signed(amount, transaction_type: TransactionType):
    return -amount if transaction_type is TransactionType.DEBIT else amount


@dataclass
class MT940Importer(Importer):
    """Beancount importer for single-statement SWIFT MT940 exports."""

    iban: str
    account_name: str
    currency: str = "EUR"
    file_encoding: str = "ISO-8859-1"
    century: int = 2000
    strict_dates: bool = False
    flag: str = flags.FLAG_OKAY

    def read(self, filepath) -> str:
        # newline="" keeps the \r\n terminators of the message intact
        with open(filepath, encoding=self.file_encoding, newline="") as f:
            return f.read()

    def identify(self, filepath) -> bool:
        logger.info(f"Looking at {filepath}")
        message = self.read(filepath)
        try:
            get_reference_number(message)
            account = get_account_identification(message)
        except MT940Error as e:
            logger.debug(f"Not an MT940 statement: {e}")
            return False

        if account.full_iban != self.iban:
            logger.debug(f"{account.full_iban=} != {self.iban}")
            return False
        logger.info(f"{account.full_iban=} found.")
        return True

    def account(self, filepath) -> str:
        return self.account_name

    def statement_currency(self, message: str) -> str:
        currency = get_account_identification(message).currency
        if currency:
            return currency
        try:
            return get_balance(message, BalanceType.OPENING).currency
        except TagNotFound:
            return self.currency

    def to_txn(self, transaction: Transaction, currency: str) -> TXN:
        statement = transaction.statement
        txn = TXN(
            index=transaction.index,
            date=statement.long_date.to_date(century=self.century),
            transaction_type=statement.transaction_type.value,
            description_prefix=statement.description_prefix,
            description=statement.description,
            information=transaction.information.info,
            amount=signed(statement.amount, statement.transaction_type),
            currency=currency,
        )
        return txn

    def extract(self, filepath, existing=None) -> list[Directive]:
        message = self.read(filepath)
        currency = self.statement_currency(message)
        block = transaction_block(message)
        transactions = get_transactions(block, strict_dates=self.strict_dates)
        positions = [m.start() for m in re.finditer(re.escape(TRANSACTION), block)]

        extracted_directives = []
        for transaction, position in zip(transactions, positions):
            logger.debug(f"Converting {transaction=}")
            txn = self.to_txn(transaction=transaction, currency=currency)
            logger.debug(f"Converted to {txn=}")

            entry = make_transaction(
                account=self.account_name,
                txn=txn,
                fname=str(filepath),
                lineno=message.count("\n", 0, position) + 1,
                flag=self.flag,
            )
            logger.info(f"New {entry=}")
            extracted_directives.append(entry)

        final_balance = self.get_final_balance(filepath=filepath, message=message)
        if final_balance:
            logger.info(f"New {final_balance=}")
            extracted_directives.append(final_balance)

        return extracted_directives

    def get_final_balance(self, filepath, message: str) -> Directive | None:
        try:
            closing = get_balance(
                message, BalanceType.CLOSING, strict_dates=self.strict_dates
            )
        except TagNotFound:
            logger.info(f"No closing balance in {filepath}")
            return None

        lineno = message.count("\n", 0, message.find(CLOSING_BALANCE.literal)) + 1
        return make_balance(
            fname=str(filepath),
            lineno=lineno,
            date=closing.date.to_date(century=self.century),
            account=self.account_name,
            currency=closing.currency,
            amount=signed(closing.amount, closing.transaction_type),
        )

    def date(self, filepath) -> datetime.date | None:
        try:
            closing = get_balance(self.read(filepath), BalanceType.CLOSING)
        except MT940Error:
            return None
        return closing.date.to_date(century=self.century)

    def filename(self, filepath) -> str | None:
        reference = get_reference_number(self.read(filepath)).value.strip()
        if reference:
            return f"{reference.replace('/', '-')}.mt940"
        return None

#!/usr/bin/env python3

import logging

from beancount_import_mt940.errors import MalformedStatement
from beancount_import_mt940.models import (
    Transaction,
    TransactionInformation,
    TransactionStatement,
)
from beancount_import_mt940.primitives import (
    parse_amount,
    parse_long_date,
    parse_short_date,
    parse_transaction_type,
)
from beancount_import_mt940.tags import (
    LINE_BREAK_PATTERN,
    LONG_DATE_LENGTH,
    SHORT_DATE_LENGTH,
    STATEMENT_HEAD_LENGTH,
    STATEMENT_PATTERN,
    TRANSACTION,
    TRANSACTION_DESCRIPTION,
)

logger = logging.getLogger(__name__)


def get_transactions(message: str, strict_dates: bool = False) -> tuple[Transaction, ...]:
    """Decodes every ``:61:``/``:86:`` pair of the message in encounter order.

    Indices start at 1. A single malformed transaction fails the whole message;
    no partial result is returned.
    """
    segments = message.split(TRANSACTION)[1:]
    transactions = []
    for i, segment in enumerate(segments, start=1):
        logger.debug(f"Decoding transaction {i}/{len(segments)} {segment=}")
        transactions.append(
            Transaction(
                index=i,
                statement=get_statement(segment, strict_dates=strict_dates),
                information=get_transaction_info(segment),
            )
        )
    return tuple(transactions)


def get_transaction_info(segment: str) -> TransactionInformation:
    position = segment.rfind(TRANSACTION_DESCRIPTION)
    if position == -1:
        return TransactionInformation(info="")
    return TransactionInformation(
        info=segment[position + len(TRANSACTION_DESCRIPTION) :]
    )


def get_statement(segment: str, strict_dates: bool = False) -> TransactionStatement:
    """Decodes the ``:61:`` part of a segment, i.e. everything before ``:86:``.

    ``0710091009DN2,50NCHGNONREF`` is value date 07-10-09, entry date 10-09,
    debit, third currency letter ``N``, amount 2.50, prefix ``N`` and
    description ``CHGNONREF``. Line breaks inside the description become
    single spaces.
    """
    end = segment.find(TRANSACTION_DESCRIPTION)
    body = segment if end == -1 else segment[:end]
    if len(body) < STATEMENT_HEAD_LENGTH:
        raise MalformedStatement(f"statement line is too short: {body!r}")

    short_date_end = LONG_DATE_LENGTH + SHORT_DATE_LENGTH
    long_date = parse_long_date(body[:LONG_DATE_LENGTH], strict=strict_dates)
    short_date = parse_short_date(
        body[LONG_DATE_LENGTH:short_date_end], strict=strict_dates
    )
    try:
        transaction_type = parse_transaction_type(body[short_date_end])
    except ValueError:
        raise MalformedStatement(
            f"unknown debit/credit mark {body[short_date_end]!r} in {body!r}"
        ) from None

    rest = LINE_BREAK_PATTERN.sub(" ", body[STATEMENT_HEAD_LENGTH:])
    match = STATEMENT_PATTERN.fullmatch(rest)
    if not match:
        raise MalformedStatement(f"the statement line is incorrect: {rest!r}")
    logger.debug(f"Statement groups {match.groups()}")

    third_currency_character, amount, description_prefix, description = match.groups()
    return TransactionStatement(
        long_date=long_date,
        short_date=short_date,
        transaction_type=transaction_type,
        third_currency_character=third_currency_character or "",
        amount=parse_amount(amount),
        description_prefix=description_prefix,
        description=description,
    )

#!/usr/bin/env python3

import logging

from beancount_import_mt940.errors import (
    EmptyField,
    MalformedBalance,
    MissingCountryCode,
    TagNotFound,
    UnknownBalanceType,
    ValueTooLong,
)
from beancount_import_mt940.models import (
    AccountIdentification,
    Balance,
    BalanceType,
    ReferenceNumber,
    RelatedReference,
    StatementNumber,
)
from beancount_import_mt940.primitives import (
    parse_amount,
    parse_long_date,
    parse_transaction_type,
)
from beancount_import_mt940.tags import (
    ACCOUNT_IDENTIFICATION,
    BALANCE_MAX_LENGTH,
    BALANCE_MIN_LENGTH,
    BALANCE_TAGS,
    CARRIAGE_RETURN,
    COUNTRY_CODE_LENGTH,
    CURRENCY_LENGTH,
    LINE_TERMINATOR,
    LONG_DATE_LENGTH,
    REFERENCE_NUMBER,
    RELATED_REFERENCE,
    STATEMENT_NUMBER,
    TagSpec,
)

logger = logging.getLogger(__name__)


def extract_tag(message: str, tag: str, max_length: int | None = None) -> str:
    """Returns the value of the first occurrence of ``tag`` in ``message``.

    The value runs from the end of the tag literal to the end of its line and
    never contains the line terminator. An empty value is valid.

    Raises:
      TagNotFound: ``tag`` does not occur in ``message``.
      ValueTooLong: the value is longer than ``max_length``, when given.
    """
    start = message.find(tag)
    if start == -1:
        raise TagNotFound(f"no {tag} tag found in message")
    start += len(tag)

    end = message.find(LINE_TERMINATOR, start)
    if end == -1:
        end = len(message)
    value = message[start:end]
    if value.endswith(CARRIAGE_RETURN):
        value = value[: -len(CARRIAGE_RETURN)]
    logger.debug(f"Extracted {tag=} {value=}")

    if max_length is not None and len(value) > max_length:
        raise ValueTooLong(
            f"value of {tag} is longer than {max_length} characters. Size: {len(value)}"
        )
    return value


def _extract(message: str, spec: TagSpec) -> str:
    return extract_tag(message, tag=spec.literal, max_length=spec.max_length)


def get_reference_number(message: str) -> ReferenceNumber:
    return ReferenceNumber(value=_extract(message, REFERENCE_NUMBER))


def get_related_reference(message: str) -> RelatedReference:
    return RelatedReference(value=_extract(message, RELATED_REFERENCE))


def get_statement_number(message: str) -> StatementNumber:
    return StatementNumber(value=_extract(message, STATEMENT_NUMBER))


def get_account_identification(message: str) -> AccountIdentification:
    """Splits ``:25:`` into country code, IBAN remainder and optional currency.

    ``NL17RABO6064103256EUR`` gives ``NL``, ``17RABO6064103256`` and ``EUR``;
    without the alphabetic suffix the currency is an empty string.
    """
    value = _extract(message, ACCOUNT_IDENTIFICATION)
    if not value:
        raise EmptyField(f"{ACCOUNT_IDENTIFICATION.literal} is empty")

    country_iso = value[:COUNTRY_CODE_LENGTH]
    if len(country_iso) != COUNTRY_CODE_LENGTH or not country_iso.isalpha():
        raise MissingCountryCode(
            f"account identification {value!r} does not start with a country ISO code"
        )

    currency = ""
    suffix = value[-CURRENCY_LENGTH:]
    if len(value) >= COUNTRY_CODE_LENGTH + CURRENCY_LENGTH and suffix.isalpha():
        currency = suffix
    iban = value[COUNTRY_CODE_LENGTH : len(value) - len(currency)]

    return AccountIdentification(country_iso=country_iso, iban=iban, currency=currency)


def get_balance(
    message: str, balance_type: BalanceType, strict_dates: bool = False
) -> Balance:
    """Decodes ``:60F:``, ``:62F:`` or ``:64:`` depending on ``balance_type``.

    Layout: debit/credit flag, ``YYMMDD``, three letter currency, amount.
    """
    try:
        balance_type = BalanceType(balance_type)
        spec = BALANCE_TAGS[balance_type]
    except (KeyError, TypeError, ValueError):
        raise UnknownBalanceType(f"no tag mapped to {balance_type=}") from None

    value = _extract(message, spec)
    if not BALANCE_MIN_LENGTH <= len(value) <= BALANCE_MAX_LENGTH:
        raise MalformedBalance(
            f"the {spec.literal} balance size is incorrect. Size: {len(value)}"
        )

    try:
        transaction_type = parse_transaction_type(value[0])
    except ValueError:
        raise MalformedBalance(
            f"unknown debit/credit mark {value[0]!r} in {spec.literal}"
        ) from None

    date_end = 1 + LONG_DATE_LENGTH
    currency_end = date_end + CURRENCY_LENGTH
    return Balance(
        transaction_type=transaction_type,
        date=parse_long_date(value[1:date_end], strict=strict_dates),
        currency=value[date_end:currency_end],
        amount=parse_amount(value[currency_end:]),
        balance_type=balance_type,
    )

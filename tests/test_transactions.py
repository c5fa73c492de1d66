#!/usr/bin/env python3

from decimal import Decimal

import pytest

from beancount_import_mt940 import transactions
from beancount_import_mt940.errors import MalformedDate, MalformedStatement
from beancount_import_mt940.models import (
    LongDate,
    ShortDate,
    TransactionInformation,
    TransactionStatement,
    TransactionType,
)
from tests.utils import POLISH_TRANSACTIONS

ELIXIR_FEE = (
    ":61:0710091009DN2,50NCHGNONREF//BR07282102000059\n"
    "824-OPŁ. ZA PRZEL. ELIXIR MT\n"
    ":86:824 OPŁATA ZA PRZELEW ELIXIR; TNR: 145271016138274.040001\n"
)


def test_single_transaction():
    result = transactions.get_transactions(ELIXIR_FEE)
    assert len(result) == 1

    transaction = result[0]
    assert transaction.index == 1
    assert transaction.statement == TransactionStatement(
        long_date=LongDate(year=7, month=10, day=9),
        short_date=ShortDate(month=10, day=9),
        transaction_type=TransactionType.DEBIT,
        third_currency_character="N",
        amount=Decimal("2.50"),
        description_prefix="N",
        description="CHGNONREF//BR07282102000059 824-OPŁ. ZA PRZEL. ELIXIR MT ",
    )
    assert transaction.information == TransactionInformation(
        info="824 OPŁATA ZA PRZELEW ELIXIR; TNR: 145271016138274.040001\n"
    )


def test_multiple_transactions_keep_order():
    result = transactions.get_transactions(POLISH_TRANSACTIONS)
    assert [t.index for t in result] == [1, 2, 3]
    assert [t.statement.amount for t in result] == [
        Decimal("2.50"),
        Decimal("449.77"),
        Decimal("1.89"),
    ]
    assert [t.statement.long_date.year for t in result] == [7, 5, 23]

    second = result[1].statement
    assert second.third_currency_character == "N"
    assert second.description_prefix == "N"
    assert second.description == "TRFSP300//BR05012139000001 944-PRZEL.KRAJ.WYCH.MT.ELX "
    assert result[1].information.info.endswith("TNR: 145271016138277.020002")


def test_transaction_without_third_currency_character():
    third = transactions.get_transactions(POLISH_TRANSACTIONS)[2]
    assert third.statement.transaction_type is TransactionType.DEBIT
    assert third.statement.third_currency_character == ""
    assert third.statement.description_prefix == "S"
    assert third.statement.description == "07397301056237 "
    # the narrative is taken from the last :86: of the segment
    assert third.information.info.startswith("073~00VE02\n~20")
    assert third.information.info.endswith("~34073")


def test_preamble_is_ignored():
    message = ":20:STARTUMS\r\n:25:NL17RABO6064103256\r\n" + ELIXIR_FEE
    assert len(transactions.get_transactions(message)) == 1


def test_no_transactions():
    assert transactions.get_transactions(":20:STARTUMS\r\n") == ()


def test_decoding_is_idempotent():
    assert transactions.get_transactions(POLISH_TRANSACTIONS) == transactions.get_transactions(
        POLISH_TRANSACTIONS
    )


@pytest.mark.parametrize(
    "amount, expected",
    [
        ("1234,56", Decimal("1234.56")),
        ("1,234,56", Decimal("1234.56")),
        ("123456", Decimal("1234.56")),
    ],
)
def test_statement_amount_variants(amount, expected):
    statement = transactions.get_statement(f"2306040604C{amount}NTRFREF\r\n:86:info")
    assert statement.transaction_type is TransactionType.CREDIT
    assert statement.amount == expected
    assert statement.description == "TRFREF "


def test_statement_without_narrative():
    segment = "2306040604C10,00NTRFREF"
    assert transactions.get_statement(segment).description == "TRFREF"
    assert transactions.get_transaction_info(segment).info == ""


@pytest.mark.parametrize(
    "segment",
    [
        "230604",
        "2306040604X10,00NTRF:86:",
        "2306040604C:86:",
        "2306040604C10,00:86:",
        "2306040604CAB10,00NTRF:86:",
    ],
)
def test_malformed_statement(segment):
    with pytest.raises(MalformedStatement):
        transactions.get_statement(segment)


def test_statement_amount_digits_are_ascii():
    with pytest.raises(MalformedStatement):
        transactions.get_statement("2306040604C\u0661\u0660,\u0660\u0660NTRF:86:x")


def test_malformed_date_in_statement():
    with pytest.raises(MalformedDate):
        transactions.get_statement("23O6040604C10,00NTRF:86:")


def test_one_malformed_transaction_fails_the_batch():
    message = ELIXIR_FEE + ":61:2306040604X1,89S07397301056237\n:86:073\n"
    with pytest.raises(MalformedStatement):
        transactions.get_transactions(message)


def test_strict_dates():
    message = ":61:2313400604C10,00NTRF\r\n:86:info\r\n"
    assert transactions.get_transactions(message)[0].statement.long_date.month == 13
    with pytest.raises(MalformedDate):
        transactions.get_transactions(message, strict_dates=True)

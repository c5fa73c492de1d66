#!/usr/bin/env python3

from datetime import date, timedelta
from decimal import Decimal

from beancount.core.amount import Amount
from beancount.core.data import (
    EMPTY_SET,
    Balance,
    Posting,
    Transaction,
    new_metadata,
)

from beancount_import_mt940.models import TXN


def make_posting(
    amount: Decimal | None,
    currency: str | None,
    account: str,
    flag: str | None = None,
):
    posting = Posting(
        account=account,
        units=Amount(number=amount, currency=currency) if amount is not None else None,
        cost=None,
        price=None,
        flag=flag,
        meta=None,
    )
    return posting


def make_transaction(
    account: str, txn: TXN, fname: str, lineno: int, flag: str
) -> Transaction:
    postings = [make_posting(account=account, amount=txn.amount, currency=txn.currency)]
    for posting in txn.induced_postings:
        postings.append(
            make_posting(
                account=posting.account, amount=None, currency=None, flag=posting.flag
            )
        )

    t = Transaction(
        meta=new_metadata(filename=fname, lineno=lineno, kvlist=txn.meta),
        date=txn.date,
        flag=flag,
        payee=None,
        narration=" ".join(f"{txn.description} {txn.information}".split()),
        tags=EMPTY_SET,
        links=EMPTY_SET,
        postings=postings,
    )
    return t


def make_balance(
    fname: str,
    lineno: int,
    date: date,
    account: str,
    currency: str,
    amount: Decimal,
) -> Balance:
    """Beancount checks balances at the start of the day, MT940 at its end."""
    return Balance(
        meta=new_metadata(filename=fname, lineno=lineno),
        date=date + timedelta(days=1),
        account=account,
        amount=Amount(number=amount, currency=currency),
        tolerance=None,
        diff_amount=None,
    )


def flatten_dict(dd, separator=":", prefix=""):
    return (
        {
            prefix + separator + k if prefix else k: v
            for kk, vv in dd.items()
            for k, v in flatten_dict(vv, separator, kk).items()
        }
        if isinstance(dd, dict)
        else {prefix: dd}
    )

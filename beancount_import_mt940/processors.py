#!/usr/bin/env python3

"""Rule based enrichment of imported MT940 transactions.

Rules are read from YAML. Nested keys are joined with ``:`` into the rule
identifier, the leaves are lists of rules::

    Expenses:
      Coffee:
        - information: coffee
        - "~32": STARBUCKS

A rule maps a ``TXN`` text field, or a ``~NN`` subfield of the ``:86:``
narrative, to a regex. It matches when every regex is found (ignoring case).
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Sequence
from copy import deepcopy
from dataclasses import dataclass, fields
from functools import wraps

import yaml
from beancount.core import flags

from beancount_import_mt940.importers import MT940Importer
from beancount_import_mt940.models import TXN, InducedPosting, Transaction
from beancount_import_mt940.utils import flatten_dict

logger = logging.getLogger(__name__)

TEXT_FIELDS = tuple(f.name for f in fields(TXN) if f.type in (str, "str"))

# structured narratives use ~NN (or ?NN) codes, e.g. ~20 remittance, ~32 name
SUBFIELD_PATTERN = re.compile(r"[~?]([0-9]{2})")
SUBFIELD_KEY = re.compile(r"~[0-9]{2}")


def narrative_subfields(information: str) -> dict[str, str]:
    """``"073~20Card payment~32BOLT.EU"`` -> ``{"~20": "Card payment", "~32": "BOLT.EU"}``"""
    parts = SUBFIELD_PATTERN.split(information)
    subfields: dict[str, list[str]] = defaultdict(list)
    for code, value in zip(parts[1::2], parts[2::2]):
        subfields[f"~{code}"].append(" ".join(value.split()))
    return {code: " ".join(values) for code, values in subfields.items()}


@dataclass(frozen=True)
class Rule:
    identifier: str
    patterns: tuple[tuple[str, re.Pattern], ...]

    @classmethod
    def compile(cls, identifier, conditions) -> Rule:
        if not isinstance(conditions, dict):
            raise TypeError(f"{conditions=} for {identifier=} was not of type `dict`")
        patterns = []
        for field_name, regex in conditions.items():
            if not isinstance(field_name, str):
                raise TypeError(f"{field_name=} was not of type `str`")
            if not isinstance(regex, str):
                raise TypeError(f"{regex=} was not of type `str`")
            if field_name not in TEXT_FIELDS and not SUBFIELD_KEY.fullmatch(field_name):
                raise ValueError(
                    f"Rule for {identifier} matches on {field_name}, which is neither "
                    f"a narrative subfield (~NN) nor one of {TEXT_FIELDS}"
                )
            patterns.append((field_name, re.compile(regex, flags=re.IGNORECASE)))
        return cls(identifier=identifier, patterns=tuple(patterns))

    def match(self, txn: TXN) -> list[re.Match] | None:
        subfields = narrative_subfields(txn.information)
        matches = []
        for field_name, pattern in self.patterns:
            if field_name in TEXT_FIELDS:
                text = getattr(txn, field_name)
            else:
                text = subfields.get(field_name, "")
            match = pattern.search(text)
            if match is None:
                return None
            matches.append(match)
        return matches


def load_rules(rule_sets: dict[str, Sequence[dict[str, str]]]) -> list[Rule]:
    rules = []
    for identifier, rule_set in rule_sets.items():
        if not isinstance(identifier, str):
            raise TypeError(f"{identifier=} was not of type `str`")
        if not isinstance(rule_set, list):
            raise TypeError(f"{rule_set=} for {identifier=} was not of type `list`")
        rules.extend(Rule.compile(identifier, conditions) for conditions in rule_set)
    return rules


class TXNHook(ABC):
    def __init__(self, rule_sets: dict[str, Sequence[dict[str, str]]]) -> None:
        self.rules = load_rules(rule_sets)
        for rule in self.rules:
            self.check(rule)

    @classmethod
    def from_yaml(cls, fname) -> TXNHook:
        with open(fname) as f:
            return cls(rule_sets=flatten_dict(yaml.safe_load(f)))

    def check(self, rule: Rule) -> None:
        """Rejects rules the hook cannot apply, at load time."""

    def __call__(self, original_txn: TXN) -> TXN:
        txn = deepcopy(original_txn)
        for rule in self.rules:
            matches = rule.match(txn)
            if matches is not None:
                logger.debug(f"Rule {rule.identifier} matched {txn.index=}")
                self.augment(rule=rule, matches=matches, txn=txn)
        return txn

    @abstractmethod
    def augment(self, rule: Rule, matches: list[re.Match], txn: TXN) -> None:
        ...


def patch_hooks(importer: MT940Importer, hooks: Sequence[TXNHook]) -> MT940Importer:
    original_to_txn = importer.to_txn

    @wraps(original_to_txn)
    def patched_to_txn(transaction: Transaction, currency: str) -> TXN:
        txn = original_to_txn(transaction=transaction, currency=currency)
        for hook in hooks:
            txn = hook(txn)
        return txn

    importer.to_txn = patched_to_txn
    return importer


class AccountProcessor(TXNHook):
    """Adds a flagged counter posting to the account named by the rule."""

    def augment(self, rule: Rule, matches: list[re.Match], txn: TXN) -> None:
        if any(p.account == rule.identifier for p in txn.induced_postings):
            return
        txn.induced_postings.append(
            InducedPosting(flag=flags.FLAG_WARNING, account=rule.identifier)
        )


class MetaProcessor(TXNHook):
    """Writes metadata or rewrites fields from the groups of a matching rule.

    ``key: [rules]`` stores the ``meta`` groups of the matches as ``meta[key]``,
    ``key: value: [rules]`` stores ``value``. Any other named group replaces the
    ``TXN`` field of the same name.
    """

    def check(self, rule: Rule) -> None:
        if rule.identifier.count(":") > 1:
            raise ValueError(
                f"Rule identifier {rule.identifier} is nested too deep. "
                "Expected either meta_key: [rules] or meta_key: meta_value: [rules]"
            )
        for _, pattern in rule.patterns:
            unknown = set(pattern.groupindex) - {"meta", *TEXT_FIELDS}
            if unknown:
                raise ValueError(
                    f"A rule for {rule.identifier} contains the named groups "
                    f"{sorted(unknown)}, allowed are 'meta' and {TEXT_FIELDS}"
                )

    def augment(self, rule: Rule, matches: list[re.Match], txn: TXN) -> None:
        key, _, meta_value = rule.identifier.partition(":")
        if meta_value:
            meta_values = [meta_value]
        else:
            meta_values = [
                match.group("meta")
                for match in matches
                if match.groupdict().get("meta") is not None
            ]

        rewrites = defaultdict(list)
        for match in matches:
            for field_name, value in match.groupdict().items():
                if field_name != "meta" and value is not None:
                    rewrites[field_name].append(value.strip())
        for field_name, values in rewrites.items():
            setattr(txn, field_name, " ".join(values))

        if meta_values:
            txn.meta[key] = " ".join(meta_values).upper()

#!/usr/bin/env python3


class MT940Error(ValueError):
    """Base class of every decoding failure."""


class TagNotFound(MT940Error):
    pass


class ValueTooLong(MT940Error):
    pass


class EmptyField(MT940Error):
    pass


class MissingCountryCode(MT940Error):
    pass


class MalformedDate(MT940Error):
    pass


class MalformedAmount(MT940Error):
    pass


class MalformedBalance(MT940Error):
    pass


class MalformedStatement(MT940Error):
    pass


class UnknownBalanceType(MT940Error):
    pass

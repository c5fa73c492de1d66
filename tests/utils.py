#!/usr/bin/env python3

import random
import string

CRLF = "\r\n"

POLISH_TRANSACTIONS = (
    ":61:0710091009DN2,50NCHGNONREF//BR07282102000059\n"
    "824-OPŁ. ZA PRZEL. ELIXIR MT\n"
    ":86:824 OPŁATA ZA PRZELEW ELIXIR; TNR: 145271016138274.040001\n"
    ":61:0501120112DN449,77NTRFSP300//BR05012139000001\n"
    "944-PRZEL.KRAJ.WYCH.MT.ELX\n"
    ":86:944 CompanyNet Przelew krajowy; na rach.: 35109010560000000006093440; "
    "dla: PHU Test ul.Dolna\n"
    "1 00-950 Warszawa; tyt.: fv 100/2007; TNR: 145271016138277.020002"
    ":61:2306040604D1,89S07397301056237\n"
    ":86:073\n"
    ":86:073~00VE02\n"
    "~20PàatnoòÜ kart• 02.06.2023 \n"
    "~21Nr karty 4246xx4970~22\n"
    "~23~24\n"
    "~25\n"
    "~3010500031~311915031/19730\n"
    "~32BOLT.EU/R/2306021457      ~33Tallinn \n"
    "~34073"
)


def random_string(size: int, letters: bool = False, digits: bool = False):
    population = ""
    if letters:
        population += string.ascii_uppercase
    if digits:
        population += string.digits
    return "".join(random.choices(population=population, k=size))


def fake_iban(country: str = "NL"):
    return country + random_string(size=2, digits=True) + random_string(
        size=4, letters=True
    ) + random_string(size=10, digits=True)


def make_message(
    iban: str,
    reference: str = "STARTUMS",
    currency: str = "EUR",
    transactions: str = "",
    opening: str = "C230601EUR1000,00",
    closing: str | None = "C230630EUR1234,56",
):
    lines = [
        f":20:{reference}",
        ":21:NONREF",
        f":25:{iban}{currency}",
        ":28C:00042",
        f":60F:{opening}",
    ]
    message = CRLF.join(lines) + CRLF + transactions
    if closing is not None:
        message += f":62F:{closing}" + CRLF
    message += ":64:C230630EUR1234,56" + CRLF
    return message


def make_transaction_lines(
    date: str, flag: str, amount: str, description: str, info: str
) -> str:
    return f":61:{date}{date[2:]}{flag}{amount}NTRF{description}{CRLF}:86:{info}{CRLF}"

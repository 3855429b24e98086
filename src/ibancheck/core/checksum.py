from __future__ import annotations


def remainder(iban: str) -> int:
    """ISO 7064 MOD-97-10 remainder of a normalized IBAN.

    The first four characters move to the end, letters become 10..35 and
    the resulting digit stream is reduced modulo 97 as it is read, so no
    big integer is ever built.
    """
    rearranged = iban[4:] + iban[:4]
    acc = 0
    for ch in rearranged:
        if "0" <= ch <= "9":
            acc = (acc * 10 + (ord(ch) - 48)) % 97
        elif "A" <= ch <= "Z":
            # A=10 .. Z=35, always two decimal digits
            acc = (acc * 100 + (ord(ch) - 55)) % 97
        else:
            raise ValueError(f"unexpected character {ch!r} in IBAN")
    return acc


def is_valid(iban: str) -> bool:
    """True when the check digits of a normalized IBAN are correct."""
    return remainder(iban) == 1

from __future__ import annotations

import string

import pytest

from ibancheck.core import checksum

_LETTERS = {ord(d): str(i) for i, d in enumerate(string.digits + string.ascii_uppercase)}


def _big_int_remainder(iban: str) -> int:
    return int((iban[4:] + iban[:4]).translate(_LETTERS)) % 97


@pytest.mark.parametrize(
    "iban",
    [
        "NL91ABNA0417164300",
        "NL12ABNA0417164300",
        "MT84MALT011000012345MTLCAST001S",
        "GB82WEST12345698765432",
        "ZZ00ZZZZZZZZZZZZZZZZZZZZZZZZZZZZZZ",
        "AA0000",
    ],
)
def test_streaming_remainder_matches_big_integer(iban: str) -> None:
    assert checksum.remainder(iban) == _big_int_remainder(iban)


def test_is_valid_accepts_correct_check_digits() -> None:
    assert checksum.is_valid("NL91ABNA0417164300") is True
    assert checksum.is_valid("FR1420041010050500013M02606") is True


def test_is_valid_rejects_wrong_check_digits() -> None:
    assert checksum.remainder("NL12ABNA0417164300") == 19
    assert checksum.is_valid("NL12ABNA0417164300") is False


def test_remainder_rejects_unexpected_characters() -> None:
    with pytest.raises(ValueError):
        checksum.remainder("nl91abna0417164300")

from __future__ import annotations

import pytest

from ibancheck.core import countries


def test_lookup_known_country() -> None:
    assert countries.lookup("NL") == 18
    assert countries.lookup("DE") == 22
    assert countries.lookup("NO") == 15
    assert countries.lookup("RU") == 33


@pytest.mark.parametrize("code", ["nl", "Nl", "UU", "NLD", "N", "", None, 12])
def test_lookup_misses(code) -> None:
    assert countries.lookup(code) is None
    assert countries.length_for_country_code(code) == -1


def test_length_for_country_code_sentinel() -> None:
    assert countries.length_for_country_code("NL") == 18
    assert countries.length_for_country_code("Bogus") == -1


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        countries.COUNTRY_LENGTHS["UU"] = 20  # type: ignore[index]
    assert "UU" not in countries.COUNTRY_LENGTHS


def test_table_entries_are_well_formed() -> None:
    for code, length in countries.COUNTRY_LENGTHS.items():
        assert len(code) == 2 and code.isascii() and code.isupper()
        assert 5 <= length <= 34


def test_supported_country_codes_sorted() -> None:
    codes = countries.supported_country_codes()
    assert list(codes) == sorted(countries.COUNTRY_LENGTHS)
    assert "NL" in codes

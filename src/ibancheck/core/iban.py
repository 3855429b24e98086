from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from . import checksum, countries
from .errors import (
    IBANErrorKind,
    IBANIntegrityError,
    IBANParseError,
    MalformedIBANError,
    ValidationFailure,
)

log = logging.getLogger(__name__)

# 2 letters, 2 digits, 1..30 alphanumerics; ASCII only, no whitespace anywhere.
_IBAN_RE = re.compile(r"[A-Za-z]{2}[0-9]{2}[A-Za-z0-9]{1,30}")
# Printed form: groups of four, single space between groups, last group 1..4.
_PRINTED_RE = re.compile(r"(?:[A-Za-z0-9]{4} )*[A-Za-z0-9]{1,4}")

_GROUP = 4


def _check(candidate: Any, submitted: Any) -> Union[str, ValidationFailure]:
    """Run the validation pipeline.

    Returns the normalized string, or the first failure hit. `submitted` is
    what the caller handed in and ends up in `failed_input` unchanged.
    """
    if candidate is None:
        return ValidationFailure(IBANErrorKind.MALFORMED_STRUCTURE, None, "IBAN must not be None")
    if not isinstance(candidate, str):
        return ValidationFailure(
            IBANErrorKind.MALFORMED_STRUCTURE,
            str(submitted),
            f"IBAN must be a string, not {type(candidate).__name__}",
        )
    if not _IBAN_RE.fullmatch(candidate):
        return ValidationFailure(
            IBANErrorKind.MALFORMED_STRUCTURE, submitted, "input does not have the structure of an IBAN"
        )

    normalized = candidate.upper()
    country = normalized[:2]
    expected = countries.lookup(country)
    if expected is None:
        return ValidationFailure(IBANErrorKind.UNKNOWN_COUNTRY, submitted, f"unknown country code {country}")
    if len(normalized) != expected:
        return ValidationFailure(
            IBANErrorKind.MALFORMED_STRUCTURE,
            submitted,
            f"{country} IBAN must be {expected} characters long, got {len(normalized)}",
        )
    if not checksum.is_valid(normalized):
        return ValidationFailure(IBANErrorKind.WRONG_CHECKSUM, submitted, "IBAN checksum mismatch")
    return normalized


@dataclass(frozen=True)
class ParseResult:
    iban: IBAN | None = None
    failure: ValidationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.iban is not None


@dataclass(frozen=True)
class IBAN:
    """A validated International Bank Account Number.

    `value` holds the normalized form (uppercase, no whitespace). Instances
    are immutable and compare/hash by `value` only. Build them with
    `IBAN.parse` / `IBAN.value_of`; calling `IBAN(...)` directly runs the
    same checks and additionally requires the normalized form.
    """

    value: str

    def __post_init__(self) -> None:
        checked = _check(self.value, self.value)
        if isinstance(checked, ValidationFailure):
            raise checked.to_exception()
        if checked != self.value:
            raise MalformedIBANError(
                ValidationFailure(
                    IBANErrorKind.MALFORMED_STRUCTURE, self.value, "IBAN value must be in normalized uppercase form"
                )
            )

    # --- construction -----------------------------------------------------

    @classmethod
    def try_parse(cls, raw: Any) -> ParseResult:
        checked = _check(raw, raw)
        if isinstance(checked, ValidationFailure):
            return ParseResult(failure=checked)
        return ParseResult(iban=cls(checked))

    @classmethod
    def parse(cls, raw: Any) -> IBAN:
        """Parse `raw` or raise an `IBANParseError` subclass.

        Leading/trailing whitespace and separators are rejected, letters may
        be given in either case.
        """
        result = cls.try_parse(raw)
        if result.failure is not None:
            raise result.failure.to_exception()
        assert result.iban is not None
        return result.iban

    @classmethod
    def value_of(cls, raw: Any) -> IBAN | None:
        """Like `parse`, but returns None for None or any invalid input."""
        return cls.try_parse(raw).iban

    @classmethod
    def parse_printed(cls, raw: Any) -> IBAN:
        """Parse the printed form ("NL91 ABNA 0417 1643 00") or the compact one.

        Groups must be four characters separated by exactly one space; any
        other spacing is rejected. Failures carry `raw` as submitted.
        """
        candidate = raw
        if isinstance(raw, str) and " " in raw:
            if not _PRINTED_RE.fullmatch(raw):
                raise MalformedIBANError(
                    ValidationFailure(
                        IBANErrorKind.MALFORMED_STRUCTURE,
                        raw,
                        "IBAN groups must be four characters separated by single spaces",
                    )
                )
            candidate = raw.replace(" ", "")
        checked = _check(candidate, raw)
        if isinstance(checked, ValidationFailure):
            raise checked.to_exception()
        return cls(checked)

    @classmethod
    def from_bytes(cls, data: Any) -> IBAN:
        """Restore from `to_bytes()` output; invalid payloads raise IBANIntegrityError."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            log.warning("Rejected IBAN payload of type %s", type(data).__name__)
            raise IBANIntegrityError(f"stored IBAN must be bytes, not {type(data).__name__}")
        try:
            text = memoryview(data).tobytes().decode("ascii")
        except UnicodeDecodeError as exc:
            log.warning("Rejected non-ASCII IBAN payload of %d bytes", len(data))
            raise IBANIntegrityError("stored IBAN is not ASCII") from exc
        return restore_iban(text)

    @staticmethod
    def get_length_for_country_code(country_code: Any) -> int:
        return countries.length_for_country_code(country_code)

    # --- accessors --------------------------------------------------------

    @property
    def country_code(self) -> str:
        return self.value[:2]

    @property
    def check_digits(self) -> str:
        return self.value[2:4]

    @property
    def bban(self) -> str:
        return self.value[4:]

    @property
    def printed(self) -> str:
        v = self.value
        return " ".join(v[i : i + _GROUP] for i in range(0, len(v), _GROUP))

    def to_bytes(self) -> bytes:
        return self.value.encode("ascii")

    def __str__(self) -> str:
        return self.printed

    # pickle/copy store only the normalized value and re-validate on load
    def __reduce__(self):
        return (restore_iban, (self.value,))


def restore_iban(value: Any) -> IBAN:
    try:
        return IBAN(value)
    except IBANParseError as exc:
        log.warning("Rejected restored IBAN %r: %s", value, exc.kind.value)
        raise IBANIntegrityError(f"restored value is not a valid IBAN: {value!r}") from exc


def is_valid_iban(raw: Any) -> bool:
    return IBAN.try_parse(raw).ok

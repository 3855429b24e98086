from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IBANErrorKind(str, Enum):
    MALFORMED_STRUCTURE = "malformed_structure"
    UNKNOWN_COUNTRY = "unknown_country"
    WRONG_CHECKSUM = "wrong_checksum"


@dataclass(frozen=True)
class ValidationFailure:
    """Why a candidate was rejected.

    `failed_input` is the input exactly as the caller submitted it (None when
    the caller passed None), so messages can echo the user's own text.
    """

    kind: IBANErrorKind
    failed_input: str | None
    reason: str

    def to_exception(self) -> "IBANParseError":
        return _EXCEPTION_BY_KIND[self.kind](self)


class IBANError(Exception):
    """Base class for all ibancheck errors."""


class IBANParseError(IBANError, ValueError):
    def __init__(self, failure: ValidationFailure):
        super().__init__(f"{failure.reason}: {failure.failed_input!r}")
        self.failure = failure

    @property
    def kind(self) -> IBANErrorKind:
        return self.failure.kind

    @property
    def failed_input(self) -> str | None:
        return self.failure.failed_input


class MalformedIBANError(IBANParseError):
    """Null input, stray characters/whitespace, or wrong shape or length."""


class UnknownCountryCodeError(IBANParseError):
    """Well-formed prefix that is not a registered IBAN country."""


class WrongChecksumError(IBANParseError):
    """Structurally valid, but the MOD-97 check failed."""


class IBANIntegrityError(IBANError, ValueError):
    """A restored value (pickle, bytes, database row) is not a valid IBAN."""


_EXCEPTION_BY_KIND = {
    IBANErrorKind.MALFORMED_STRUCTURE: MalformedIBANError,
    IBANErrorKind.UNKNOWN_COUNTRY: UnknownCountryCodeError,
    IBANErrorKind.WRONG_CHECKSUM: WrongChecksumError,
}

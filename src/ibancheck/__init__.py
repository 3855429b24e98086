from .core.countries import COUNTRY_LENGTHS, length_for_country_code, lookup
from .core.errors import (
    IBANError,
    IBANErrorKind,
    IBANIntegrityError,
    IBANParseError,
    MalformedIBANError,
    UnknownCountryCodeError,
    ValidationFailure,
    WrongChecksumError,
)
from .core.iban import IBAN, ParseResult, is_valid_iban, restore_iban

__version__ = "1.0.0"

__all__ = [
    "COUNTRY_LENGTHS",
    "IBAN",
    "IBANError",
    "IBANErrorKind",
    "IBANIntegrityError",
    "IBANParseError",
    "MalformedIBANError",
    "ParseResult",
    "UnknownCountryCodeError",
    "ValidationFailure",
    "WrongChecksumError",
    "is_valid_iban",
    "length_for_country_code",
    "lookup",
    "restore_iban",
]

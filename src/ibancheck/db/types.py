from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from ibancheck.core.iban import IBAN, restore_iban


class IBANType(TypeDecorator):
    """Column type storing an IBAN as its normalized string.

    Bound strings are parsed first; loaded rows go through `restore_iban`, so
    a tampered value surfaces as IBANIntegrityError instead of an IBAN.
    """

    impl = String
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(length=34)

    def process_bind_param(self, value: Any, dialect) -> str | None:
        if value is None:
            return None
        if isinstance(value, IBAN):
            return value.value
        return IBAN.parse(value).value

    def process_result_value(self, value: Any, dialect) -> IBAN | None:
        if value is None:
            return None
        return restore_iban(value)

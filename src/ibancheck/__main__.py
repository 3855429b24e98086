"""Entry point for `python -m ibancheck`."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, Iterator, TextIO

from ibancheck.core.countries import COUNTRY_LENGTHS, supported_country_codes
from ibancheck.core.errors import IBANParseError
from ibancheck.core.iban import IBAN
from ibancheck.utils.config import load_settings, resolve_config_path
from ibancheck.utils.logging_setup import log_event, setup_logging

log = logging.getLogger("ibancheck.cli")


def _candidates(values: list[str], stdin: TextIO) -> Iterator[str]:
    if not values or values == ["-"]:
        for line in stdin:
            # only the line ending goes; other whitespace stays and is rejected
            line = line.rstrip("\r\n")
            if line:
                yield line
        return
    yield from values


def _check_all(candidates: Iterable[str], *, printed: bool, as_json: bool, out: TextIO) -> int:
    failures = 0
    for raw in candidates:
        try:
            iban = IBAN.parse_printed(raw) if printed else IBAN.parse(raw)
        except IBANParseError as exc:
            failures += 1
            log_event(log, "iban.rejected", "IBAN rejected", kind=exc.kind.value, failed_input=exc.failed_input)
            if as_json:
                row = {"input": raw, "valid": False, "kind": exc.kind.value, "reason": exc.failure.reason}
                out.write(json.dumps(row, ensure_ascii=False) + "\n")
            else:
                out.write(f"FAIL {exc.kind.value} {raw} ({exc.failure.reason})\n")
            continue

        log_event(log, "iban.accepted", "IBAN accepted", country_code=iban.country_code)
        if as_json:
            row = {
                "input": raw,
                "valid": True,
                "iban": iban.value,
                "printed": iban.printed,
                "country_code": iban.country_code,
                "check_digits": iban.check_digits,
            }
            out.write(json.dumps(row, ensure_ascii=False) + "\n")
        else:
            out.write(f"OK {iban.printed}\n")
    return 0 if failures == 0 else 1


def main(argv: list[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    ap = argparse.ArgumentParser(prog="ibancheck", description="Validate IBANs (country length + MOD-97).")
    ap.add_argument("ibans", nargs="*", help="IBANs to check; '-' or nothing reads one per line from stdin")
    ap.add_argument("--config", default=None, help="YAML config file (default: $IBANCHECK_CONFIG)")
    ap.add_argument("--printed", action="store_true", help="also accept the printed form with spaces")
    ap.add_argument("--json", action="store_true", help="one JSON object per input")
    ap.add_argument("--countries", action="store_true", help="list supported country codes and lengths")
    args = ap.parse_args(argv)

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    settings = load_settings(resolve_config_path(args.config))
    setup_logging(
        settings.log_dir,
        console=settings.log_console,
        max_lines=settings.log_max_lines,
        detail=settings.log_detail,
    )

    if args.countries:
        for code in supported_country_codes():
            stdout.write(f"{code} {COUNTRY_LENGTHS[code]}\n")
        return 0

    printed = args.printed or settings.accept_printed
    return _check_all(_candidates(args.ibans, stdin), printed=printed, as_json=args.json, out=stdout)


if __name__ == "__main__":
    raise SystemExit(main())

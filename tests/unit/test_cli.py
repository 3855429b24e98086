from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from ibancheck.__main__ import main
from ibancheck.utils import config
from ibancheck.utils.logging_setup import setup_logging

VALID_IBAN = "NL91ABNA0417164300"
INVALID_IBAN = "NL12ABNA0417164300"


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    for name in ("IBANCHECK_CONFIG", "IBANCHECK_LOG_CONSOLE", "IBANCHECK_LOG_MAX_LINES", "IBANCHECK_LOG_DETAIL"):
        monkeypatch.delenv(name, raising=False)
    yield
    setup_logging(None)


def _run(argv: list[str], stdin: str = "") -> tuple[int, str]:
    out = io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin), stdout=out)
    return code, out.getvalue()


def test_valid_iban_prints_ok() -> None:
    code, out = _run([VALID_IBAN])
    assert code == 0
    assert out == "OK NL91 ABNA 0417 1643 00\n"


def test_invalid_iban_prints_fail_and_exit_code() -> None:
    code, out = _run([VALID_IBAN, INVALID_IBAN, "UU345678345543234"])
    assert code == 1
    lines = out.splitlines()
    assert lines[0].startswith("OK ")
    assert lines[1].startswith(f"FAIL wrong_checksum {INVALID_IBAN}")
    assert lines[2].startswith("FAIL unknown_country UU345678345543234")


def test_json_output() -> None:
    code, out = _run(["--json", VALID_IBAN, "Shenanigans!"])
    assert code == 1
    first, second = [json.loads(line) for line in out.splitlines()]
    assert first["valid"] is True
    assert first["country_code"] == "NL"
    assert first["check_digits"] == "91"
    assert first["printed"] == "NL91 ABNA 0417 1643 00"
    assert second == {
        "input": "Shenanigans!",
        "valid": False,
        "kind": "malformed_structure",
        "reason": "input does not have the structure of an IBAN",
    }


def test_reads_stdin_without_trimming_whitespace() -> None:
    code, out = _run([], stdin=f"{VALID_IBAN}\r\n {VALID_IBAN}\n\n")
    assert code == 1
    lines = out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("OK ")
    assert lines[1].startswith("FAIL malformed_structure")


def test_printed_flag() -> None:
    assert _run(["NL91 ABNA 0417 1643 00"])[0] == 1
    assert _run(["--printed", "NL91 ABNA 0417 1643 00"])[0] == 0


def test_countries_listing() -> None:
    code, out = _run(["--countries"])
    assert code == 0
    assert "NL 18" in out.splitlines()


def test_config_file_enables_printed_input_and_logging(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    cfg = tmp_path / "ibancheck.yaml"
    config.save_yaml(cfg, {"input": {"accept_printed": True}, "logging": {"dir": str(log_dir)}})

    code, _ = _run(["--config", str(cfg), "NL91 ABNA 0417 1643 00", INVALID_IBAN])
    assert code == 1

    text_log = (log_dir / "ibancheck.log").read_text(encoding="utf-8")
    assert "IBAN accepted" in text_log
    assert "kind='wrong_checksum'" in text_log

    events = [json.loads(line) for line in (log_dir / "ibancheck.jsonl").read_text(encoding="utf-8").splitlines()]
    names = [e["event_name"] for e in events]
    assert "iban.accepted" in names
    assert "iban.rejected" in names

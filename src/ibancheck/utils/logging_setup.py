from __future__ import annotations

import json
import logging
import threading
import traceback
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

LOGGER_NAME = "ibancheck"
LOG_FILE_NAME = "ibancheck.log"
JSON_LOG_FILE_NAME = "ibancheck.jsonl"

_CONFIG_LOCK = threading.Lock()
_INSTALLED_HANDLERS: list[logging.Handler] = []


class LineCappedFileHandler(logging.Handler):
    """
    Single log file with "ring buffer" behavior:
    - appends normally
    - once it grows beyond max_lines (+ small chunk), it truncates to last max_lines
    """

    def __init__(self, filename: Path, *, max_lines: int = 5000, encoding: str = "utf-8"):
        super().__init__()
        self._filename = Path(filename)
        self._encoding = encoding
        self.max_lines = int(max_lines)
        # trim every N extra lines to avoid rewriting on every emit
        self._trim_chunk = max(10, self.max_lines // 100)
        self._mtx = threading.RLock()
        self._stream = None
        self._line_count = 0
        self._open_and_count()

    def _open_and_count(self) -> None:
        self._filename.parent.mkdir(parents=True, exist_ok=True)
        if self._filename.exists():
            with open(self._filename, "r", encoding=self._encoding, errors="ignore") as rf:
                self._line_count = sum(1 for _ in rf)
        else:
            self._line_count = 0
        self._stream = open(self._filename, "a", encoding=self._encoding, errors="backslashreplace")

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            if not msg.endswith("\n"):
                msg += "\n"
            with self._mtx:
                if self._stream is None:
                    self._open_and_count()
                assert self._stream is not None
                self._stream.write(msg)
                self._stream.flush()
                self._line_count += msg.count("\n")
                if self._line_count >= self.max_lines + self._trim_chunk:
                    self._trim_to_last_max_lines()
        except Exception:
            self.handleError(record)

    def _trim_to_last_max_lines(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        try:
            with open(self._filename, "r", encoding=self._encoding, errors="ignore") as rf:
                tail = deque(rf, maxlen=self.max_lines)
            with open(self._filename, "w", encoding=self._encoding, errors="backslashreplace") as wf:
                wf.writelines(tail)
            self._line_count = len(tail)
        finally:
            self._stream = open(self._filename, "a", encoding=self._encoding, errors="backslashreplace")

    def close(self) -> None:
        with self._mtx:
            if self._stream is not None:
                self._stream.close()
            self._stream = None
        super().close()


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for machine reading."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "threadName": record.threadName,
            "event_name": getattr(record, "event_name", None),
        }
        extra_obj = getattr(record, "extra_payload", None)
        if extra_obj:
            payload["extra"] = extra_obj
        if record.exc_info:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path | None,
    *,
    console: bool = False,
    max_lines: int = 5000,
    detail: bool = True,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """
    Configures the package logger:
      <log_dir>/ibancheck.log    text, capped to the last max_lines lines
      <log_dir>/ibancheck.jsonl  JSON lines, capped to 2 * max_lines
    plus an optional stderr handler. Calling it again replaces the handlers
    installed by the previous call.
    """
    logger = logging.getLogger(name)
    fmt = logging.Formatter(
        "%(asctime)s.%(msecs)03d %(levelname)s [%(name)s:%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    with _CONFIG_LOCK:
        for handler in _INSTALLED_HANDLERS:
            logger.removeHandler(handler)
            handler.close()
        _INSTALLED_HANDLERS.clear()

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            fh = LineCappedFileHandler(log_dir / LOG_FILE_NAME, max_lines=max_lines)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(fmt)
            _INSTALLED_HANDLERS.append(fh)

            fh_json = LineCappedFileHandler(log_dir / JSON_LOG_FILE_NAME, max_lines=max_lines * 2)
            fh_json.setLevel(logging.DEBUG)
            fh_json.setFormatter(JsonLineFormatter())
            _INSTALLED_HANDLERS.append(fh_json)

        if console:
            ch = logging.StreamHandler()
            ch.setLevel(logging.INFO)
            ch.setFormatter(fmt)
            _INSTALLED_HANDLERS.append(ch)

        for handler in _INSTALLED_HANDLERS:
            logger.addHandler(handler)

    logger.setLevel(logging.DEBUG)
    setattr(logger, "_ibancheck_log_detail", bool(detail))
    logger.debug("Logging configured: log_dir=%s console=%s max_lines=%s", log_dir, console, max_lines)
    return logger


def log_event(logger: logging.Logger, event_name: str, message: str, **extra: Any) -> None:
    """
    Structured logging helper:
    - sets event_name and extra_payload on the record
    - appends a readable key=value suffix to the text message
    """
    extra_payload: Dict[str, Any] = extra or {}
    detail_enabled = bool(getattr(logging.getLogger(LOGGER_NAME), "_ibancheck_log_detail", True))

    if not detail_enabled:
        extra_payload = {k: v for k, v in extra_payload.items() if len(repr(v)) <= 400}

    suffix = ""
    if extra_payload:
        suffix = " | " + " ".join(f"{k}={extra_payload[k]!r}" for k in sorted(extra_payload))
    logger.info(
        f"{message}{suffix}",
        extra={"event_name": event_name, "extra_payload": extra_payload},
    )

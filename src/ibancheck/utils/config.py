from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_ENV_VAR = "IBANCHECK_CONFIG"

_TRUE = {"1", "true", "yes", "on"}


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


def save_yaml(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")


def deep_get(d: Dict[str, Any], keys: list[str], default: Any = None) -> Any:
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    accept_printed: bool = False
    log_dir: Path | None = None
    log_console: bool = False
    log_max_lines: int = 5000
    log_detail: bool = True


def resolve_config_path(cli_path: str | None) -> Path | None:
    if cli_path:
        return Path(cli_path)
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(env_path) if env_path else None


def load_settings(path: Path | None) -> Settings:
    """
    Builds Settings from an optional YAML file, then applies env overrides:
      IBANCHECK_LOG_CONSOLE, IBANCHECK_LOG_MAX_LINES, IBANCHECK_LOG_DETAIL
    A missing file means defaults.
    """
    data = load_yaml(path) if path is not None else {}
    if not isinstance(data, dict):
        raise ValueError(f"config {path} must be a mapping, got {type(data).__name__}")

    log_dir = deep_get(data, ["logging", "dir"])
    console = _flag(deep_get(data, ["logging", "console"], False))
    max_lines = int(deep_get(data, ["logging", "max_lines"], 5000))
    detail = _flag(deep_get(data, ["logging", "detail"], True))

    env_console = os.environ.get("IBANCHECK_LOG_CONSOLE")
    if env_console:
        console = _flag(env_console)
    env_max = os.environ.get("IBANCHECK_LOG_MAX_LINES")
    if env_max:
        try:
            val = int(env_max)
            if val > 0:
                max_lines = val
        except ValueError:
            pass
    env_detail = os.environ.get("IBANCHECK_LOG_DETAIL")
    if env_detail:
        detail = _flag(env_detail)

    return Settings(
        accept_printed=_flag(deep_get(data, ["input", "accept_printed"], False)),
        log_dir=Path(log_dir) if log_dir else None,
        log_console=console,
        log_max_lines=max(1, max_lines),
        log_detail=detail,
    )

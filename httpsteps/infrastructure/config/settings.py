# httpsteps/infrastructure/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values

PREFIX = "HTTPSTEPS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    timeout_sec: Optional[float] = None  # None => requests waits forever
    verify_tls: bool = True
    log_level: str = "WARNING"
    diff_color: bool = False


def _env(env_file: Optional[Union[str, Path]]) -> Dict[str, str]:
    """
    .env の値を優先し、無いキーだけ環境変数から補う
    """
    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    values: Dict[str, str] = {}
    if path.exists():
        values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    for key, value in os.environ.items():
        if key not in values:
            values[key] = value
    return values


def _parse_bool(key: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{key}: expected a boolean, got {raw!r}")


def _parse_timeout(key: str, raw: str) -> Optional[float]:
    if not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{key}: expected a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key}: must be positive, got {raw!r}")
    return value


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    values = _env(env_file)
    defaults = Settings()

    timeout = defaults.timeout_sec
    if f"{PREFIX}TIMEOUT_SEC" in values:
        timeout = _parse_timeout(f"{PREFIX}TIMEOUT_SEC", values[f"{PREFIX}TIMEOUT_SEC"])

    verify = defaults.verify_tls
    if f"{PREFIX}VERIFY_TLS" in values:
        verify = _parse_bool(f"{PREFIX}VERIFY_TLS", values[f"{PREFIX}VERIFY_TLS"])

    color = defaults.diff_color
    if f"{PREFIX}DIFF_COLOR" in values:
        color = _parse_bool(f"{PREFIX}DIFF_COLOR", values[f"{PREFIX}DIFF_COLOR"])

    level = values.get(f"{PREFIX}LOG_LEVEL", defaults.log_level).strip().upper() or defaults.log_level

    return Settings(timeout_sec=timeout, verify_tls=verify, log_level=level, diff_color=color)

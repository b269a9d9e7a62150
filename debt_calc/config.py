"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

CURRENCY_OPTIONS: Dict[str, Dict[str, str]] = {
    "PHP": {"label": "Philippine peso", "prefix": "₱", "suffix": ""},
    "PLN": {"label": "Polish złoty", "prefix": "", "suffix": " zł"},
    "USD": {"label": "US dollar", "prefix": "$", "suffix": ""},
    "EUR": {"label": "Euro", "prefix": "€", "suffix": ""},
    "GBP": {"label": "British pound", "prefix": "£", "suffix": ""},
}
DEFAULT_CURRENCY = "PHP"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer; got {value!r}") from exc


@dataclass
class Settings:
    """Settings for the command-line tool and logging.

    None of these change engine arithmetic; the 600-month horizon and the
    epsilons are fixed.
    """

    log_level: str = "WARNING"
    log_json: bool = False
    currency: str = DEFAULT_CURRENCY
    max_rows: int = 120
    default_strategy: Optional[str] = None

    @property
    def currency_prefix(self) -> str:
        return CURRENCY_OPTIONS[self.currency]["prefix"]

    @property
    def currency_suffix(self) -> str:
        return CURRENCY_OPTIONS[self.currency]["suffix"]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        level = environ.get("DEBT_CALC_LOG_LEVEL", "WARNING").upper()
        if level not in LOG_LEVELS:
            level = "WARNING"
        currency = environ.get("DEBT_CALC_CURRENCY", DEFAULT_CURRENCY).upper()
        if currency not in CURRENCY_OPTIONS:
            currency = DEFAULT_CURRENCY
        max_rows = _env_int(environ, "DEBT_CALC_MAX_ROWS", 120)
        return cls(
            log_level=level,
            log_json=_env_bool(environ, "DEBT_CALC_LOG_JSON"),
            currency=currency,
            max_rows=max(1, max_rows),
            default_strategy=environ.get("DEBT_CALC_DEFAULT_STRATEGY") or None,
        )

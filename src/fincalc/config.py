"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "FinCalc"
    LOG_FILENAME = "fincalc.log"
    LOG_TO_FILE = True
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("FINCALC_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("FINCALC_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.PAYOFF_MAX_MONTHS = _env_int("FINCALC_PAYOFF_MAX_MONTHS", 600)
        self.MC_MIN_TRIALS = _env_int("FINCALC_MC_MIN_TRIALS", 100)
        self.MC_MAX_TRIALS = _env_int("FINCALC_MC_MAX_TRIALS", 10_000)
        self.MC_MAX_YEARS = _env_int("FINCALC_MC_MAX_YEARS", 100)
        self.MC_ASYNC_THRESHOLD = _env_int("FINCALC_MC_ASYNC_THRESHOLD", 5_000)
        self.MC_FLOOR_AT_ZERO = _env_bool("FINCALC_MC_FLOOR_AT_ZERO", default=False)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("FINCALC_SECRET_KEY must be set in non-dev mode.")
        if self.MC_MIN_TRIALS > self.MC_MAX_TRIALS:
            raise ValueError("FINCALC_MC_MIN_TRIALS cannot exceed FINCALC_MC_MAX_TRIALS.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("FINCALC_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; keeps logs off disk."""

    TESTING = True
    LOG_TO_FILE = False

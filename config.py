# config.py
"""
Solver and logging configuration.
Configs are frozen values passed into each solve; use with_overrides() to
derive a changed copy.
"""

import math
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any

import pandas as pd

from exceptions import ConfigError

SUPPORTED_BACKENDS = ("gurobi", "pulp")


def check_time_limit(value) -> float:
    """Time limits are finite, positive seconds."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Time limit must be a number of seconds, got {value!r}") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"Time limit must be finite and positive, got {value!r}")
    return seconds


@dataclass(frozen=True)
class SolverConfig:
    # Backend selection ("gurobi" or "pulp"); never switched implicitly
    Backend: str = "gurobi"

    # Wall-clock limit for the single optimize call, in seconds
    TimeLimit: float = 3600

    # Solver console output (0 = silent)
    OutputFlag: int = 0

    # Gurobi thread count (0 = let the solver decide)
    Threads: int = 0

    # Logging
    LogDir: str = "logs"
    LogLevel: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.Backend not in SUPPORTED_BACKENDS:
            raise ConfigError(f"Unknown solver backend: {self.Backend!r} (expected one of {SUPPORTED_BACKENDS})")
        check_time_limit(self.TimeLimit)
        if self.Threads < 0:
            raise ConfigError(f"Threads must be >= 0, got {self.Threads!r}")

    def with_overrides(self, **kwargs) -> "SolverConfig":
        """
        Return a copy with the given fields replaced, with safety for unknown keys.
        Example:
            cfg = DEFAULT_CONFIG.with_overrides(TimeLimit=60, Backend="pulp")
        """
        unknown = [k for k in kwargs if not hasattr(self, k)]
        if unknown:
            raise ConfigError(f"Unknown config field(s): {unknown}")
        return replace(self, **kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = SolverConfig()


def _cell(get, key):
    # Missing keys, NaN cells from pandas and blank strings all mean "keep the default"
    value = get(key, None)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if pd.isna(value):
        return None
    return value


def config_from_row(row) -> SolverConfig:
    """
    Accepts a pandas Series or dict with any of these keys:
      SOLVER_BACKEND
      TIME_LIMIT_SEC
      OUTPUT_FLAG
      THREADS
    Missing or empty keys keep their defaults. Returns a new SolverConfig.
    """
    # Support both Series and dict
    get = row.get if hasattr(row, "get") else (lambda k, d=None: row[k])

    overrides = {}
    try:
        backend = _cell(get, "SOLVER_BACKEND")
        if backend is not None:
            overrides["Backend"] = str(backend).lower()
        time_limit = _cell(get, "TIME_LIMIT_SEC")
        if time_limit is not None:
            overrides["TimeLimit"] = check_time_limit(time_limit)
        output_flag = _cell(get, "OUTPUT_FLAG")
        if output_flag is not None:
            overrides["OutputFlag"] = int(output_flag)
        threads = _cell(get, "THREADS")
        if threads is not None:
            overrides["Threads"] = int(threads)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Bad config row: {e}") from e

    return DEFAULT_CONFIG.with_overrides(**overrides)


__all__ = [
    "SolverConfig",
    "DEFAULT_CONFIG",
    "SUPPORTED_BACKENDS",
    "check_time_limit",
    "config_from_row",
]

import dataclasses
import math

import pandas as pd
import pytest

from config import DEFAULT_CONFIG, SolverConfig, check_time_limit, config_from_row
from exceptions import ConfigError
from solver_adapter import get_adapter


def test_defaults():
    cfg = SolverConfig()
    assert cfg.Backend == "gurobi"
    assert cfg.TimeLimit == 3600
    assert cfg.as_dict()["OutputFlag"] == 0


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.TimeLimit = 5
    assert DEFAULT_CONFIG.TimeLimit == 3600


def test_default_adapter_unaffected_by_derived_configs():
    adapter = get_adapter()
    DEFAULT_CONFIG.with_overrides(TimeLimit=5, Backend="pulp")
    assert adapter.config.TimeLimit == 3600
    assert adapter.config.Backend == "gurobi"
    assert DEFAULT_CONFIG.Backend == "gurobi"


@pytest.mark.parametrize("kwargs", [
    {"Backend": "cplex"},
    {"TimeLimit": 0},
    {"TimeLimit": float("nan")},
    {"TimeLimit": float("inf")},
    {"TimeLimit": "soon"},
    {"Threads": -1},
])
def test_invalid_construction(kwargs):
    with pytest.raises(ConfigError):
        SolverConfig(**kwargs)


def test_with_overrides_leaves_default_untouched():
    cfg = DEFAULT_CONFIG.with_overrides(Backend="pulp", TimeLimit=60)
    assert cfg.Backend == "pulp" and cfg.TimeLimit == 60
    assert DEFAULT_CONFIG.Backend == "gurobi"
    with pytest.raises(ConfigError):
        DEFAULT_CONFIG.with_overrides(Nope=3)
    with pytest.raises(ConfigError):
        DEFAULT_CONFIG.with_overrides(TimeLimit=-1)


@pytest.mark.parametrize("value", [0, -3, float("nan"), float("inf"), None, "abc"])
def test_check_time_limit_rejects(value):
    with pytest.raises(ConfigError):
        check_time_limit(value)


def test_check_time_limit_accepts_numeric_strings():
    assert check_time_limit("2.5") == 2.5


def test_config_from_row_dict():
    cfg = config_from_row({"SOLVER_BACKEND": " PuLP ", "TIME_LIMIT_SEC": "30", "THREADS": 2})
    assert cfg.Backend == "pulp"
    assert cfg.TimeLimit == 30.0
    assert cfg.Threads == 2
    assert cfg.OutputFlag == 0


def test_config_from_row_series():
    cfg = config_from_row(pd.Series({"OUTPUT_FLAG": 1}))
    assert cfg.OutputFlag == 1
    assert cfg.Backend == "gurobi"


def test_config_from_row_skips_empty_cells():
    row = pd.Series({
        "SOLVER_BACKEND": "",
        "TIME_LIMIT_SEC": float("nan"),
        "OUTPUT_FLAG": float("nan"),
        "THREADS": None,
    })
    cfg = config_from_row(row)
    assert cfg == DEFAULT_CONFIG
    assert not math.isnan(cfg.TimeLimit)


@pytest.mark.parametrize("row", [
    {"TIME_LIMIT_SEC": "-5"},
    {"TIME_LIMIT_SEC": float("inf")},
    {"OUTPUT_FLAG": "loud"},
    {"THREADS": "many"},
])
def test_config_from_row_bad_values(row):
    with pytest.raises(ConfigError):
        config_from_row(row)

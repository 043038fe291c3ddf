"""Shared fixtures: the 2016-2021 reference arrear sheet and config isolation."""

import pytest


# Reference sheet: 01.01.2016 - 30.06.2021, net arrear payable 310443
# (printed sheet total is 310442, one rupee of per-segment rounding drift)
SHEET_PAY_EVENTS = [
    {"date": "2016-01-01", "type": "INITIAL", "basic_pay": 49500,
     "drawn_basic_pay": 14680, "drawn_grade_pay": 4300, "drawn_ir": 949},
    {"date": "2016-06-23", "type": "CHANGE", "basic_pay": 50700,
     "drawn_basic_pay": 14680, "drawn_grade_pay": 4700, "drawn_ir": 969},
    {"date": "2017-01-01", "type": "INCREMENT", "basic_pay": 53800,
     "drawn_basic_pay": 15850, "drawn_grade_pay": 4700, "drawn_ir": 1028},
    {"date": "2018-01-01", "type": "INCREMENT", "basic_pay": 55400,
     "drawn_basic_pay": 16470, "drawn_grade_pay": 4700, "drawn_ir": 1059},
    {"date": "2018-05-05", "type": "PROMOTION", "basic_pay": 57200,
     "drawn_basic_pay": 17110, "drawn_grade_pay": 5350, "drawn_ir": 1123},
    {"date": "2019-05-01", "type": "INCREMENT", "basic_pay": 58900,
     "drawn_basic_pay": 17790, "drawn_grade_pay": 5350, "drawn_ir": 1157},
    {"date": "2020-05-01", "type": "INCREMENT", "basic_pay": 60700,
     "drawn_basic_pay": 18490, "drawn_grade_pay": 5350, "drawn_ir": 1192},
    {"date": "2021-05-01", "type": "INCREMENT", "basic_pay": 62500,
     "drawn_basic_pay": 19210, "drawn_grade_pay": 5350, "drawn_ir": 1228},
]

_REVISED = [
    ("2016-01-01", 0), ("2016-07-01", 2), ("2017-01-01", 4), ("2017-07-01", 5),
    ("2018-01-01", 7), ("2018-07-01", 9), ("2019-01-01", 12), ("2019-07-01", 17),
    ("2020-01-01", 17), ("2020-07-01", 17), ("2021-01-01", 17), ("2021-07-01", 31),
]
_PRE_REVISED = [
    ("2016-01-01", 125), ("2016-07-01", 132), ("2017-01-01", 136), ("2017-07-01", 139),
    ("2018-01-01", 142), ("2018-07-01", 148), ("2019-01-01", 154), ("2019-07-01", 164),
    ("2020-01-01", 164), ("2020-07-01", 164), ("2021-01-01", 164), ("2021-07-01", 196),
]

SHEET_DA_RATES = (
    [{"effective_date": d, "percentage": p, "type": "REVISED"} for d, p in _REVISED]
    + [{"effective_date": d, "percentage": p, "type": "PRE_REVISED"} for d, p in _PRE_REVISED]
)


@pytest.fixture
def sheet_pay_events():
    return [dict(e) for e in SHEET_PAY_EVENTS]


@pytest.fixture
def sheet_da_rates():
    return [dict(r) for r in SHEET_DA_RATES]


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("ARREAR_CALC_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir, "tmp_path": tmp_path}

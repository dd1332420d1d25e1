import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from nma_checks import check_dataset
from nma_simulator import COLUMNS, simulate_network


@pytest.fixture
def valid_table() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "study.id": [1, 1, 2, 2, 2],
            "treatment.id": [3, 1, 2, 1, 3],
            "sample.size": [50, 120, 200, 75, 90],
            "response": [15, 60, 140, 0, 90],
        },
        columns=COLUMNS,
    )


def test_valid_table_has_no_errors(valid_table):
    assert check_dataset(valid_table, num_treatments=3) == []


def test_generated_network_passes_checks(example_parameters):
    result = simulate_network(example_parameters)
    assert check_dataset(result.data, 3, example_parameters.sample_size_range) == []


def test_detects_wrong_columns(valid_table):
    errs = check_dataset(valid_table.rename(columns={"response": "events"}), num_treatments=3)
    assert len(errs) == 1
    assert "Columns must be" in errs[0]


def test_detects_empty_table():
    errs = check_dataset(pd.DataFrame({c: [] for c in COLUMNS}, columns=COLUMNS), num_treatments=3)
    assert errs == ["Dataset has no rows."]


def test_detects_single_arm_study(valid_table):
    table = valid_table.drop(index=1).reset_index(drop=True)
    errs = check_dataset(table, num_treatments=3)
    assert any("Study 1: 1 arms" in e for e in errs)


def test_detects_duplicate_arms(valid_table):
    table = valid_table.copy()
    table.loc[4, "treatment.id"] = 2
    errs = check_dataset(table, num_treatments=3)
    assert any("duplicate arms for treatments [2]" in e for e in errs)


def test_detects_out_of_range_values(valid_table):
    table = valid_table.copy()
    table.loc[0, "treatment.id"] = 4
    table.loc[2, "sample.size"] = 201
    table.loc[3, "response"] = -1
    table.loc[4, "response"] = 91

    errs = check_dataset(table, num_treatments=3, sample_size_range=(50, 200))

    assert any("treatment.id outside 1..3" in e for e in errs)
    assert any("sample.size outside [50, 200]" in e for e in errs)
    assert any("2 rows have response outside" in e for e in errs)


def test_detects_unordered_studies(valid_table):
    table = valid_table.iloc[np.r_[2:5, 0:2]].reset_index(drop=True)
    errs = check_dataset(table, num_treatments=3)
    assert any("ascending study.id" in e for e in errs)


def test_detects_gaps_in_study_ids(valid_table):
    table = valid_table.copy()
    table.loc[2:4, "study.id"] = 3

    errs = check_dataset(table, num_treatments=3)

    assert any("without gaps. Missing [2]" in e for e in errs)

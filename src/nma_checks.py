from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from nma_config import DEFAULT_SAMPLE_SIZE_RANGE
from nma_simulator import COLUMNS


def check_dataset(
    data: pd.DataFrame,
    num_treatments: int,
    sample_size_range: Sequence[int] = DEFAULT_SAMPLE_SIZE_RANGE,
) -> List[str]:
    """
    Check a simulated NMA table against the arm-level invariants.
    Returns a list of error messages; an empty list means the table is valid.
    """
    errors = []
    if list(data.columns) != COLUMNS:
        errors.append(f"Columns must be {COLUMNS}. Found {list(data.columns)}.")
        return errors

    if data.empty:
        errors.append("Dataset has no rows.")
        return errors

    low, high = int(sample_size_range[0]), int(sample_size_range[1])

    study_ids = data["study.id"]
    if not study_ids.is_monotonic_increasing:
        errors.append("Rows are not ordered by ascending study.id.")

    present = sorted(int(s) for s in study_ids.unique())
    expected = list(range(1, present[-1] + 1))
    if present != expected:
        missing = sorted(set(expected) - set(present))
        errors.append(f"study.id values must run 1..{present[-1]} without gaps. Missing {missing}.")

    for study_id, group in data.groupby("study.id", sort=True):
        n_arms = len(group)
        if n_arms < 2 or n_arms > num_treatments:
            errors.append(f"Study {study_id}: {n_arms} arms, expected between 2 and {num_treatments}.")
        duplicated = group["treatment.id"][group["treatment.id"].duplicated()].unique().tolist()
        if duplicated:
            errors.append(f"Study {study_id}: duplicate arms for treatments {duplicated}.")

    bad_treatment = data[(data["treatment.id"] < 1) | (data["treatment.id"] > num_treatments)]
    if not bad_treatment.empty:
        errors.append(
            f"{len(bad_treatment)} rows have treatment.id outside 1..{num_treatments}."
        )

    bad_size = data[(data["sample.size"] < low) | (data["sample.size"] > high)]
    if not bad_size.empty:
        errors.append(f"{len(bad_size)} rows have sample.size outside [{low}, {high}].")

    bad_response = data[(data["response"] < 0) | (data["response"] > data["sample.size"])]
    if not bad_response.empty:
        errors.append(f"{len(bad_response)} rows have response outside [0, sample.size].")

    return errors

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from nma_config import (
    DEFAULT_SAMPLE_SIZE_RANGE,
    SimulationParameters,
    validate_parameters,
)

logger = logging.getLogger(__name__)


COLUMNS = ["study.id", "treatment.id", "sample.size", "response"]

RandomSource = Union[np.random.Generator, int, None]


@dataclass(frozen=True)
class ArmRecord:
    study_id: int
    treatment_id: int
    sample_size: int
    response: int


def _draw_study_arms(
    num_treatments: int,
    treatment_effects: Tuple[float, ...],
    sample_size_range: Tuple[int, int],
    rng: np.random.Generator,
) -> List[Tuple[int, int, int]]:
    """
    Draw the arms of one study as (treatment_id, sample_size, response) tuples.
    Treatment ids are 1-based and returned in draw order.
    """
    if num_treatments == 2:
        k = 2
    else:
        k = int(rng.integers(2, num_treatments + 1))

    treatments = rng.choice(num_treatments, size=k, replace=False) + 1

    low, high = sample_size_range
    arms = []
    for treatment_id in treatments:
        sample_size = int(rng.integers(low, high + 1))
        response = int(rng.binomial(sample_size, treatment_effects[treatment_id - 1]))
        arms.append((int(treatment_id), sample_size, response))
    return arms


def _generate(params: SimulationParameters, rng: np.random.Generator) -> pd.DataFrame:
    study_ids: List[int] = []
    treatment_ids: List[int] = []
    sample_sizes: List[int] = []
    responses: List[int] = []

    for study_id in range(1, params.num_studies + 1):
        arms = _draw_study_arms(
            params.num_treatments,
            params.treatment_effects,
            params.sample_size_range,
            rng,
        )
        logger.debug("Study %d: treatments %s", study_id, [a[0] for a in arms])
        for treatment_id, sample_size, response in arms:
            study_ids.append(study_id)
            treatment_ids.append(treatment_id)
            sample_sizes.append(sample_size)
            responses.append(response)

    # Assemble the table once from the column buffers.
    data = pd.DataFrame(
        {
            "study.id": np.asarray(study_ids, dtype=np.int64),
            "treatment.id": np.asarray(treatment_ids, dtype=np.int64),
            "sample.size": np.asarray(sample_sizes, dtype=np.int64),
            "response": np.asarray(responses, dtype=np.int64),
        },
        columns=COLUMNS,
    )
    logger.info(
        "Simulated %d arms across %d studies and %d treatments",
        len(data),
        params.num_studies,
        params.num_treatments,
    )
    return data


def generate_nma(
    num_studies: int,
    num_treatments: int,
    treatment_effects: Sequence[float],
    sample_size_range: Sequence[int] = DEFAULT_SAMPLE_SIZE_RANGE,
    rng: RandomSource = None,
) -> pd.DataFrame:
    """
    Generate a simulated network meta-analysis dataset with binary outcomes.

    Each study draws between 2 and num_treatments distinct treatments. Every
    arm gets a uniform sample size from the inclusive sample_size_range and a
    Binomial(sample_size, treatment_effects[t - 1]) response count.

    Parameters
    ----------
    num_studies : int
        Number of studies to simulate.
    num_treatments : int
        Number of treatments in the network (>= 2).
    treatment_effects : sequence of float
        Probability of success for each treatment, in treatment id order.
    sample_size_range : (int, int)
        Inclusive range of per-arm sample sizes (default (50, 200)).
    rng : np.random.Generator, int or None
        Random source. A Generator is advanced in place; an int seeds a new one.

    Returns
    -------
    pd.DataFrame
        Columns study.id, treatment.id, sample.size, response.

    Raises
    ------
    ConfigurationError
        If the parameters are invalid. Raised before any random draw.
    """
    params = validate_parameters(num_studies, num_treatments, treatment_effects, sample_size_range)
    return _generate(params, np.random.default_rng(rng))


@dataclass(frozen=True)
class NMASimulationResult:
    data: pd.DataFrame
    parameters: SimulationParameters

    def records(self) -> List[ArmRecord]:
        return [
            ArmRecord(
                study_id=int(row[0]),
                treatment_id=int(row[1]),
                sample_size=int(row[2]),
                response=int(row[3]),
            )
            for row in self.data[COLUMNS].itertuples(index=False, name=None)
        ]

    def summary(self) -> Dict[str, Any]:
        """Descriptive statistics of the simulated network."""
        df = self.data
        arms_per_study = df.groupby("study.id").size().value_counts().sort_index()
        by_treatment = df.groupby("treatment.id")[["sample.size", "response"]].sum()
        return {
            "n_studies": int(df["study.id"].nunique()),
            "n_arms": int(len(df)),
            "arms_per_study": {int(k): int(v) for k, v in arms_per_study.items()},
            "treatment_arm_counts": {
                int(k): int(v) for k, v in df["treatment.id"].value_counts().sort_index().items()
            },
            "observed_response_rate": {
                int(t): float(row["response"] / row["sample.size"]) for t, row in by_treatment.iterrows()
            },
            "n_comparisons": int(len(network_comparisons(df))),
        }


def simulate_network(
    parameters: SimulationParameters,
    rng: Optional[np.random.Generator] = None,
) -> NMASimulationResult:
    """Run the generator for a parameter set; seeds from parameters.seed when rng is None."""
    params = validate_parameters(
        parameters.num_studies,
        parameters.num_treatments,
        parameters.treatment_effects,
        parameters.sample_size_range,
        seed=parameters.seed,
    )
    if rng is None:
        rng = np.random.default_rng(params.seed)
    return NMASimulationResult(data=_generate(params, rng), parameters=params)


def network_comparisons(data: pd.DataFrame) -> pd.DataFrame:
    """
    Count the studies that directly compare each pair of treatments.
    Returns columns treatment.a, treatment.b (a < b) and n.studies.
    """
    counts: Dict[Tuple[int, int], int] = {}
    for _, group in data.groupby("study.id", sort=True):
        treatments = sorted(set(int(t) for t in group["treatment.id"]))
        for pair in combinations(treatments, 2):
            counts[pair] = counts.get(pair, 0) + 1

    pairs = sorted(counts)
    return pd.DataFrame(
        {
            "treatment.a": np.asarray([a for a, _ in pairs], dtype=np.int64),
            "treatment.b": np.asarray([b for _, b in pairs], dtype=np.int64),
            "n.studies": np.asarray([counts[p] for p in pairs], dtype=np.int64),
        },
        columns=["treatment.a", "treatment.b", "n.studies"],
    )

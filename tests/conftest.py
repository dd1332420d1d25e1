import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from nma_config import SimulationParameters


@pytest.fixture
def example_parameters() -> SimulationParameters:
    return SimulationParameters(
        num_studies=10,
        num_treatments=3,
        treatment_effects=(0.3, 0.5, 0.7),
        sample_size_range=(50, 200),
        seed=12345,
    )


@pytest.fixture
def large_network_parameters() -> SimulationParameters:
    return SimulationParameters(
        num_studies=200,
        num_treatments=6,
        treatment_effects=(0.0, 0.1, 0.25, 0.5, 0.75, 1.0),
        sample_size_range=(20, 40),
        seed=2024,
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]

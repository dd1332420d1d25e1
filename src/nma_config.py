from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


DEFAULT_SAMPLE_SIZE_RANGE: Tuple[int, int] = (50, 200)


class ConfigurationError(ValueError):
    """Raised when simulation parameters are invalid."""


@dataclass(frozen=True)
class SimulationParameters:
    num_studies: int
    num_treatments: int
    treatment_effects: Tuple[float, ...]
    sample_size_range: Tuple[int, int] = DEFAULT_SAMPLE_SIZE_RANGE
    # Used by simulate_network when no generator is passed in.
    seed: Optional[int] = None


def _as_int(value: object, field_name: str) -> int:
    if isinstance(value, (bool, str)):
        raise ConfigurationError(f"Invalid {field_name}: {value!r}")
    # Exact for Python and numpy integers of any size.
    if isinstance(value, numbers.Integral):
        return int(value)
    try:
        as_float = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid {field_name}: {value}") from exc
    if not as_float.is_integer():
        raise ConfigurationError(f"{field_name} must be an integer. Found {value}.")
    return int(as_float)


def _as_float(value: object, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid {field_name}: {value}") from exc


def validate_parameters(
    num_studies: Any,
    num_treatments: Any,
    treatment_effects: Sequence[Any],
    sample_size_range: Sequence[Any] = DEFAULT_SAMPLE_SIZE_RANGE,
    seed: Optional[int] = None,
) -> SimulationParameters:
    """
    Normalise and validate generator inputs.

    The two checks on treatment_effects (length, then range) run first, in that
    order; the remaining checks close the gaps that would leave the per-study
    treatment count undefined.

    Raises
    ------
    ConfigurationError
        On the first invalid input found.
    """
    num_treatments = _as_int(num_treatments, "num_treatments")

    try:
        effects = tuple(_as_float(p, "treatment_effects") for p in treatment_effects)
    except TypeError as exc:
        raise ConfigurationError("treatment_effects must be a sequence of probabilities.") from exc

    if len(effects) != num_treatments:
        raise ConfigurationError("The length of treatment_effects must equal the number of treatments.")

    # NaN fails both comparisons.
    if any(not (0.0 <= p <= 1.0) for p in effects):
        raise ConfigurationError("Treatment effects must be probabilities between 0 and 1.")

    if num_treatments < 2:
        raise ConfigurationError("num_treatments must be >= 2 so every study can compare two treatments.")

    num_studies = _as_int(num_studies, "num_studies")
    if num_studies < 1:
        raise ConfigurationError("num_studies must be >= 1.")

    try:
        bounds = list(sample_size_range)
    except TypeError as exc:
        raise ConfigurationError("sample_size_range must be a (min, max) pair.") from exc
    if len(bounds) != 2:
        raise ConfigurationError(f"sample_size_range must be a (min, max) pair. Found {len(bounds)} values.")

    low = _as_int(bounds[0], "sample_size_range[0]")
    high = _as_int(bounds[1], "sample_size_range[1]")
    if low <= 0 or high <= 0:
        raise ConfigurationError("sample_size_range values must be positive.")
    if low > high:
        raise ConfigurationError(f"sample_size_range min ({low}) must not exceed max ({high}).")

    if seed is not None:
        seed = _as_int(seed, "seed")
        if seed < 0:
            raise ConfigurationError(f"seed must be a non-negative integer. Found {seed}.")

    return SimulationParameters(
        num_studies=num_studies,
        num_treatments=num_treatments,
        treatment_effects=effects,
        sample_size_range=(low, high),
        seed=seed,
    )


def load_parameters(cfg: Mapping[str, Any]) -> SimulationParameters:
    """
    Expected structure (flexible):
      cfg["simulation"] -> parameter mapping, or the parameters at top level
      keys: num_studies, num_treatments, treatment_effects,
            sample_size_range (optional), seed (optional)
    """
    if "simulation" in cfg and isinstance(cfg["simulation"], Mapping):
        params: Dict[str, Any] = dict(cfg["simulation"])
    else:
        params = dict(cfg)

    missing = [k for k in ("num_studies", "num_treatments", "treatment_effects") if k not in params]
    if missing:
        raise ConfigurationError(f"Missing simulation parameters: {missing}")

    return validate_parameters(
        num_studies=params["num_studies"],
        num_treatments=params["num_treatments"],
        treatment_effects=params["treatment_effects"],
        sample_size_range=params.get("sample_size_range", DEFAULT_SAMPLE_SIZE_RANGE),
        seed=params.get("seed"),
    )

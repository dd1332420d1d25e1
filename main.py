import logging
from pathlib import Path
import sys

# Allow running without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from nma_config import SimulationParameters
from nma_simulator import network_comparisons, simulate_network


EXAMPLE_PARAMETERS = SimulationParameters(
    num_studies=10,
    num_treatments=3,
    treatment_effects=(0.3, 0.5, 0.7),
    sample_size_range=(50, 200),
    seed=12345,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    result = simulate_network(EXAMPLE_PARAMETERS)

    print(result.data.to_string(index=False))
    print("\nDirect comparisons:")
    print(network_comparisons(result.data).to_string(index=False))

    summary = result.summary()
    print(f"\n{summary['n_arms']} arms across {summary['n_studies']} studies")
    for treatment_id, rate in summary["observed_response_rate"].items():
        print(f"- treatment {treatment_id}: observed response rate {rate:.3f}")


if __name__ == "__main__":
    main()

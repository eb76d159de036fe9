"""Build a small synthetic exposure dataset for demos and smoke runs.

Generates:
  data/synthetic/reference_v1.json
  data/synthetic/dataset_v1.json

Construction method:
  1. 8 industries mapped onto 5 SCC codes (two industries fan out to two
     SCCs, one industry maps to none)
  2. 2015 domestic final demand and per-decile consumption shares drawn from
     a seeded RNG, with consumption rising by decile
  3. 20 grid cells: emissions per (cell, SCC) and TOTAL_PM25 concentrations
  4. Gridded population for three named groups and decile population counts

Usage:
    python -m scripts.build_synthetic_dataset
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from popexposure.models.demographics import Decile

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "synthetic"

YEAR = 2015
SEED = 20150101
N_CELLS = 20

INDUSTRY_CODES = [
    "1111A0", "211000", "221100", "324110",
    "336111", "481000", "484000", "531HSO",
]

SCC_CODES = [
    "2801000000",  # agriculture production
    "2102000000",  # industrial fuel combustion
    "2275000000",  # aircraft
    "2202000000",  # on-road diesel
    "2103000000",  # commercial/institutional combustion
]

INDUSTRY_TO_SCC = {
    "1111A0": ["2801000000"],
    "211000": ["2102000000"],
    "221100": ["2102000000", "2103000000"],
    "324110": ["2102000000"],
    "336111": ["2202000000"],
    "481000": ["2275000000"],
    "484000": ["2202000000", "2102000000"],
    # 531HSO (owner-occupied housing) has no direct emissions
}

POPULATION_GROUPS = ["TotalPop", "Black", "Hispanic"]


def _build_reference() -> dict:
    return {
        "industry_codes": INDUSTRY_CODES,
        "scc_codes": SCC_CODES,
        "industry_to_scc": INDUSTRY_TO_SCC,
    }


def _build_dataset(rng: np.random.Generator) -> dict:
    n_ind = len(INDUSTRY_CODES)
    year = str(YEAR)

    final_demand = rng.uniform(1_000.0, 10_000.0, size=n_ind)

    consumption = {}
    for i, decile in enumerate(Decile, start=1):
        share = rng.uniform(0.5, 1.5, size=n_ind) * i / 55.0
        consumption[decile.label] = (final_demand * share).round(3).tolist()

    emissions = rng.gamma(2.0, 5.0, size=(N_CELLS, len(SCC_CODES))).round(4)
    concentrations = rng.gamma(3.0, 2.5, size=N_CELLS).round(4)

    total_pop = rng.integers(500, 50_000, size=N_CELLS)
    black = (total_pop * rng.uniform(0.02, 0.4, size=N_CELLS)).astype(int)
    hispanic = (total_pop * rng.uniform(0.02, 0.4, size=N_CELLS)).astype(int)

    decile_counts = {
        decile.label: int(total_pop.sum() // 10) for decile in Decile
    }

    return {
        "final_demand": {year: {"DOMESTIC": {"ALL_DEMAND": final_demand.round(3).tolist()}}},
        "consumption": {year: consumption},
        "emissions": {year: {"DOMESTIC": emissions.tolist()}},
        "concentrations": {year: {"DOMESTIC": {"TOTAL_PM25": concentrations.tolist()}}},
        "population_grids": {
            year: {
                "TotalPop": total_pop.tolist(),
                "Black": black.tolist(),
                "Hispanic": hispanic.tolist(),
            },
        },
        "population_counts": {year: decile_counts},
    }


def main() -> None:
    """Write the synthetic reference tables and dataset."""
    rng = np.random.default_rng(SEED)
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    reference_path = DATA_DIR / "reference_v1.json"
    dataset_path = DATA_DIR / "dataset_v1.json"

    with reference_path.open("w", encoding="utf-8") as f:
        json.dump(_build_reference(), f, indent=2)
    with dataset_path.open("w", encoding="utf-8") as f:
        json.dump(_build_dataset(rng), f, indent=2)

    print(f"Industries: {len(INDUSTRY_CODES)}  SCCs: {len(SCC_CODES)}  Grid cells: {N_CELLS}")
    print(f"Wrote {reference_path}")
    print(f"Wrote {dataset_path}")


if __name__ == "__main__":
    main()

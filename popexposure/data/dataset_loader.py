"""JSON loaders for reference tables and precomputed datasets.

Provides:
  load_reference_from_json(path) -> ReferenceData
  load_dataset_from_json(path) -> StaticDataset

Reference file layout::

    {
      "industry_codes": ["1111A0", ...],
      "scc_codes": ["2801000000", ...],
      "industry_to_scc": {"1111A0": ["2801000000"], ...}
    }

Dataset file layout (years are string keys)::

    {
      "final_demand":      {"2015": {"DOMESTIC": {"ALL_DEMAND": [...]}}},
      "consumption":       {"2015": {"decile_1": [...], ...}},
      "emissions":         {"2015": {"DOMESTIC": [[...], ...]}},
      "concentrations":    {"2015": {"DOMESTIC": {"TOTAL_PM25": [...]}}},
      "population_grids":  {"2015": {"TotalPop": [...], ...}},
      "population_counts": {"2015": {"decile_1": 12345, ...}}
    }
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from popexposure.models.common import FinalDemandType, Location, Pollutant
from popexposure.models.demographics import group_from_label
from popexposure.models.reference import ReferenceData
from popexposure.providers.static import StaticDataset

_DATASET_SECTIONS = (
    "final_demand",
    "consumption",
    "emissions",
    "concentrations",
    "population_grids",
    "population_counts",
)


def _read_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        msg = f"Top level of {path.name} must be a JSON object"
        raise ValueError(msg)
    return data


def _year(key: str, path: Path) -> int:
    try:
        return int(key)
    except ValueError:
        msg = f"Year key '{key}' in {path.name} is not an integer"
        raise ValueError(msg) from None


def _vector(raw: object, where: str) -> np.ndarray:
    arr = np.array(raw, dtype=np.float64)
    if arr.ndim != 1:
        msg = f"{where} must be a 1-D array, got shape {arr.shape}"
        raise ValueError(msg)
    if np.any(arr < 0):
        msg = f"{where} must be non-negative"
        raise ValueError(msg)
    return arr


def load_reference_from_json(path: str | Path) -> ReferenceData:
    """Load industry/SCC reference tables.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If required fields are missing or the tables are
            inconsistent.
        KeyError: If the mapping names an unknown industry or SCC code.
    """
    path = Path(path)
    data = _read_json(path)

    for required in ("industry_codes", "scc_codes", "industry_to_scc"):
        if required not in data:
            msg = f"Missing '{required}' in {path.name}"
            raise ValueError(msg)

    return ReferenceData.from_code_mapping(
        industry_codes=data["industry_codes"],
        scc_codes=data["scc_codes"],
        mapping=data["industry_to_scc"],
    )


def load_dataset_from_json(path: str | Path) -> StaticDataset:
    """Load a precomputed dataset for :class:`StaticDataProvider`.

    All sections are optional; a missing section simply answers no queries.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If a value has the wrong shape, is negative, or uses an
            unknown enum name.
        KeyError: If a demographic group label is unknown.
    """
    path = Path(path)
    data = _read_json(path)

    unknown = set(data) - set(_DATASET_SECTIONS)
    if unknown:
        msg = f"Unknown sections in {path.name}: {sorted(unknown)}"
        raise ValueError(msg)

    final_demand = {}
    for year_key, by_location in data.get("final_demand", {}).items():
        year = _year(year_key, path)
        for location, by_type in by_location.items():
            for demand_type, vec in by_type.items():
                final_demand[(year, Location(location), FinalDemandType(demand_type))] = (
                    _vector(vec, f"final_demand[{year}][{location}][{demand_type}]")
                )

    consumption = {}
    for year_key, by_group in data.get("consumption", {}).items():
        year = _year(year_key, path)
        for label, vec in by_group.items():
            consumption[(year, group_from_label(label))] = _vector(
                vec, f"consumption[{year}][{label}]",
            )

    emissions = {}
    for year_key, by_location in data.get("emissions", {}).items():
        year = _year(year_key, path)
        for location, raw in by_location.items():
            matrix = np.array(raw, dtype=np.float64)
            if matrix.ndim != 2:
                msg = f"emissions[{year}][{location}] must be a 2-D array, got shape {matrix.shape}"
                raise ValueError(msg)
            emissions[(year, Location(location))] = matrix

    concentrations = {}
    for year_key, by_location in data.get("concentrations", {}).items():
        year = _year(year_key, path)
        for location, by_pollutant in by_location.items():
            for pollutant, vec in by_pollutant.items():
                concentrations[(year, Location(location), Pollutant(pollutant))] = _vector(
                    vec, f"concentrations[{year}][{location}][{pollutant}]",
                )

    population_grids: dict[int, dict[str, np.ndarray]] = {}
    for year_key, by_name in data.get("population_grids", {}).items():
        year = _year(year_key, path)
        population_grids[year] = {
            name: _vector(vec, f"population_grids[{year}][{name}]")
            for name, vec in by_name.items()
        }

    population_counts = {}
    for year_key, by_group in data.get("population_counts", {}).items():
        year = _year(year_key, path)
        for label, count in by_group.items():
            if int(count) != count or count < 0:
                msg = f"population_counts[{year}][{label}] must be a non-negative integer"
                raise ValueError(msg)
            population_counts[(year, group_from_label(label))] = int(count)

    return StaticDataset(
        final_demand=final_demand,
        consumption=consumption,
        emissions=emissions,
        concentrations=concentrations,
        population_grids=population_grids,
        population_counts=population_counts,
    )

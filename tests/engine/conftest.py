"""Shared fixtures for engine tests: the two-sector, two-group scenario."""

from __future__ import annotations

import numpy as np
import pytest

from popexposure.models.common import FinalDemandType, Location, Pollutant
from popexposure.models.demographics import Decile
from popexposure.models.reference import ReferenceData
from popexposure.providers.static import StaticDataProvider, StaticDataset

YEAR = 2015


@pytest.fixture()
def identity_reference() -> ReferenceData:
    """Two industries mapped one-to-one onto two SCCs."""
    return ReferenceData(
        industry_codes=("I1", "I2"),
        scc_codes=("S1", "S2"),
        industry_to_scc=((0,), (1,)),
    )


@pytest.fixture()
def two_group_dataset() -> StaticDataset:
    """Consumption [1,1] and [3,1]; emissions by SCC [10, 20].

    Populations 100 (D1) and 300 (D2). Concentration [5, 10] over two cells
    with gridded groups A = [100, 200] and B = [50, 50].
    """
    return StaticDataset(
        final_demand={
            (YEAR, Location.DOMESTIC, FinalDemandType.ALL_DEMAND): np.array([4.0, 2.0]),
        },
        consumption={
            (YEAR, Decile.D1): np.array([1.0, 1.0]),
            (YEAR, Decile.D2): np.array([3.0, 1.0]),
        },
        emissions={
            # column sums: [10, 20]
            (YEAR, Location.DOMESTIC): np.array([[4.0, 5.0], [6.0, 15.0]]),
        },
        concentrations={
            (YEAR, Location.DOMESTIC, Pollutant.TOTAL_PM25): np.array([5.0, 10.0]),
        },
        population_grids={
            YEAR: {"A": np.array([100.0, 200.0]), "B": np.array([50.0, 50.0])},
        },
        population_counts={
            (YEAR, Decile.D1): 100,
            (YEAR, Decile.D2): 300,
        },
    )


@pytest.fixture()
def two_group_provider(two_group_dataset: StaticDataset) -> StaticDataProvider:
    return StaticDataProvider(two_group_dataset)

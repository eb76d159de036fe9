"""Sector aggregation: industry-indexed vectors to SCC-indexed vectors.

Pure deterministic functions over NumPy arrays. Inputs are never mutated;
outputs are freshly allocated.
"""

from collections.abc import Sequence

import numpy as np

from popexposure.engine.errors import DimensionMismatchError


class SectorAggregator:
    """Collapse industry vectors onto SCC codes via a many-to-many map."""

    def aggregate(
        self,
        *,
        values: np.ndarray,
        industry_to_scc: Sequence[Sequence[int]],
        n_sectors: int,
    ) -> np.ndarray:
        """Aggregate an industry vector into an SCC vector.

        Each industry's full value is added to every SCC it maps to
        (fan-out, not split), so with a one-to-one map the total is
        preserved and with a one-to-many map it is not.

        Args:
            values: Industry-indexed vector.
            industry_to_scc: Industry index → SCC indices.
            n_sectors: Number of SCC codes (output length).

        Returns:
            SCC-indexed vector of length ``n_sectors``.

        Raises:
            DimensionMismatchError: If ``values`` and the map disagree on the
                number of industries, or an SCC index is out of range.
        """
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 1:
            raise DimensionMismatchError("industry vector ndim", 1, values.ndim)
        if len(values) != len(industry_to_scc):
            raise DimensionMismatchError(
                "industry vector length", len(industry_to_scc), len(values),
            )

        sources: list[int] = []
        targets: list[int] = []
        for industry_idx, scc_indices in enumerate(industry_to_scc):
            for scc_idx in scc_indices:
                if not 0 <= scc_idx < n_sectors:
                    raise DimensionMismatchError(
                        f"SCC index for industry {industry_idx} (bound)",
                        n_sectors,
                        scc_idx,
                    )
                sources.append(industry_idx)
                targets.append(scc_idx)

        result = np.zeros(n_sectors, dtype=np.float64)
        # np.add.at accumulates repeated target indices
        np.add.at(
            result,
            np.asarray(targets, dtype=np.intp),
            values[np.asarray(sources, dtype=np.intp)],
        )
        return result

    def collapse_grid(
        self,
        *,
        emissions: np.ndarray,
        n_sectors: int,
    ) -> np.ndarray:
        """Sum a (grid cell × SCC) emissions matrix over grid cells.

        Raises:
            DimensionMismatchError: If the matrix is not 2-D or does not
                have ``n_sectors`` columns.
        """
        emissions = np.asarray(emissions, dtype=np.float64)
        if emissions.ndim != 2:
            raise DimensionMismatchError("emissions matrix ndim", 2, emissions.ndim)
        if emissions.shape[1] != n_sectors:
            raise DimensionMismatchError(
                "emissions matrix columns (#SCC)", n_sectors, emissions.shape[1],
            )
        return emissions.sum(axis=0)

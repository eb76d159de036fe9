"""Immutable reference data: industry codes, SCC codes, industry→SCC map.

Supplied once per pipeline and never mutated. Replaces lookup tables held
on a long-lived model server.
"""

import hashlib
import json
from collections.abc import Mapping, Sequence

from pydantic import Field, model_validator

from popexposure.models.common import PopExposureBase


class ReferenceData(PopExposureBase, frozen=True):
    """Static industry/sector reference tables.

    ``industry_to_scc[i]`` lists the SCC indices industry ``i`` contributes
    to. Entries may be empty; one industry may feed several SCCs.
    """

    industry_codes: tuple[str, ...] = Field(..., min_length=1)
    scc_codes: tuple[str, ...] = Field(..., min_length=1)
    industry_to_scc: tuple[tuple[int, ...], ...] = Field(
        ...,
        description="Industry index → SCC indices (many-to-many).",
    )

    @model_validator(mode="after")
    def _validate_tables(self) -> "ReferenceData":
        if len(set(self.industry_codes)) != len(self.industry_codes):
            raise ValueError("industry_codes must be unique.")
        if len(set(self.scc_codes)) != len(self.scc_codes):
            raise ValueError("scc_codes must be unique.")
        if len(self.industry_to_scc) != len(self.industry_codes):
            raise ValueError(
                f"industry_to_scc has {len(self.industry_to_scc)} entries "
                f"but there are {len(self.industry_codes)} industries."
            )
        n_sectors = len(self.scc_codes)
        for industry_idx, scc_indices in enumerate(self.industry_to_scc):
            for scc_idx in scc_indices:
                if not 0 <= scc_idx < n_sectors:
                    raise ValueError(
                        f"Industry '{self.industry_codes[industry_idx]}' maps to "
                        f"SCC index {scc_idx}, outside [0, {n_sectors})."
                    )
        return self

    @classmethod
    def from_code_mapping(
        cls,
        *,
        industry_codes: Sequence[str],
        scc_codes: Sequence[str],
        mapping: Mapping[str, Sequence[str]],
    ) -> "ReferenceData":
        """Build from a code-keyed mapping ``{industry_code: [scc_code, ...]}``.

        Industries missing from ``mapping`` get an empty entry.

        Raises:
            KeyError: If the mapping names an unknown industry or SCC code.
        """
        scc_index = {code: idx for idx, code in enumerate(scc_codes)}
        unknown = set(mapping) - set(industry_codes)
        if unknown:
            raise KeyError(f"Mapping references unknown industries: {sorted(unknown)}")

        industry_to_scc: list[tuple[int, ...]] = []
        for industry in industry_codes:
            targets: list[int] = []
            for scc in mapping.get(industry, ()):
                if scc not in scc_index:
                    raise KeyError(
                        f"Industry '{industry}' maps to unknown SCC code '{scc}'."
                    )
                targets.append(scc_index[scc])
            industry_to_scc.append(tuple(targets))

        return cls(
            industry_codes=tuple(industry_codes),
            scc_codes=tuple(scc_codes),
            industry_to_scc=tuple(industry_to_scc),
        )

    @property
    def n_industries(self) -> int:
        return len(self.industry_codes)

    @property
    def n_sectors(self) -> int:
        return len(self.scc_codes)

    @property
    def checksum(self) -> str:
        """SHA-256 over the canonical JSON form, for run provenance."""
        payload = json.dumps(
            {
                "industry_codes": list(self.industry_codes),
                "scc_codes": list(self.scc_codes),
                "industry_to_scc": [list(t) for t in self.industry_to_scc],
            },
            separators=(",", ":"),
        )
        return f"sha256:{hashlib.sha256(payload.encode()).hexdigest()}"

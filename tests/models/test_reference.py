"""Tests for immutable industry/SCC reference data."""

import pytest
from pydantic import ValidationError

from popexposure.models.reference import ReferenceData


def _reference() -> ReferenceData:
    return ReferenceData.from_code_mapping(
        industry_codes=["I1", "I2", "I3"],
        scc_codes=["S1", "S2"],
        mapping={"I1": ["S1"], "I2": ["S1", "S2"]},
    )


class TestConstruction:
    """Validated at construction."""

    def test_from_code_mapping(self) -> None:
        ref = _reference()
        assert ref.industry_to_scc == ((0,), (0, 1), ())
        assert ref.n_industries == 3
        assert ref.n_sectors == 2

    def test_mapping_length_must_match_industries(self) -> None:
        with pytest.raises(ValidationError, match="industry_to_scc has 1 entries"):
            ReferenceData(
                industry_codes=("I1", "I2"),
                scc_codes=("S1",),
                industry_to_scc=((0,),),
            )

    def test_scc_index_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="outside"):
            ReferenceData(
                industry_codes=("I1",),
                scc_codes=("S1",),
                industry_to_scc=((1,),),
            )

    def test_duplicate_scc_codes(self) -> None:
        with pytest.raises(ValidationError, match="scc_codes must be unique"):
            ReferenceData(
                industry_codes=("I1",),
                scc_codes=("S1", "S1"),
                industry_to_scc=((0,),),
            )

    def test_unknown_scc_in_mapping(self) -> None:
        with pytest.raises(KeyError, match="unknown SCC code 'S9'"):
            ReferenceData.from_code_mapping(
                industry_codes=["I1"], scc_codes=["S1"], mapping={"I1": ["S9"]},
            )

    def test_unknown_industry_in_mapping(self) -> None:
        with pytest.raises(KeyError, match="unknown industries"):
            ReferenceData.from_code_mapping(
                industry_codes=["I1"], scc_codes=["S1"], mapping={"I7": ["S1"]},
            )


class TestImmutability:
    """Reference data is frozen and checksummed."""

    def test_frozen(self) -> None:
        ref = _reference()
        with pytest.raises(ValidationError):
            ref.scc_codes = ("X",)

    def test_checksum_stable(self) -> None:
        assert _reference().checksum == _reference().checksum
        assert _reference().checksum.startswith("sha256:")

    def test_checksum_changes_with_mapping(self) -> None:
        other = ReferenceData.from_code_mapping(
            industry_codes=["I1", "I2", "I3"],
            scc_codes=["S1", "S2"],
            mapping={"I1": ["S2"], "I2": ["S1", "S2"]},
        )
        assert other.checksum != _reference().checksum

"""Tests for the closed demographic group domain."""

import pytest

from popexposure.models.demographics import (
    ALL_GROUPS,
    AllGroups,
    Decile,
    DemographicDimension,
    Ethnicity,
    demographic_groups,
    group_from_label,
    validate_group_set,
)


class TestEnumeration:
    """demographic_groups never yields the whole-population aggregate."""

    def test_deciles(self) -> None:
        groups = demographic_groups(DemographicDimension.DECILE)
        assert groups == list(Decile)
        assert len(groups) == 10
        assert ALL_GROUPS not in groups

    def test_ethnicities(self) -> None:
        groups = demographic_groups("ETHNICITY")
        assert groups == [Ethnicity.BLACK, Ethnicity.HISPANIC, Ethnicity.WHITE_OTHER]

    def test_unknown_dimension(self) -> None:
        with pytest.raises(ValueError):
            demographic_groups("AGE")

    def test_dimensions(self) -> None:
        assert Decile.D4.dimension == DemographicDimension.DECILE
        assert Ethnicity.BLACK.dimension == DemographicDimension.ETHNICITY


class TestLabels:
    """Stable labels and label lookup."""

    def test_decile_labels(self) -> None:
        assert Decile.D1.label == "decile_1"
        assert Decile.D10.label == "decile_10"

    def test_ethnicity_labels(self) -> None:
        assert Ethnicity.WHITE_OTHER.label == "white_other"

    def test_round_trip_every_group(self) -> None:
        for group in [*Decile, *Ethnicity]:
            assert group_from_label(group.label) is group

    def test_lookup_is_case_insensitive(self) -> None:
        assert group_from_label(" Hispanic ") is Ethnicity.HISPANIC

    def test_all_label_not_resolvable(self) -> None:
        assert ALL_GROUPS.label == "all"
        with pytest.raises(KeyError, match="Unknown demographic group"):
            group_from_label("all")


class TestValidateGroupSet:
    """Aggregation sets: non-empty, unique, concrete groups only."""

    def test_valid_mixed_set(self) -> None:
        groups = validate_group_set((Decile.D2, Ethnicity.BLACK))
        assert groups == [Decile.D2, Ethnicity.BLACK]

    def test_sentinel_rejected(self) -> None:
        with pytest.raises(ValueError, match="whole-population"):
            validate_group_set([Decile.D1, AllGroups.ALL])

    def test_duplicates_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            validate_group_set([Decile.D1, Decile.D1])

    def test_non_group_rejected(self) -> None:
        with pytest.raises(ValueError, match="Not a demographic group"):
            validate_group_set([Decile.D1, "D2"])

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="At least one"):
            validate_group_set([])

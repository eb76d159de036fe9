"""Demographic group domain: income deciles and ethnicities.

The domain is closed: every group is a member of ``Decile`` or
``Ethnicity``. The whole-population aggregate is its own enum
(``AllGroups``) and is never produced by :func:`demographic_groups`, so it
cannot leak into a per-group aggregation set.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class DemographicDimension(StrEnum):
    """Axis along which the population is split into groups."""

    DECILE = "DECILE"
    ETHNICITY = "ETHNICITY"


class Decile(StrEnum):
    """Household income decile (1 = lowest income)."""

    D1 = "D1"
    D2 = "D2"
    D3 = "D3"
    D4 = "D4"
    D5 = "D5"
    D6 = "D6"
    D7 = "D7"
    D8 = "D8"
    D9 = "D9"
    D10 = "D10"

    @property
    def dimension(self) -> DemographicDimension:
        return DemographicDimension.DECILE

    @property
    def label(self) -> str:
        """Stable lower-case label, e.g. ``decile_3``."""
        return f"decile_{self.value[1:]}"


class Ethnicity(StrEnum):
    """Race/ethnicity grouping used by the consumer expenditure survey."""

    BLACK = "BLACK"
    HISPANIC = "HISPANIC"
    WHITE_OTHER = "WHITE_OTHER"

    @property
    def dimension(self) -> DemographicDimension:
        return DemographicDimension.ETHNICITY

    @property
    def label(self) -> str:
        return self.value.lower()


class AllGroups(StrEnum):
    """Whole-population aggregate. Not a member of any aggregation set."""

    ALL = "ALL"

    @property
    def label(self) -> str:
        return "all"


ALL_GROUPS = AllGroups.ALL

DemographicGroup = Decile | Ethnicity

_DIMENSION_MEMBERS: dict[DemographicDimension, tuple[DemographicGroup, ...]] = {
    DemographicDimension.DECILE: tuple(Decile),
    DemographicDimension.ETHNICITY: tuple(Ethnicity),
}

_LABEL_TO_GROUP: dict[str, DemographicGroup] = {
    member.label: member
    for members in _DIMENSION_MEMBERS.values()
    for member in members
}


def demographic_groups(dimension: DemographicDimension | str) -> list[DemographicGroup]:
    """Return every group along ``dimension`` in canonical order."""
    return list(_DIMENSION_MEMBERS[DemographicDimension(dimension)])


def group_from_label(label: str) -> DemographicGroup:
    """Resolve a label such as ``decile_3`` or ``hispanic`` to its group.

    Raises:
        KeyError: If the label does not name a concrete group. The
            whole-population label ``all`` does not resolve.
    """
    try:
        return _LABEL_TO_GROUP[label.strip().lower()]
    except KeyError:
        raise KeyError(
            f"Unknown demographic group label: '{label}'. "
            f"Valid labels: {sorted(_LABEL_TO_GROUP)}"
        ) from None


def validate_group_set(groups: Iterable[object]) -> list[DemographicGroup]:
    """Check that ``groups`` is a usable aggregation set.

    Returns:
        The groups as a list, order preserved.

    Raises:
        ValueError: If the set is empty, contains the whole-population
            aggregate, contains something that is not a group, or repeats
            a group.
    """
    result: list[DemographicGroup] = []
    seen: set[DemographicGroup] = set()
    for group in groups:
        if isinstance(group, AllGroups):
            raise ValueError(
                "The whole-population aggregate cannot be part of a "
                "per-group aggregation set."
            )
        if not isinstance(group, Decile | Ethnicity):
            raise ValueError(f"Not a demographic group: {group!r}.")
        if group in seen:
            raise ValueError(f"Duplicate demographic group: {group.label}.")
        seen.add(group)
        result.append(group)
    if not result:
        raise ValueError("At least one demographic group is required.")
    return result

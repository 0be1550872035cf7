"""
🗂️ Module: grouping.py

Partitioning strategies for the outlier detector.

The detector runs one algorithm over a list of (key, members) groups. In
neighborhood mode every neighborhood is a group; in global mode the whole valid
population is a single group with key None. Group order is the order in which
neighborhoods are first seen, so results are reproducible run to run.
"""

from valuation_outliers.m05_detect_outliers.attribute_access import get_neighborhood


def group_by_neighborhood(records: list) -> dict[str, list]:
    """
    Group records by neighborhood, preserving first-seen order.

    Records without a neighborhood are left out of every group.
    """
    groups: dict[str, list] = {}
    for record in records:
        neighborhood = get_neighborhood(record)
        if neighborhood is None:
            continue
        groups.setdefault(neighborhood, []).append(record)
    return groups


class GlobalGrouping:
    """Every valid property in one group."""

    segmented = False

    def partition(self, records: list) -> list[tuple]:
        return [(None, list(records))]


class NeighborhoodGrouping:
    """One group per neighborhood; properties without one are not analyzed."""

    segmented = True

    def partition(self, records: list) -> list[tuple]:
        return list(group_by_neighborhood(records).items())


def grouping_for(neighborhood_context: bool):
    return NeighborhoodGrouping() if neighborhood_context else GlobalGrouping()

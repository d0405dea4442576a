"""
Filter and aggregate simulated swipe events into hourly dining hall counts.

Everything here is a pure function of its inputs: the event snapshot and the
reference lists are never mutated, so one snapshot can back any number of
filter changes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

from reference_data import GENDERS, ReferenceLists, default_reference_lists
from swipe_generator import SwipeEvent

logger = logging.getLogger(__name__)

ALL = 'All'
HOURS_PER_DAY = 24


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00 - {hour + 1:02d}:00"


@dataclass(frozen=True)
class FilterSelection:
    """Active dashboard filters; 'All' disables a dimension."""

    gender: str = ALL
    residence_hall: str = ALL
    college: str = ALL

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> 'FilterSelection':
        """Build a selection from request arguments, treating missing or blank values as 'All'."""
        def value(key):
            raw = mapping.get(key)
            if raw is None or not str(raw).strip():
                return ALL
            return str(raw).strip()

        return cls(value('gender'), value('residence_hall'), value('college'))

    def describe(self) -> str:
        halls = 'All Halls' if self.residence_hall == ALL else self.residence_hall
        colleges = 'All Colleges' if self.college == ALL else self.college
        return f"{self.gender} Swipes from {halls} in {colleges}"


@dataclass(frozen=True)
class HourlyBucket:
    hour: int
    label: str
    north: int = 0
    south: int = 0
    total: int = 0

    def to_dict(self) -> Dict:
        return {
            'hour': self.hour,
            'label': self.label,
            'north': self.north,
            'south': self.south,
            'total': self.total,
        }


@dataclass(frozen=True)
class DailySwipeSummary:
    """
    Hourly counts for one filter selection plus whole-day sums.

    ``filter_consistent`` is False when the selection could never match, e.g.
    a Male filter combined with a Female hall or a hall that is not on the
    reference list. The buckets are all zero in that case; the flag lets the
    caller tell an invalid combination apart from a quiet day.
    """

    selection: FilterSelection
    buckets: Tuple[HourlyBucket, ...]
    total_north: int
    total_south: int
    total_all: int
    filter_consistent: bool = True

    def peak_hour(self) -> Optional[HourlyBucket]:
        """Busiest bucket by total swipes, earliest on ties; None for an empty day."""
        if self.total_all == 0:
            return None
        return max(self.buckets, key=lambda bucket: (bucket.total, -bucket.hour))

    def to_dict(self) -> Dict:
        peak = self.peak_hour()
        return {
            'title': self.selection.describe(),
            'filters': {
                'gender': self.selection.gender,
                'residence_hall': self.selection.residence_hall,
                'college': self.selection.college,
            },
            'filter_consistent': self.filter_consistent,
            'hours': [bucket.to_dict() for bucket in self.buckets],
            'total_north': self.total_north,
            'total_south': self.total_south,
            'total_all': self.total_all,
            'peak_hour': peak.to_dict() if peak else None,
        }

    def to_dataframe(self, include_total_row: bool = True) -> pd.DataFrame:
        """Hourly table as shown on the dashboard, closed by a 'Daily Total' row."""
        rows = [bucket.to_dict() for bucket in self.buckets]
        if include_total_row:
            rows.append({
                'hour': None,
                'label': 'Daily Total',
                'north': self.total_north,
                'south': self.total_south,
                'total': self.total_all,
            })
        df = pd.DataFrame(rows, columns=['hour', 'label', 'north', 'south', 'total'])
        df['hour'] = df['hour'].astype('Int64')
        return df


def is_consistent(selection: FilterSelection, reference_lists: ReferenceLists) -> bool:
    """
    Whether any event could match the selection.

    Unknown filter values match nothing, and a specific gender combined with a
    specific hall requires the hall to house that gender.
    """
    if selection.gender != ALL and selection.gender not in GENDERS:
        return False
    if selection.residence_hall != ALL and not reference_lists.has_hall(selection.residence_hall):
        return False
    if selection.college != ALL and not reference_lists.has_college(selection.college):
        return False

    if selection.gender != ALL and selection.residence_hall != ALL:
        return reference_lists.hall_gender(selection.residence_hall) == selection.gender
    return True


def _attributes_match(event: SwipeEvent, selection: FilterSelection) -> bool:
    gender_matches = selection.gender == ALL or event.gender == selection.gender
    hall_matches = selection.residence_hall == ALL or event.residence_hall == selection.residence_hall
    college_matches = selection.college == ALL or event.college == selection.college
    return gender_matches and hall_matches and college_matches


def matches(event: SwipeEvent, selection: FilterSelection, reference_lists: ReferenceLists) -> bool:
    """Per-event selection rule, including the gender/hall consistency check."""
    return _attributes_match(event, selection) and is_consistent(selection, reference_lists)


def aggregate(events: Iterable[SwipeEvent], selection: Optional[FilterSelection] = None,
              reference_lists: Optional[ReferenceLists] = None) -> DailySwipeSummary:
    """
    Reduce matching events into 24 hourly buckets and daily totals.

    Args:
        events: Swipe events for one simulated day
        selection: Active filters; defaults to All/All/All
        reference_lists: Hall and college lists used to validate the filters

    Returns:
        DailySwipeSummary with exactly 24 buckets in hour order
    """
    if selection is None:
        selection = FilterSelection()
    if reference_lists is None:
        reference_lists = default_reference_lists()

    north = [0] * HOURS_PER_DAY
    south = [0] * HOURS_PER_DAY

    consistent = is_consistent(selection, reference_lists)
    if not consistent:
        logger.debug(f"Filter selection '{selection.describe()}' can never match; returning empty day")
    else:
        for event in events:
            if not (0 <= event.hour < HOURS_PER_DAY) or not _attributes_match(event, selection):
                continue
            if event.location == 'north':
                north[event.hour] += 1
            elif event.location == 'south':
                south[event.hour] += 1

    buckets = tuple(
        HourlyBucket(hour, hour_label(hour), north[hour], south[hour], north[hour] + south[hour])
        for hour in range(HOURS_PER_DAY)
    )
    total_north = sum(bucket.north for bucket in buckets)
    total_south = sum(bucket.south for bucket in buckets)
    total_all = sum(bucket.total for bucket in buckets)

    return DailySwipeSummary(selection, buckets, total_north, total_south, total_all, consistent)

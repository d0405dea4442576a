import copy
import json
import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from reference_data import GENDERS, LOW_ATTENDANCE_COLLEGE, ReferenceLists, default_reference_lists

LOCATIONS = ('north', 'south')


@dataclass(frozen=True)
class SwipeEvent:
    """One simulated student entering a dining hall."""

    hour: int
    location: str
    gender: str
    residence_hall: str
    college: str

    def to_dict(self) -> Dict:
        return asdict(self)


class SwipeEventGenerator:
    """
    Synthetic swipe generator for one day at the North and South dining halls.

    Demand is modelled per hour as a uniform draw from a meal-window range.
    Each candidate swipe gets a gender, a residence hall of that gender, a
    college and a dining hall. Colleges listed under ``attendance_overrides``
    can skip swipes inside given hour windows and optionally move them to a
    later hour, which is how architecture students' habit of skipping lunch
    and eating dinner late is represented.

    The random source is injectable so tests can pin a seeded
    ``numpy.random.Generator``.
    """

    def __init__(self, config: Dict = None, reference_lists: Optional[ReferenceLists] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize generator with configuration and reference data

        Args:
            config: Dictionary of configuration parameters to override defaults
            reference_lists: Residence halls and colleges to draw from
            rng: Random source; defaults to one seeded from config['random_seed']
        """
        self.logger = self._setup_logging()
        self.config = self._load_default_config()
        if config:
            self._update_config_recursively(self.config, config)
        self._validate_config()

        self.reference_lists = reference_lists if reference_lists is not None else default_reference_lists()
        self.rng = rng if rng is not None else np.random.default_rng(self.config['random_seed'])

        self._setup_hall_pools()

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for the swipe generator."""
        logger = logging.getLogger(self.__class__.__name__)
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        return logger

    def _update_config_recursively(self, base_dict: Dict, update_dict: Dict):
        """Recursively update nested configuration dictionary"""
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._update_config_recursively(base_dict[key], value)
            else:
                base_dict[key] = value

    def _load_default_config(self) -> Dict:
        """
        Default demand envelopes and attendance overrides for a single campus day
        """
        return {
            # None draws fresh OS entropy on every run
            'random_seed': None,
            'dashboard_date': 'June 4, 2025 (Simulated Data)',

            'genders': list(GENDERS),
            'locations': list(LOCATIONS),

            # Swipes per hour, drawn from [low, high). Hour windows are inclusive
            # and the first matching window wins.
            'hourly_demand': [
                {'name': 'breakfast', 'hours': [7, 9], 'range': [300, 600]},
                {'name': 'lunch', 'hours': [11, 13], 'range': [600, 1000]},
                {'name': 'dinner', 'hours': [17, 19], 'range': [700, 1200]},
                {'name': 'early_morning', 'hours': [5, 6], 'range': [20, 150]},
                {'name': 'late_evening', 'hours': [20, 21], 'range': [50, 300]},
            ],
            'off_peak_range': [0, 30],

            # Per-college habits applied to each candidate swipe
            'attendance_overrides': {
                LOW_ATTENDANCE_COLLEGE: [
                    {'name': 'lunch', 'hours': [11, 13], 'skip_probability': 0.9},
                    {
                        'name': 'early_dinner',
                        'hours': [17, 18],
                        'skip_probability': 0.7,
                        'reschedule_probability': 0.7,
                        'reschedule_hours': [19, 23],
                    },
                ],
            },
        }

    def _validate_config(self):
        """Reject demand tables and override rules that cannot be sampled"""
        def check_hours(label, hours):
            start, end = hours
            if not (0 <= start <= end <= 23):
                raise ValueError(f"{label}: hour window {hours} must satisfy 0 <= start <= end <= 23")

        def check_range(label, value_range):
            low, high = value_range
            if low < 0 or high <= low:
                raise ValueError(f"{label}: range {value_range} must satisfy 0 <= low < high")

        def check_probability(label, value):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{label}: probability {value} must be within [0, 1]")

        def check_keys(label, entry, keys):
            missing = [key for key in keys if key not in entry]
            if missing:
                raise ValueError(f"{label}: missing required key(s) {', '.join(missing)}")

        def check_values(key, allowed):
            values = self.config[key]
            unknown = sorted(set(values) - set(allowed))
            if not values or unknown:
                raise ValueError(f"{key}: {values} must be a non-empty subset of {list(allowed)}")

        check_values('genders', GENDERS)
        check_values('locations', LOCATIONS)

        for window in self.config['hourly_demand']:
            label = window.get('name', 'window')
            check_keys(label, window, ('hours', 'range'))
            check_hours(label, window['hours'])
            check_range(label, window['range'])
        check_range('off_peak', self.config['off_peak_range'])

        for college, rules in self.config['attendance_overrides'].items():
            for rule in rules:
                label = f"{college}/{rule.get('name', 'rule')}"
                check_keys(label, rule, ('hours',))
                if 'reschedule_probability' in rule:
                    check_keys(label, rule, ('reschedule_hours',))
                check_hours(label, rule['hours'])
                check_probability(label, rule.get('skip_probability', 0.0))
                if 'reschedule_probability' in rule:
                    check_probability(label, rule['reschedule_probability'])
                    check_hours(label, rule['reschedule_hours'])

    def _setup_hall_pools(self):
        """Index residence halls by gender for candidate draws"""
        self.hall_pools = {
            gender: [hall.name for hall in self.reference_lists.halls_for_gender(gender)]
            for gender in self.config['genders']
        }

        empty = [gender for gender, halls in self.hall_pools.items() if not halls]
        if empty:
            self.logger.warning(f"No residence halls for {', '.join(empty)}; those swipes will be dropped")
        if not self.reference_lists.colleges:
            self.logger.warning("No colleges configured; every swipe will be dropped")

    def hourly_demand_range(self, hour: int) -> Tuple[int, int]:
        """Half-open [low, high) swipe count range for an hour of the day."""
        for window in self.config['hourly_demand']:
            start, end = window['hours']
            if start <= hour <= end:
                low, high = window['range']
                return low, high
        low, high = self.config['off_peak_range']
        return low, high

    def override_rule(self, college: str, hour: int) -> Optional[Dict]:
        """First attendance override of a college covering the hour, if any."""
        for rule in self.config['attendance_overrides'].get(college, []):
            start, end = rule['hours']
            if start <= hour <= end:
                return rule
        return None

    def _draw(self, options: List[str]) -> str:
        return options[int(self.rng.integers(len(options)))]

    def _generate_hour(self, hour: int, events: List[SwipeEvent]):
        low, high = self.hourly_demand_range(hour)
        expected_swipes = int(self.rng.integers(low, high))

        colleges = self.reference_lists.colleges
        for _ in range(expected_swipes):
            gender = self._draw(self.config['genders'])
            halls = self.hall_pools.get(gender)
            if not halls or not colleges:
                continue

            residence_hall = self._draw(halls)
            college = self._draw(colleges)
            location = self._draw(self.config['locations'])

            include_swipe = True
            late_hour = None
            rule = self.override_rule(college, hour)
            if rule is not None and self.rng.random() < rule.get('skip_probability', 0.0):
                include_swipe = False
                if 'reschedule_probability' in rule and self.rng.random() < rule['reschedule_probability']:
                    late_start, late_end = rule['reschedule_hours']
                    late_hour = int(self.rng.integers(late_start, late_end + 1))

            if include_swipe:
                events.append(SwipeEvent(hour, location, gender, residence_hall, college))
            if late_hour is not None:
                events.append(SwipeEvent(late_hour, location, gender, residence_hall, college))

    def generate_day(self) -> Tuple[SwipeEvent, ...]:
        """
        Generate every swipe for one simulated day.

        Returns:
            Immutable tuple of SwipeEvent in generation order
        """
        events: List[SwipeEvent] = []
        for hour in range(24):
            self._generate_hour(hour, events)

        self.logger.info(f"Generated {len(events):,} swipe events for {self.config['dashboard_date']}")
        return tuple(events)

    @staticmethod
    def to_dataframe(events) -> pd.DataFrame:
        """One row per swipe event."""
        columns = ['hour', 'location', 'gender', 'residence_hall', 'college']
        return pd.DataFrame([event.to_dict() for event in events], columns=columns)

    def save_config(self, filepath: str):
        """Save current configuration to JSON file"""
        with open(filepath, 'w') as f:
            json.dump(self.config, f, indent=2, default=str)
        self.logger.info(f"Configuration saved to {filepath}")

    def load_config(self, filepath: str):
        """Load configuration from JSON file"""
        with open(filepath, 'r') as f:
            loaded_config = json.load(f)
        updated = copy.deepcopy(self.config)
        self._update_config_recursively(updated, loaded_config)
        previous, self.config = self.config, updated
        try:
            self._validate_config()
        except ValueError:
            self.config = previous
            raise
        self._setup_hall_pools()
        self.logger.info(f"Configuration loaded from {filepath}")

# Example usage:
# generator = SwipeEventGenerator({'random_seed': 42})
# events = generator.generate_day()
# df = SwipeEventGenerator.to_dataframe(events)
# print(df.groupby(['hour', 'location']).size().unstack(fill_value=0))

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

GENDERS = ('Male', 'Female')

# College whose students mostly skip lunch and push dinner late
LOW_ATTENDANCE_COLLEGE = 'School of Architecture'


@dataclass(frozen=True)
class ResidenceHall:
    """A residence hall and the single gender it houses."""

    name: str
    gender: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Residence hall name must not be empty")
        if self.gender not in GENDERS:
            raise ValueError(
                f"Residence hall '{self.name}' has gender '{self.gender}', expected one of {GENDERS}"
            )


@dataclass(frozen=True)
class ReferenceLists:
    """
    Static campus reference data shared by the generator and the aggregator.

    Halls are kept sorted by name and colleges alphabetically, matching the
    order the dashboard dropdowns show them in.
    """

    residence_halls: Tuple[ResidenceHall, ...] = field(default_factory=tuple)
    colleges: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        halls = tuple(sorted(self.residence_halls, key=lambda hall: hall.name))
        names = [hall.name for hall in halls]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate residence halls: {', '.join(duplicates)}")

        colleges = tuple(sorted(self.colleges))
        duplicate_colleges = sorted({name for name in colleges if colleges.count(name) > 1})
        if duplicate_colleges:
            raise ValueError(f"Duplicate colleges: {', '.join(duplicate_colleges)}")
        if any(not college or not college.strip() for college in colleges):
            raise ValueError("College names must not be empty")

        object.__setattr__(self, 'residence_halls', halls)
        object.__setattr__(self, 'colleges', colleges)

    def halls_for_gender(self, gender: str) -> Tuple[ResidenceHall, ...]:
        return tuple(hall for hall in self.residence_halls if hall.gender == gender)

    def hall_gender(self, name: str) -> Optional[str]:
        """Declared gender of a hall, or None if the hall is unknown."""
        for hall in self.residence_halls:
            if hall.name == name:
                return hall.gender
        return None

    def hall_names(self) -> List[str]:
        return [hall.name for hall in self.residence_halls]

    def has_hall(self, name: str) -> bool:
        return self.hall_gender(name) is not None

    def has_college(self, name: str) -> bool:
        return name in self.colleges

    def to_dict(self) -> Dict:
        return {
            'residence_halls': [{'name': hall.name, 'gender': hall.gender} for hall in self.residence_halls],
            'colleges': list(self.colleges),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ReferenceLists':
        halls = [ResidenceHall(item['name'], item['gender']) for item in data.get('residence_halls', [])]
        return cls(tuple(halls), tuple(data.get('colleges', [])))

    @classmethod
    def from_pairs(cls, halls: Iterable[Tuple[str, str]], colleges: Iterable[str]) -> 'ReferenceLists':
        return cls(tuple(ResidenceHall(name, gender) for name, gender in halls), tuple(colleges))

    def save(self, filepath: str):
        """Save reference lists to a JSON file"""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'ReferenceLists':
        """Load reference lists from a JSON file"""
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))


# Notre Dame residence halls with the gender each one houses
DEFAULT_RESIDENCE_HALLS = [
    ('Alumni Hall', 'Male'),
    ('Badin Hall', 'Female'),
    ('Baumer Hall', 'Male'),
    ('Breen-Phillips Hall', 'Female'),
    ('Carroll Hall', 'Male'),
    ('Cavanaugh Hall', 'Female'),
    ('Dillon Hall', 'Male'),
    ('Duncan Hall', 'Male'),
    ('Dunne Hall', 'Male'),
    ('Farley Hall', 'Female'),
    ('Flaherty Hall', 'Female'),
    ('Graham Family Hall', 'Male'),
    ('Howard Hall', 'Female'),
    ('Johnson Family Hall', 'Female'),
    ('Keenan Hall', 'Male'),
    ('Keough Hall', 'Male'),
    ('Knott Hall', 'Male'),
    ('Lewis Hall', 'Female'),
    ('Lyons Hall', 'Female'),
    ('McGlinn Hall', 'Female'),
    ('Morrissey Hall', 'Male'),
    ("O'Neill Family Hall", 'Male'),
    ('Pasquerilla East Hall', 'Female'),
    ('Pasquerilla West Hall', 'Female'),
    ('Ryan Hall', 'Female'),
    ('Siegfried Hall', 'Male'),
    ('Sorin Hall', 'Male'),
    ("St. Edward's Hall", 'Male'),
    ('Stanford Hall', 'Male'),
    ('Walsh Hall', 'Female'),
    ('Welsh Family Hall', 'Female'),
    ('Zahm Hall', 'Male'),  # includes Coyle Community
    ('Undergraduate Community at Fischer', 'Female'),
]

DEFAULT_COLLEGES = [
    'School of Architecture',
    'College of Arts and Letters',
    'Mendoza College of Business',
    'College of Engineering',
    'Keough School of Global Affairs',
    'College of Science',
]


def default_reference_lists() -> ReferenceLists:
    """Built-in campus halls and colleges."""
    return ReferenceLists.from_pairs(DEFAULT_RESIDENCE_HALLS, DEFAULT_COLLEGES)

import numpy as np
import pytest

from reference_data import ReferenceLists, default_reference_lists
from swipe_generator import SwipeEvent, SwipeEventGenerator


@pytest.fixture
def reference_lists():
    return default_reference_lists()


@pytest.fixture
def small_reference_lists():
    return ReferenceLists.from_pairs(
        [('Alumni Hall', 'Male'), ('Dillon Hall', 'Male'), ('Badin Hall', 'Female'), ('Walsh Hall', 'Female')],
        ['School of Architecture', 'College of Science', 'Mendoza College of Business'],
    )


@pytest.fixture
def generator(reference_lists):
    return SwipeEventGenerator(reference_lists=reference_lists, rng=np.random.default_rng(1234))


@pytest.fixture
def generated_day(generator):
    return generator.generate_day()


@pytest.fixture
def business_event():
    return SwipeEvent(
        hour=12,
        location='north',
        gender='Male',
        residence_hall='Alumni Hall',
        college='Mendoza College of Business',
    )

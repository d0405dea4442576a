import pytest

from app import create_app
from reference_data import LOW_ATTENDANCE_COLLEGE


@pytest.fixture
def client(small_reference_lists):
    app = create_app({'random_seed': 11}, reference_lists=small_reference_lists)
    app.config['TESTING'] = True
    return app.test_client()


def test_filter_options(client):
    response = client.get('/api/filter-options')
    assert response.status_code == 200
    data = response.get_json()
    assert data['genders'] == ['All', 'Male', 'Female']
    assert data['residence_halls'][0] == {'name': 'All', 'gender': None}
    assert {'name': 'Badin Hall', 'gender': 'Female'} in data['residence_halls']
    assert data['colleges'][0] == 'All'
    assert LOW_ATTENDANCE_COLLEGE in data['colleges']
    assert 'Simulated' in data['dashboard_date']


def test_swipes_for_all_filters(client):
    data = client.get('/api/swipes').get_json()
    assert len(data['hours']) == 24
    assert data['filter_consistent'] is True
    assert data['total_all'] == data['total_north'] + data['total_south']
    assert data['total_all'] > 0


def test_swipes_for_contradictory_filters(client):
    data = client.get('/api/swipes?gender=Male&residence_hall=Badin%20Hall').get_json()
    assert data['filter_consistent'] is False
    assert data['total_all'] == 0
    assert data['peak_hour'] is None


def test_swipes_are_stable_until_regenerated(client):
    first = client.get('/api/swipes?gender=Female').get_json()
    second = client.get('/api/swipes?gender=Female').get_json()
    assert first == second

    response = client.post('/api/regenerate')
    assert response.status_code == 200
    assert response.get_json()['events'] > 0

    everything = client.get('/api/swipes').get_json()
    assert everything['total_all'] == response.get_json()['events']

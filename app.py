from flask import Flask, request, jsonify
from typing import Dict, Optional

from reference_data import GENDERS, ReferenceLists, default_reference_lists
from swipe_aggregator import ALL, FilterSelection, aggregate
from swipe_generator import SwipeEventGenerator

DISCLAIMER = (
    "Gender, Residence Hall, and College data are simulated "
    "and not based on actual collected swipe data."
)


class SwipeSnapshot:
    """Holds the generator and the current day's immutable event tuple."""

    def __init__(self, generator: SwipeEventGenerator):
        self.generator = generator
        self._events = None

    @property
    def events(self):
        if self._events is None:
            self._events = self.generator.generate_day()
        return self._events

    def regenerate(self):
        self._events = self.generator.generate_day()
        return self._events


def create_app(generator_config: Optional[Dict] = None,
               reference_lists: Optional[ReferenceLists] = None) -> Flask:
    """Build the dashboard API around a single simulated day."""
    app = Flask(__name__)

    reference_lists = reference_lists if reference_lists is not None else default_reference_lists()
    generator = SwipeEventGenerator(generator_config, reference_lists=reference_lists)
    snapshot = SwipeSnapshot(generator)
    app.extensions['swipe_snapshot'] = snapshot

    @app.route('/api/filter-options')
    def get_filter_options():
        """Dropdown values for the dashboard filters"""
        return jsonify({
            'genders': [ALL] + list(GENDERS),
            'residence_halls': [{'name': ALL, 'gender': None}] + [
                {'name': hall.name, 'gender': hall.gender} for hall in reference_lists.residence_halls
            ],
            'colleges': [ALL] + list(reference_lists.colleges),
            'dashboard_date': generator.config['dashboard_date'],
            'disclaimer': DISCLAIMER,
        })

    @app.route('/api/swipes')
    def get_swipes():
        """Hourly swipe counts for the selected filters"""
        try:
            selection = FilterSelection.from_mapping(request.args)
            summary = aggregate(snapshot.events, selection, reference_lists)
            return jsonify(summary.to_dict())

        except Exception as e:
            app.logger.exception("Swipe aggregation failed")
            return jsonify({'error': str(e)}), 500

    @app.route('/api/regenerate', methods=['POST'])
    def regenerate_day():
        """Draw a fresh simulated day"""
        try:
            events = snapshot.regenerate()
            return jsonify({'events': len(events), 'dashboard_date': generator.config['dashboard_date']})

        except Exception as e:
            app.logger.exception("Swipe generation failed")
            return jsonify({'error': str(e)}), 500

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)

"""
Tests for availability queries: by day, at an instant, free cabins for a slot.
"""

import pytest
from datetime import datetime

from models.cabin import update_cabin
from models.cabin_status import advance_cabin_status
from models.errors import InvalidDate, InvalidInput, InvalidTime
from models.reservation import (
    cancel_reservation, create_reservation, get_availability_at, get_availability_now,
    get_available_cabins, get_status_at, get_status_by_date, mark_reservation_occupied
)

DAY = '2025-11-10'


def _by_id(entries, key='cabin_id'):
    return {entry[key]: entry for entry in entries}


class TestStatusAt:
    """Per-cabin status at one instant."""

    def test_no_reservations_all_available(self, app, cabins):
        with app.app_context():
            result = get_availability_at(DAY, '12:00')

            assert [entry['cabin_id'] for entry in result] == [c['id'] for c in cabins]
            assert all(entry['status'] == 'available' for entry in result)
            assert all(entry['reservation_id'] is None for entry in result)

    def test_reserved_inside_window_available_after(self, app, cabins):
        """A 10:00-11:30 booking shows at 10:30 and is gone at 12:00."""
        with app.app_context():
            target = cabins[0]['id']
            reservation_id = create_reservation(target, DAY, '10:00', guest='Reyes')

            during = _by_id(get_availability_at(DAY, '10:30'))
            assert during[target]['status'] == 'reserved'
            assert during[target]['reservation_id'] == reservation_id
            assert during[target]['guest'] == 'Reyes'
            assert during[target]['start'] == '2025-11-10 10:00:00'
            assert during[target]['end'] == '2025-11-10 11:30:00'
            assert during[cabins[1]['id']]['status'] == 'available'

            after = _by_id(get_availability_at(DAY, '12:00'))
            assert after[target]['status'] == 'available'

    def test_half_open_window(self, app, cabin):
        """Start instant is inside the window, end instant is not."""
        with app.app_context():
            create_reservation(cabin['id'], DAY, '10:00', duration_minutes=60)

            assert get_availability_at(DAY, '10:00')[0]['status'] == 'reserved'
            assert get_availability_at(DAY, '10:59')[0]['status'] == 'reserved'
            assert get_availability_at(DAY, '11:00')[0]['status'] == 'available'
            assert get_availability_at(DAY, '09:59')[0]['status'] == 'available'

    def test_occupied_surfaces(self, app, cabin):
        with app.app_context():
            reservation_id = create_reservation(cabin['id'], DAY, '10:00')
            mark_reservation_occupied(reservation_id)

            assert get_availability_at(DAY, '10:15')[0]['status'] == 'occupied'

    def test_cancelled_is_ignored(self, app, cabin):
        with app.app_context():
            reservation_id = create_reservation(cabin['id'], DAY, '10:00')
            cancel_reservation(reservation_id)

            assert get_availability_at(DAY, '10:15')[0]['status'] == 'available'

    def test_manual_status_reported_separately(self, app, cabin):
        """The manual override never changes the calendar-derived status."""
        with app.app_context():
            advance_cabin_status(cabin['id'])

            entry = get_availability_at(DAY, '10:15')[0]
            assert entry['manual_status'] == 'reserved'
            assert entry['status'] == 'available'

    def test_inactive_cabins_omitted(self, app, cabins):
        with app.app_context():
            update_cabin(cabins[2]['id'], active=0)

            ids = [entry['cabin_id'] for entry in get_availability_at(DAY, '10:00')]
            assert cabins[2]['id'] not in ids

    def test_status_at_datetime(self, app, cabin):
        with app.app_context():
            create_reservation(cabin['id'], DAY, '23:00', duration_minutes=120)

            entry = get_status_at(datetime(2025, 11, 11, 0, 30))[0]
            assert entry['status'] == 'reserved'

    def test_now_returns_every_cabin(self, app, cabins):
        with app.app_context():
            assert len(get_availability_now()) == 3

    def test_invalid_date(self, app, cabin):
        with app.app_context():
            with pytest.raises(InvalidDate):
                get_availability_at('10-11-2025', '10:00')

    def test_invalid_time(self, app, cabin):
        with app.app_context():
            with pytest.raises(InvalidTime):
                get_availability_at(DAY, 'noon')


class TestStatusByDate:
    """Per-cabin status for a whole day."""

    def test_empty_day(self, app, cabins):
        with app.app_context():
            result = get_status_by_date(DAY)

            assert len(result) == 3
            for entry in result:
                assert entry['status'] == 'available'
                assert entry['reservations'] == []
                assert entry['countdown'] is None
                assert entry['seats'] == entry['capacity']

    def test_surfaces_earliest_reservation(self, app, cabin):
        with app.app_context():
            late = create_reservation(cabin['id'], DAY, '18:00', guest='Late', duration_minutes=60)
            early = create_reservation(cabin['id'], DAY, '09:00', guest='Early', duration_minutes=60)

            entry = get_status_by_date(DAY)[0]
            assert entry['status'] == 'reserved'
            assert entry['reservation_id'] == early
            assert entry['guest'] == 'Early'
            assert entry['start_time'] == '09:00:00'
            assert entry['end_time'] == '10:00:00'
            assert [r['id'] for r in entry['reservations']] == [early, late]

    def test_countdown_relative_to_now(self, app, cabin):
        with app.app_context():
            create_reservation(cabin['id'], DAY, '18:00', duration_minutes=120)

            before = get_status_by_date(DAY, now=datetime(2025, 11, 10, 17, 35))[0]
            assert before['countdown']['phase'] == 'upcoming'
            assert before['countdown']['label'] == 'Starts in 25m'

            during = get_status_by_date(DAY, now=datetime(2025, 11, 10, 18, 55))[0]
            assert during['countdown']['phase'] == 'ongoing'
            assert during['countdown']['label'] == 'Ends in 1h 5m'

            after = get_status_by_date(DAY, now=datetime(2025, 11, 10, 20, 3))[0]
            assert after['countdown']['phase'] == 'ended'
            assert after['countdown']['label'] == 'Ended 3m ago'

    def test_reservation_from_previous_day_intersects(self, app, cabin):
        with app.app_context():
            reservation_id = create_reservation(cabin['id'], '2025-11-09', '23:30', duration_minutes=60)

            entry = get_status_by_date(DAY)[0]
            assert entry['reservation_id'] == reservation_id

    def test_other_days_ignored(self, app, cabin):
        with app.app_context():
            create_reservation(cabin['id'], '2025-11-11', '10:00')

            assert get_status_by_date(DAY)[0]['status'] == 'available'

    def test_cancelled_excluded(self, app, cabin):
        with app.app_context():
            cancel_reservation(create_reservation(cabin['id'], DAY, '10:00'))

            entry = get_status_by_date(DAY)[0]
            assert entry['status'] == 'available'
            assert entry['reservations'] == []

    def test_invalid_date(self, app, cabin):
        with app.app_context():
            with pytest.raises(InvalidDate):
                get_status_by_date('2025-11-31')


class TestAvailableCabins:
    """Cabins free for a whole candidate slot."""

    def test_all_free(self, app, cabins):
        with app.app_context():
            free = get_available_cabins(DAY, '10:00', 60)

            assert [c['id'] for c in free] == [c['id'] for c in cabins]
            assert free[0]['start'] == '2025-11-10 10:00:00'
            assert free[0]['end'] == '2025-11-10 11:00:00'

    def test_booked_cabin_excluded_for_overlap_only(self, app, cabins):
        with app.app_context():
            booked = cabins[0]['id']
            create_reservation(booked, DAY, '10:00', duration_minutes=60)

            assert booked not in [c['id'] for c in get_available_cabins(DAY, '10:30', 60)]
            assert booked in [c['id'] for c in get_available_cabins(DAY, '11:00', 60)]
            assert booked in [c['id'] for c in get_available_cabins(DAY, '09:00', 60)]

    def test_party_size_filters_by_capacity(self, app, cabins):
        with app.app_context():
            free = get_available_cabins(DAY, '10:00', 60, party_size=4)

            assert sorted(c['capacity'] for c in free) == [4, 6]

    def test_invalid_duration(self, app, cabin):
        with app.app_context():
            with pytest.raises(InvalidInput):
                get_available_cabins(DAY, '10:00', 'all day')

    @pytest.mark.parametrize('duration', [99999999999, '99999999999', 7 * 24 * 60 + 1])
    def test_oversized_duration(self, app, cabin, duration):
        with app.app_context():
            with pytest.raises(InvalidInput):
                get_available_cabins(DAY, '10:00', duration)

    def test_slot_past_datetime_range(self, app, cabin):
        with app.app_context():
            with pytest.raises(InvalidInput):
                get_available_cabins('9999-12-31', '23:00', 120)

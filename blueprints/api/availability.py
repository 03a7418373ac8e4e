"""
Availability API endpoints used by the cabin grid views.
"""

from flask import current_app, request

from models.errors import BookingError
from models.reservation import (
    get_status_by_date, get_availability_at, get_availability_now, get_available_cabins
)
from utils.api_response import api_success, api_error, api_booking_error
from utils.validators import validate_positive_integer


def register_routes(bp):
    """Register availability API routes on the blueprint."""

    @bp.route('/availability/by-date', methods=['GET'])
    def availability_by_date():
        """
        Per-cabin status for a whole day, with reservation windows.

        Query params:
            date: YYYY-MM-DD (required)
        """
        date_str = request.args.get('date')
        if not date_str:
            return api_error('Missing date', 400, kind='invalid_date')

        try:
            return api_success(data=get_status_by_date(date_str), date=date_str)
        except BookingError as e:
            return api_booking_error(e)

    @bp.route('/availability', methods=['GET'])
    def availability_at():
        """
        Per-cabin status at one instant.

        Query params:
            date: YYYY-MM-DD
            time: HH:MM
            Both omitted: evaluate at the current time.
        """
        date_str = request.args.get('date')
        time_str = request.args.get('time')

        if not date_str and not time_str:
            return api_success(data=get_availability_now())

        if not date_str or not time_str:
            return api_error('Missing date or time', 400, kind='invalid_input')

        try:
            return api_success(data=get_availability_at(date_str, time_str),
                               date=date_str, time=time_str)
        except BookingError as e:
            return api_booking_error(e)

    @bp.route('/availability/free', methods=['GET'])
    def availability_free():
        """
        Cabins free for a whole candidate slot.

        Query params:
            date: YYYY-MM-DD
            time: HH:MM
            duration: Minutes (optional, default from config)
            party_size: Minimum capacity (optional)
        """
        date_str = request.args.get('date')
        time_str = request.args.get('time')
        if not date_str or not time_str:
            return api_error('Missing date or time', 400, kind='invalid_input')

        duration = request.args.get(
            'duration', current_app.config.get('BOOKING_DEFAULT_DURATION_MINUTES', 90)
        )

        party_size = request.args.get('party_size')
        if party_size:
            valid, party_size, err = validate_positive_integer(party_size, 'party_size')
            if not valid:
                return api_error(err, 400, kind='invalid_input')

        try:
            cabins = get_available_cabins(date_str, time_str, duration, party_size or None)
            return api_success(data=cabins)
        except BookingError as e:
            return api_booking_error(e)

"""
Reservation API endpoints: booking, lookup, listing and lifecycle changes.
"""

from flask import current_app, request

from models.errors import BookingError
from models.reservation import (
    BookingRequest, create_reservation_from_request, get_reservation_by_id,
    get_reservations, mark_reservation_occupied, cancel_reservation
)
from utils.api_response import api_success, api_error, api_booking_error
from utils.validators import parse_date, validate_positive_integer


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    @bp.route('/reservations', methods=['POST'])
    def reservation_create():
        """
        Book a cabin.

        Request body (JSON, or form fields as a fallback):
            cabin_id (or table_id): Cabin ID
            date: YYYY-MM-DD
            start_time: HH:MM (24-hour); H:MM AM/PM also accepted
            guest: Guest label (optional)
            duration: Minutes (optional, default 90)
            party_size: Number of guests (optional)

        Returns:
            201 {success: true, id} or {success: false, error, kind} with
            400 (validation), 404 (cabin not found), 409 (slot taken),
            500 (storage failure)
        """
        payload = request.get_json(silent=True) or request.form.to_dict()
        booking = BookingRequest.from_payload(payload)

        valid, _, err = validate_positive_integer(booking.cabin_id, 'cabin_id')
        if not valid:
            return api_error(f'Invalid cabin_id: {err}', 400, kind='invalid_input')

        try:
            reservation_id = create_reservation_from_request(booking)
            return api_success(message='Reservation created', status=201, id=reservation_id)
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error creating reservation: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    def reservation_detail(reservation_id):
        """Get reservation details."""
        reservation = get_reservation_by_id(reservation_id)
        if not reservation:
            return api_error('Reservation not found', 404, kind='not_found')
        return api_success(data=reservation)

    @bp.route('/reservations', methods=['GET'])
    def reservation_list():
        """
        List reservations.

        Query params:
            date: Only reservations intersecting this day (optional)
            cabin_id: Only this cabin (optional)
            include_cancelled: 1 to include cancelled reservations
        """
        date_str = request.args.get('date')
        reservation_date = None
        if date_str:
            reservation_date = parse_date(date_str)
            if reservation_date is None:
                return api_error('Invalid date format. Use YYYY-MM-DD', 400, kind='invalid_date')

        cabin_id = request.args.get('cabin_id')
        if cabin_id:
            valid, cabin_id, err = validate_positive_integer(cabin_id, 'cabin_id')
            if not valid:
                return api_error(err, 400, kind='invalid_input')

        include_cancelled = request.args.get('include_cancelled', '0') in ('1', 'true')

        reservations = get_reservations(
            reservation_date=reservation_date,
            cabin_id=cabin_id or None,
            include_cancelled=include_cancelled
        )
        return api_success(data=reservations)

    @bp.route('/reservations/<int:reservation_id>/occupy', methods=['POST'])
    def reservation_occupy(reservation_id):
        """Mark a reservation occupied (guest arrived)."""
        try:
            reservation = mark_reservation_occupied(reservation_id)
            return api_success(data=reservation, reservation_status=reservation['status'])
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error occupying reservation {reservation_id}: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    def reservation_cancel(reservation_id):
        """Cancel a reservation, releasing its slot."""
        try:
            reservation = cancel_reservation(reservation_id)
            return api_success(data=reservation, reservation_status=reservation['status'])
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error cancelling reservation {reservation_id}: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

"""
Cabin API endpoints: listing, administrative CRUD and the manual status
override.
"""

from flask import current_app, request

from models.cabin import (
    get_all_cabins, get_cabin_by_id, create_cabin, update_cabin, delete_cabin
)
from models.cabin_status import advance_cabin_status
from models.errors import BookingError
from utils.api_response import api_success, api_error, api_booking_error
from utils.validators import validate_positive_integer


def _request_data() -> dict:
    """JSON body, falling back to form fields."""
    return request.get_json(silent=True) or request.form.to_dict()


def register_routes(bp):
    """Register cabin API routes on the blueprint."""

    @bp.route('/cabins', methods=['GET'])
    def list_cabins():
        """
        List active cabins with their current manual status.

        Query params:
            min_capacity: Only cabins seating at least this many (optional)
        """
        min_capacity = request.args.get('min_capacity')
        if min_capacity:
            valid, min_capacity, err = validate_positive_integer(min_capacity, 'min_capacity')
            if not valid:
                return api_error(err, 400, kind='invalid_input')

        cabins = get_all_cabins(min_capacity=min_capacity or None)
        return api_success(data=cabins)

    @bp.route('/cabins/<int:cabin_id>', methods=['GET'])
    def cabin_detail(cabin_id):
        """Get one active cabin."""
        cabin = get_cabin_by_id(cabin_id)
        if not cabin or not cabin['active']:
            return api_error('Cabin not found', 404, kind='not_found')
        return api_success(data=cabin)

    @bp.route('/cabins', methods=['POST'])
    def cabin_create():
        """
        Create a cabin.

        Request body:
            name: Display name
            capacity (or seats): Positive integer
            guest: Guest label (optional)
        """
        data = _request_data()
        try:
            cabin_id = create_cabin(
                name=data.get('name'),
                capacity=data.get('capacity', data.get('seats')),
                guest=data.get('guest', '')
            )
            return api_success(message='Cabin created', status=201, id=cabin_id)
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error creating cabin: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    @bp.route('/cabins/<int:cabin_id>', methods=['PUT', 'PATCH'])
    def cabin_update(cabin_id):
        """Update name, capacity, guest label or active flag."""
        if not get_cabin_by_id(cabin_id):
            return api_error('Cabin not found', 404, kind='not_found')

        data = _request_data()
        fields = {k: data[k] for k in ('name', 'capacity', 'guest', 'active') if k in data}
        if 'seats' in data and 'capacity' not in fields:
            fields['capacity'] = data['seats']
        # Form posts send 'false' / '0' as strings
        if isinstance(fields.get('active'), str):
            fields['active'] = fields['active'].strip().lower() in ('1', 'true', 'yes', 'on')

        try:
            update_cabin(cabin_id, **fields)
            return api_success(data=get_cabin_by_id(cabin_id), message='Cabin updated')
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error updating cabin {cabin_id}: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    @bp.route('/cabins/<int:cabin_id>', methods=['DELETE'])
    def cabin_delete(cabin_id):
        """Deactivate a cabin that has no active reservations."""
        if not get_cabin_by_id(cabin_id):
            return api_error('Cabin not found', 404, kind='not_found')

        try:
            delete_cabin(cabin_id)
            return api_success(message='Cabin deleted')
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error deleting cabin {cabin_id}: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    # ============================================================================
    # MANUAL STATUS OVERRIDE
    # ============================================================================

    def _advance(cabin_id):
        try:
            new_status = advance_cabin_status(cabin_id)
            return api_success(data={'cabin_id': cabin_id, 'status': new_status}, new_status=new_status)
        except BookingError as e:
            return api_booking_error(e)
        except Exception as e:
            current_app.logger.error(f'Error advancing cabin {cabin_id} status: {e}', exc_info=True)
            return api_error('Internal server error', 500, kind='storage_failure')

    @bp.route('/cabins/<int:cabin_id>/status', methods=['POST'])
    def cabin_advance_status(cabin_id):
        """Advance the cabin one step: available -> reserved -> occupied -> available."""
        return _advance(cabin_id)

    @bp.route('/cabin-status', methods=['POST'])
    def cabin_status():
        """
        Advance a cabin's status.

        Request body:
            cabin_id (or id / table_id): Cabin ID
        """
        data = _request_data()
        raw_id = data.get('cabin_id', data.get('id', data.get('table_id')))
        valid, cabin_id, err = validate_positive_integer(raw_id, 'cabin_id')
        if not valid:
            return api_error(err, 400, kind='invalid_input')
        return _advance(cabin_id)

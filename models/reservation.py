"""
Reservation engine data access and services.

This module re-exports the public functions of the split modules:
- reservation_overlap.py: Interval overlap predicates
- reservation_crud.py: Reservation store and lifecycle updates
- reservation_booking.py: Booking service (validation + atomic insert)
- reservation_availability.py: Availability queries
- reservation_countdown.py: Countdown labels
"""

# Overlap checker
from .reservation_overlap import (
    ACTIVE_STATUSES,
    RESERVATION_STATUSES,
    Interval,
    is_active,
    intervals_overlap,
    overlaps,
    find_overlaps,
    contains_instant,
)

# Reservation store
from .reservation_crud import (
    RESERVATION_TRANSITIONS,
    serialize_reservation,
    get_reservation_by_id,
    get_reservations,
    get_active_reservations_in_window,
    change_reservation_status,
    mark_reservation_occupied,
    cancel_reservation,
)

# Booking service
from .reservation_booking import (
    BookingRequest,
    create_reservation,
    create_reservation_from_request,
)

# Availability
from .reservation_availability import (
    get_status_by_date,
    get_status_at,
    get_availability_at,
    get_availability_now,
    get_available_cabins,
)

# Countdown
from .reservation_countdown import (
    describe_countdown,
    format_duration,
)

__all__ = [
    'ACTIVE_STATUSES',
    'RESERVATION_STATUSES',
    'Interval',
    'is_active',
    'intervals_overlap',
    'overlaps',
    'find_overlaps',
    'contains_instant',
    'RESERVATION_TRANSITIONS',
    'serialize_reservation',
    'get_reservation_by_id',
    'get_reservations',
    'get_active_reservations_in_window',
    'change_reservation_status',
    'mark_reservation_occupied',
    'cancel_reservation',
    'BookingRequest',
    'create_reservation',
    'create_reservation_from_request',
    'get_status_by_date',
    'get_status_at',
    'get_availability_at',
    'get_availability_now',
    'get_available_cabins',
    'describe_countdown',
    'format_duration',
]

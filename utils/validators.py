"""
Input validation helper functions.
Provides validation for ids, counts, dates and times arriving from requests.
"""

from datetime import date, datetime, time

# Accepted start-time formats, tried in order. 24-hour first; the 12-hour
# form is a lenient fallback for hand-typed input.
TIME_FORMATS = ('%H:%M', '%H:%M:%S', '%I:%M %p')

DATE_FORMAT = '%Y-%m-%d'


def validate_positive_integer(value, field_name: str) -> tuple:
    """
    Validate that a value is (or parses as) a positive integer.

    Args:
        value: Raw value from JSON or form data
        field_name: Field name used in the error message

    Returns:
        Tuple of (is_valid, parsed_value, error_message)
    """
    if value is None or value == '':
        return False, None, f'{field_name} is required'

    # bool is an int subclass; true/false is never a valid id or count
    if isinstance(value, bool):
        return False, None, f'{field_name} must be a positive integer'

    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(value)
            parsed = int(value)
        else:
            parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return False, None, f'{field_name} must be a positive integer'

    if parsed <= 0:
        return False, None, f'{field_name} must be a positive integer'

    return True, parsed, ''


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    return parse_date(date_str) is not None


def parse_date(value) -> date:
    """
    Parse a YYYY-MM-DD string.

    Returns:
        date, or None if the value does not parse
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_time(value) -> time:
    """
    Parse a start time, trying each of TIME_FORMATS in order.

    Returns:
        time, or None if no format matches
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None

    cleaned = value.strip().upper()
    for time_format in TIME_FORMATS:
        try:
            return datetime.strptime(cleaned, time_format).time()
        except ValueError:
            continue
    return None


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized

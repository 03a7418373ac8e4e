"""
Countdown labels for reservation windows ("Starts in 25m", "Ends in 1h 5m",
"Ended 3m ago").

Nothing here is stored or scheduled: callers pass the instant to evaluate
against and re-ask whenever they want a fresh label.
"""

from datetime import datetime, timedelta

PHASE_UPCOMING = 'upcoming'
PHASE_ONGOING = 'ongoing'
PHASE_ENDED = 'ended'


def format_duration(delta: timedelta) -> str:
    """
    Render a duration as 'Xd Yh', 'Xh Ym' or 'Xm'.

    Negative durations are rendered by magnitude.
    """
    total_sec = int(abs(delta.total_seconds()))
    days = total_sec // 86400
    hours = (total_sec % 86400) // 3600
    mins = (total_sec % 3600) // 60

    if days > 0:
        return f'{days}d {hours}h'
    if hours > 0:
        return f'{hours}h {mins}m'
    return f'{mins}m'


def describe_countdown(start: datetime, end: datetime, now: datetime) -> dict:
    """
    Classify ``now`` against a reservation window.

    Args:
        start: Reservation start
        end: Reservation end
        now: Instant to evaluate at

    Returns:
        dict: {'phase': 'upcoming'|'ongoing'|'ended', 'label': str,
               'seconds': int}  (seconds until start/end, or since end)
    """
    if now < start:
        remaining = start - now
        return {
            'phase': PHASE_UPCOMING,
            'label': f'Starts in {format_duration(remaining)}',
            'seconds': int(remaining.total_seconds()),
        }

    # The end instant itself still reads as "Ends in 0m"
    if now <= end:
        remaining = end - now
        return {
            'phase': PHASE_ONGOING,
            'label': f'Ends in {format_duration(remaining)}',
            'seconds': int(remaining.total_seconds()),
        }

    elapsed = now - end
    return {
        'phase': PHASE_ENDED,
        'label': f'Ended {format_duration(elapsed)} ago',
        'seconds': int(elapsed.total_seconds()),
    }

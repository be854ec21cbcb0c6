# processors/durations.py
import re
import logging

logger = logging.getLogger(__name__)

# PT1H15M, PT45M, PT2H, PT1H30M15S, P0DT1H, P1D - every component is optional
ISO_DURATION_PATTERN = re.compile(r'P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?', re.IGNORECASE)

HOURS_PATTERN = re.compile(r'(\d+)\s*(?:hours?|hrs?)', re.IGNORECASE)
MINUTES_PATTERN = re.compile(r'(\d+)\s*(?:minutes?|mins?)', re.IGNORECASE)

TIME_LABELS = {
    'quick': '< 30 min',
    'medium': '30–60 min',
    'long': '60+ min'
}


def parse_iso_duration(iso_duration):
    """
    Parse an ISO 8601 duration to minutes

    Args:
        iso_duration (str): ISO 8601 duration string such as "PT1H15M"

    Returns:
        int: Whole minutes (seconds are ignored) or None if it doesn't parse
    """
    if not iso_duration or not isinstance(iso_duration, str):
        return None

    match = ISO_DURATION_PATTERN.fullmatch(iso_duration.strip())
    if not match:
        return None

    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    return days * 24 * 60 + hours * 60 + minutes


def format_minutes(minutes):
    """Format minutes as "45 min", "1 hr" or "1 hr 15 min"; empty for None or zero"""
    if not minutes:
        return ''
    if minutes < 60:
        return f"{minutes} min"

    hours, remainder = divmod(minutes, 60)
    if remainder:
        return f"{hours} hr {remainder} min"
    return f"{hours} hr"


def parse_time_text(time_text):
    """
    Parse time text like "30 mins" or "1 hr 15 mins" into minutes

    Args:
        time_text (str): Time text to parse

    Returns:
        int: Time in minutes or None if parsing fails
    """
    if not time_text:
        return None

    total_minutes = 0

    hr_match = HOURS_PATTERN.search(time_text)
    if hr_match:
        total_minutes += int(hr_match.group(1)) * 60

    min_match = MINUTES_PATTERN.search(time_text)
    if min_match:
        total_minutes += int(min_match.group(1))

    return total_minutes if total_minutes > 0 else None


def sum_minutes(*parts):
    """Add up the known parts; None unless at least one part is present and nonzero"""
    known = [part for part in parts if part]
    if not known:
        return None
    return sum(known)


def time_category(total_minutes):
    """Bucket a total time into 'quick', 'medium' or 'long'"""
    if total_minutes is None:
        return None
    if total_minutes < 30:
        return 'quick'
    if total_minutes <= 60:
        return 'medium'
    return 'long'

# processors/nutrition.py
import math
import re
import logging

logger = logging.getLogger(__name__)

NUTRITION_FIELDS = ('calories', 'protein', 'carbs', 'fat')

# First integer or decimal run, e.g. "350" in "350 kcal" or "12.5" in "12.5 g"
NUMBER_PATTERN = re.compile(r'\d+(?:\.\d+)?')


def empty_nutrition():
    """Return a fresh nutrition dict with every value unknown"""
    return {
        'calories': None,
        'protein': None,
        'carbs': None,
        'fat': None,
        'per_serving': True
    }


def has_nutrition(nutrition):
    """True if at least one nutrition value is known"""
    if not nutrition:
        return False
    return any(nutrition.get(field) is not None for field in NUTRITION_FIELDS)


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def parse_numeric_value(value):
    """
    Parse a nutrition value like "350 kcal" or "25g" into a whole number

    Args:
        value (str|int|float): Raw value from structured data or OCR text

    Returns:
        int: Rounded value, or None if no usable number was found
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            return None
        return _round_half_up(value)

    match = NUMBER_PATTERN.search(str(value))
    if not match:
        return None

    return _round_half_up(float(match.group(0)))

# processors/ocr_parser.py
"""
Parse raw OCR text from a recipe photo or screenshot into recipe fields.

This is heuristic: it looks for section headers, ingredient-looking lines,
numbered steps and time/serving callouts. It never rejects input; garbage in
gives a mostly empty recipe out, and the user reviews the draft anyway.
"""
import re
import logging
from processors.durations import parse_time_text, sum_minutes
from processors.nutrition import empty_nutrition
from processors.recipe_processor import RecipeProcessor, empty_recipe

logger = logging.getLogger(__name__)

# Lines that open a section
INGREDIENT_HEADER = re.compile(r"^(ingredients|what you.?ll need|you.?ll need|shopping list)\s*:?\s*$", re.IGNORECASE)
INSTRUCTION_HEADER = re.compile(
    r"^(instructions|directions|method|steps|preparation|how to make|how to cook|procedure)\s*:?\s*$",
    re.IGNORECASE
)

# Leading quantity, fraction glyph, small spelled-out number or measure word
INGREDIENT_LINE = re.compile(
    r"^(\d|½|⅓|⅔|¼|¾|⅛|⅜|⅝|⅞|one\b|two\b|three\b|four\b|five\b|six\b|a\s|pinch|dash|handful|bunch)",
    re.IGNORECASE
)

# "Step 2", "Step 2:", "2.", "2)", "2:" followed by the step text
NUMBERED_STEP = re.compile(r"^\s*(?:step\s*\d+[.):]?|\d+[.):](?!\d))\s*", re.IGNORECASE)

# Bullets and checkbox glyphs OCR picks up in front of ingredients
BULLET_PREFIX = re.compile(r"^(?:\[\s*[xX✓✔]?\s*\]|[-*•●○◦▪▸►–—✓✔✗☐☑☒]|[xX](?=\s))\s*")

DURATION = r"\d+\s*(?:hours?|hrs?)(?:\s*(?:and\s*)?\d+\s*(?:minutes?|mins?))?|\d+\s*(?:minutes?|mins?)"

TIME_PATTERN = re.compile(
    r"(?:\b(cook|bake|roast|grill|simmer|fry|prep|total)\s*(?:time)?\s*:?\s*)?(" + DURATION + r")\b",
    re.IGNORECASE
)

SERVING_PATTERN = re.compile(r"\b(?:serves?|servings?|yield|makes|portions?)\s*:?\s*(\d+(?:\s*-\s*\d+)?)", re.IGNORECASE)

CALORIE_PATTERN = re.compile(r"(\d+)\s*(?:kcal|calories?|cals?)\b", re.IGNORECASE)


def parse_ocr_text(raw_text):
    """
    Split raw OCR text into a normalized recipe

    Args:
        raw_text (str): Text produced by the OCR engine for one image

    Returns:
        dict: Normalized recipe; the default empty recipe if there is no text
    """
    if not isinstance(raw_text, str):
        return empty_recipe()

    lines = [line.strip() for line in raw_text.split('\n')]
    lines = [line for line in lines if line]

    if not lines:
        return empty_recipe()

    full_text = ' '.join(lines)

    recipe = {
        'servings': _extract_servings(full_text),
        'nutrition': _extract_nutrition(full_text)
    }
    recipe.update(_extract_times(full_text))
    recipe.update(_parse_sections(lines))

    logger.info(f"Parsed OCR text ({len(lines)} lines) into '{recipe['title']}': "
                f"{len(recipe['ingredients'])} ingredients, {len(recipe['instructions'])} steps")

    return RecipeProcessor().process_recipe(recipe)


def _extract_servings(text):
    match = SERVING_PATTERN.search(text)
    if not match:
        return ''
    return re.sub(r'\s+', '', match.group(1))


def _extract_times(text):
    """
    Classify every time callout in the text

    "prep" callouts become the prep time, "total" callouts the total, and
    anything else (including a bare duration) the cook time. Later callouts
    of the same kind win.
    """
    cook_time = ''
    prep_time = ''
    total_minutes = None

    for match in TIME_PATTERN.finditer(text):
        duration = match.group(2)
        context = match.group(0).lower()
        if 'prep' in context:
            prep_time = duration
        elif 'total' in context:
            minutes = parse_time_text(duration)
            if minutes:
                total_minutes = minutes
        else:
            cook_time = duration

    if not total_minutes:
        total_minutes = sum_minutes(parse_time_text(cook_time), parse_time_text(prep_time))

    return {
        'cook_time': cook_time,
        'prep_time': prep_time,
        'total_time_minutes': total_minutes
    }


def _extract_nutrition(text):
    nutrition = empty_nutrition()
    match = CALORIE_PATTERN.search(text)
    if match:
        nutrition['calories'] = int(match.group(1))
    return nutrition


def _looks_like_time(line):
    """
    A time statement names a cue word ("Prep time: 10 min") or is nothing
    but a duration ("45 minutes"); "30 Minute Chicken Curry" is a title
    """
    if TIME_PATTERN.fullmatch(line.rstrip(".!")):
        return True
    return any(match.group(1) for match in TIME_PATTERN.finditer(line))


def _looks_like_servings(line):
    return SERVING_PATTERN.search(line) is not None


def _clean_ingredient_line(line):
    return BULLET_PREFIX.sub('', line, count=1).strip()


def _strip_step_marker(line):
    return NUMBERED_STEP.sub('', line, count=1).strip()


def _parse_sections(lines):
    """
    Walk the lines once, tracking which section we are in

    States: 'title' until a title is found, then 'unknown' until a header or
    a recognizable ingredient/step line, then 'ingredients' or
    'instructions'. Header lines only switch state and are not kept.
    """
    mode = 'title'
    title = ''
    ingredients = []
    instructions = []

    for line in lines:
        if INGREDIENT_HEADER.match(line):
            mode = 'ingredients'
            continue
        if INSTRUCTION_HEADER.match(line):
            mode = 'instructions'
            continue

        if mode == 'title':
            if len(line) > 2 and not _looks_like_time(line) and not _looks_like_servings(line):
                title = line
                mode = 'unknown'
            continue

        if mode == 'ingredients':
            if NUMBERED_STEP.match(line) and ingredients:
                mode = 'instructions'
                instructions.append(_strip_step_marker(line))
            else:
                ingredients.append(_clean_ingredient_line(line))
            continue

        if mode == 'instructions':
            instructions.append(_strip_step_marker(line))
            continue

        # Unknown: decide from the line itself, skip metadata and noise
        if INGREDIENT_LINE.match(line):
            mode = 'ingredients'
            ingredients.append(_clean_ingredient_line(line))
        elif NUMBERED_STEP.match(line):
            mode = 'instructions'
            instructions.append(_strip_step_marker(line))

    return {
        'title': title,
        'ingredients': ingredients,
        'instructions': instructions
    }

# processors/classifier.py
"""
Keyword classification of recipes by main protein and cooking method.

Both detectors walk an ordered table and return the first category whose
pattern matches, so the order of the table is the precedence: a recipe with
chicken and beef is classified as chicken.
"""
import re
import logging

logger = logging.getLogger(__name__)

PROTEIN_TYPES = ['chicken', 'beef', 'pork', 'fish', 'seafood', 'tofu', 'eggs', 'none']

COOKING_METHODS = ['air-fryer', 'oven', 'stovetop', 'grill', 'slow-cooker', 'instant-pot', 'no-cook', 'other']

PROTEIN_LABELS = {
    'chicken': 'Chicken',
    'beef': 'Beef',
    'pork': 'Pork',
    'fish': 'Fish',
    'seafood': 'Seafood',
    'tofu': 'Plant-Based',
    'eggs': 'Eggs',
    'none': 'No Protein'
}

METHOD_LABELS = {
    'air-fryer': 'Air Fryer',
    'oven': 'Oven',
    'stovetop': 'Stovetop',
    'grill': 'Grill',
    'slow-cooker': 'Slow Cooker',
    'instant-pot': 'Instant Pot',
    'no-cook': 'No-Cook',
    'other': 'Other'
}

# Egg mentions that are only a glaze or a side use don't make eggs the protein
EGG_EXCLUSION_PATTERN = re.compile(r'\begg wash\b|\begg whites?\s+for')


def _eggs_as_protein(text):
    return re.search(r'\beggs?\b', text) is not None and not EGG_EXCLUSION_PATTERN.search(text)


PROTEIN_RULES = [
    ('chicken', re.compile(r'\bchicken\b').search),
    ('beef', re.compile(r'\b(?:beef|steak|ribs|brisket|sirloin|ribeye)\b').search),
    ('pork', re.compile(r'\b(?:pork|bacon|ham|sausage)\b').search),
    ('fish', re.compile(r'\b(?:salmon|tuna|cod|tilapia|halibut|trout|fish)\b').search),
    ('seafood', re.compile(r'\b(?:shrimp|lobster|crab|scallop|seafood|clam|mussel)\b').search),
    ('tofu', re.compile(r'\b(?:tofu|tempeh|seitan|plant.?based)\b').search),
    ('eggs', _eggs_as_protein),
]

METHOD_RULES = [
    ('air-fryer', re.compile(r'\bair\s*fryer\b|\bair.?fry\b').search),
    ('slow-cooker', re.compile(r'\bslow\s*cooker\b|\bcrock\s*pot\b').search),
    ('instant-pot', re.compile(r'\binstant\s*pot\b|\bpressure\s*cook\b').search),
    ('grill', re.compile(r'\b(?:grill|grilled|grilling|bbq|barbecue)\b').search),
    ('oven', re.compile(r'\b(?:oven|bake|broil|roast)\b').search),
    ('stovetop', re.compile(r'\b(?:skillet|sauté|saute|pan|wok|simmer|boil|stovetop|stove|fry)\b').search),
    ('no-cook', re.compile(r'\bno.?cook\b|\braw\b|\bassembl').search),
]


def _join_text(parts):
    return ' '.join(part for part in parts if isinstance(part, str)).lower()


def detect_protein(ingredients):
    """
    Detect the main protein of a recipe from its ingredient lines

    Args:
        ingredients (list): Ingredient strings

    Returns:
        str: One of PROTEIN_TYPES, 'none' when nothing matches
    """
    text = _join_text(ingredients or [])

    for protein, matches in PROTEIN_RULES:
        if matches(text):
            return protein

    return 'none'


def detect_method(instructions, title=''):
    """
    Detect the cooking method from instruction steps and the recipe title

    Args:
        instructions (list): Instruction strings
        title (str): Recipe title

    Returns:
        str: One of COOKING_METHODS, 'other' when nothing matches
    """
    text = _join_text(list(instructions or []) + [title or ''])

    for method, matches in METHOD_RULES:
        if matches(text):
            return method

    return 'other'

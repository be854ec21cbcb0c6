# processors/recipe_processor.py
import re
import logging
from processors.classifier import detect_protein, detect_method, PROTEIN_TYPES, COOKING_METHODS
from processors.nutrition import empty_nutrition, parse_numeric_value, NUTRITION_FIELDS

logger = logging.getLogger(__name__)

TEXT_FIELDS = ['title', 'description', 'photo_url', 'servings', 'cook_time', 'prep_time', 'source_url', 'video_url']


def empty_recipe():
    """Return the default record: every text field empty, no lists, no numbers"""
    recipe = {field: '' for field in TEXT_FIELDS}
    recipe.update({
        'ingredients': [],
        'instructions': [],
        'total_time_minutes': None,
        'nutrition': empty_nutrition(),
        'protein_type': 'none',
        'cooking_method': 'other'
    })
    return recipe


class RecipeProcessor:
    """Turn the raw fields collected by an extractor into a normalized recipe"""

    def process_recipe(self, raw_recipe):
        """
        Build a normalized recipe from raw extracted fields

        Missing or malformed fields fall back to their empty values, the
        ingredient and instruction lists are cleaned, and the protein type and
        cooking method are detected from the cleaned lists unless the raw
        fields already name a valid category.

        Args:
            raw_recipe (dict): Fields collected by a scraper or parser

        Returns:
            dict: Normalized recipe
        """
        recipe = empty_recipe()

        for field in TEXT_FIELDS:
            recipe[field] = self._clean_text(raw_recipe.get(field))

        recipe['ingredients'] = self._clean_lines(raw_recipe.get('ingredients'))
        recipe['instructions'] = self._clean_lines(raw_recipe.get('instructions'))
        recipe['total_time_minutes'] = self._clean_minutes(raw_recipe.get('total_time_minutes'))
        recipe['nutrition'] = self._process_nutrition(raw_recipe.get('nutrition'))

        protein_type = raw_recipe.get('protein_type')
        if protein_type not in PROTEIN_TYPES:
            protein_type = detect_protein(recipe['ingredients'])
        recipe['protein_type'] = protein_type

        cooking_method = raw_recipe.get('cooking_method')
        if cooking_method not in COOKING_METHODS:
            cooking_method = detect_method(recipe['instructions'], recipe['title'])
        recipe['cooking_method'] = cooking_method

        logger.debug(f"Processed recipe '{recipe['title']}': {len(recipe['ingredients'])} ingredients, "
                     f"{len(recipe['instructions'])} steps, {recipe['protein_type']}/{recipe['cooking_method']}")
        return recipe

    def _clean_text(self, value):
        if value is None or isinstance(value, (dict, list, bool)):
            return ''
        return re.sub(r'\s+', ' ', str(value)).strip()

    def _clean_lines(self, lines):
        """Drop non-string, empty and whitespace-only entries, keeping order"""
        if not isinstance(lines, list):
            return []

        cleaned = []
        for line in lines:
            if not isinstance(line, str):
                continue
            line = line.strip()
            if line:
                cleaned.append(line)
        return cleaned

    def _clean_minutes(self, minutes):
        if minutes is None or isinstance(minutes, bool):
            return None
        if isinstance(minutes, int):
            return minutes if minutes >= 0 else None
        return parse_numeric_value(minutes)

    def _process_nutrition(self, nutrition):
        processed = empty_nutrition()
        if not isinstance(nutrition, dict):
            return processed

        for field in NUTRITION_FIELDS:
            processed[field] = parse_numeric_value(nutrition.get(field))

        per_serving = nutrition.get('per_serving', True)
        processed['per_serving'] = per_serving if isinstance(per_serving, bool) else True
        return processed

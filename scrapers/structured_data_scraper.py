# scrapers/structured_data_scraper.py
import html
import json
import logging
import requests
from bs4 import BeautifulSoup

import config
from scrapers import BaseScraper, ScrapeError
from processors.durations import parse_iso_duration, format_minutes, sum_minutes
from processors.nutrition import empty_nutrition, parse_numeric_value
from processors.recipe_processor import RecipeProcessor

logger = logging.getLogger(__name__)

VIDEO_IFRAME_SELECTOR = 'iframe[src*="youtube.com"], iframe[src*="youtu.be"], iframe[src*="vimeo.com"]'
VIDEO_LINK_SELECTOR = 'a[href*="youtube.com/watch"], a[href*="youtu.be/"]'

# Schema.org nutrition keys mapped to our nutrition keys
NUTRITION_KEYS = {
    'calories': 'calories',
    'proteinContent': 'protein',
    'carbohydrateContent': 'carbs',
    'fatContent': 'fat'
}


class StructuredDataScraper(BaseScraper):
    """Scrape a recipe from any page that embeds schema.org Recipe JSON-LD"""

    def __init__(self, timeout=None):
        self.headers = {
            'User-Agent': config.USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
        }
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.processor = RecipeProcessor()

    def scrape(self, url):
        """
        Fetch a recipe page once and extract the recipe from it

        Args:
            url (str): Absolute URL of the recipe page

        Returns:
            dict: Normalized recipe

        Raises:
            ScrapeError: On a non-2xx response, a network error or anything
                unexpected while reading the page
        """
        logger.info(f"Scraping recipe: {url}")

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {str(e)}")
            raise ScrapeError(str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Error accessing recipe URL: {url} - Status: {response.status_code}")
            raise ScrapeError(f"Failed to fetch URL: {response.status_code} {response.reason or ''}".strip(),
                              status_code=response.status_code)

        try:
            return self._extract_recipe_info(response.text, url)
        except Exception as e:
            logger.error(f"Error extracting recipe info from {url}: {str(e)}", exc_info=True)
            raise ScrapeError(str(e)) from e

    def extract_from_html(self, html_content, url=''):
        """Extract a recipe from an already fetched page, without any network access"""
        return self._extract_recipe_info(html_content, url)

    def _extract_recipe_info(self, html_content, url):
        """
        Extract structured recipe information from HTML

        Uses the first schema.org Recipe found in the page's JSON-LD blocks;
        without one, falls back to the page's title/description/image meta tags.

        Args:
            html_content (str): HTML content of the recipe page
            url (str): URL of the recipe

        Returns:
            dict: Normalized recipe
        """
        soup = BeautifulSoup(html_content or '', 'lxml')
        recipe_data = find_recipe_data(soup)

        if recipe_data is None:
            logger.warning(f"No JSON-LD Recipe found in {url}, falling back to meta tags")
            recipe = extract_page_metadata(soup)
            recipe.update({
                'source_url': url,
                'video_url': extract_video_url(soup, None),
                'protein_type': 'none',
                'cooking_method': 'other'
            })
            return self.processor.process_recipe(recipe)

        prep_minutes = parse_iso_duration(recipe_data.get('prepTime'))
        cook_minutes = parse_iso_duration(recipe_data.get('cookTime'))
        total_minutes = parse_iso_duration(recipe_data.get('totalTime')) or sum_minutes(prep_minutes, cook_minutes)

        recipe = {
            'title': _text(recipe_data.get('name')),
            'description': _text(recipe_data.get('description')),
            'ingredients': parse_ingredients(recipe_data.get('recipeIngredient')),
            'instructions': parse_instructions(recipe_data.get('recipeInstructions')),
            'photo_url': extract_image_url(recipe_data.get('image')),
            'servings': extract_servings(recipe_data),
            'prep_time': format_minutes(prep_minutes),
            'cook_time': format_minutes(cook_minutes),
            'total_time_minutes': total_minutes,
            'source_url': url,
            'video_url': extract_video_url(soup, recipe_data),
            'nutrition': parse_nutrition(recipe_data.get('nutrition'))
        }

        logger.info(f"Successfully extracted recipe: {recipe['title']}")
        return self.processor.process_recipe(recipe)


def _text(value):
    """Plain text from a JSON-LD string value; '' for anything else"""
    if not isinstance(value, str):
        return ''
    return html.unescape(value).strip()


def _has_type(item, schema_type):
    """@type may be a single name or a list of names"""
    item_type = item.get('@type')
    if isinstance(item_type, list):
        return schema_type in item_type
    return item_type == schema_type


def _flatten_candidates(data):
    """Yield every object in a JSON-LD payload: a single object, an array, or an @graph wrapper"""
    if isinstance(data, list):
        for item in data:
            yield from _flatten_candidates(item)
    elif isinstance(data, dict):
        graph = data.get('@graph')
        if isinstance(graph, list):
            yield from _flatten_candidates(graph)
        else:
            yield data


def find_recipe_data(soup):
    """
    Find the first schema.org Recipe object among the page's JSON-LD blocks

    Args:
        soup (BeautifulSoup): Parsed page

    Returns:
        dict: The Recipe object, or None if the page has none
    """
    for script in soup.find_all('script', {'type': 'application/ld+json'}):
        payload = script.string or script.get_text()
        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            logger.debug(f"Skipping malformed JSON-LD block: {str(e)}")
            continue

        for item in _flatten_candidates(data):
            if _has_type(item, 'Recipe'):
                return item

    return None


def parse_ingredients(raw):
    if not isinstance(raw, list):
        return []
    return [_text(item) for item in raw if isinstance(item, str)]


def parse_instructions(raw):
    """
    Flatten recipeInstructions into a list of step strings

    Handles a newline separated string, a list of strings, a list of
    HowToStep objects (text, else name) and HowToSection objects whose steps
    sit under itemListElement. Anything else is skipped.
    """
    if isinstance(raw, str):
        return [step.strip() for step in _text(raw).split('\n') if step.strip()]

    if isinstance(raw, dict):
        raw = [raw]

    if not isinstance(raw, list):
        return []

    steps = []
    for item in raw:
        if isinstance(item, str):
            steps.extend(parse_instructions(item))
        elif isinstance(item, dict):
            if _has_type(item, 'HowToSection'):
                steps.extend(parse_instructions(item.get('itemListElement')))
            elif isinstance(item.get('text'), str):
                steps.append(_text(item['text']))
            elif isinstance(item.get('name'), str):
                steps.append(_text(item['name']))
        else:
            logger.debug(f"Skipping instruction entry of type {type(item).__name__}")

    return [step for step in steps if step]


def extract_image_url(image):
    """Image URL from a string, a list (first entry) or an ImageObject"""
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get('url')
    if isinstance(image, str):
        return image.strip()
    return ''


def extract_servings(recipe_data):
    servings = recipe_data.get('recipeYield')
    if servings in (None, '', []):
        servings = recipe_data.get('yield')
    if isinstance(servings, list):
        servings = servings[0] if servings else None
    if servings is None or isinstance(servings, (dict, list, bool)):
        return ''
    return str(servings).strip()


def parse_nutrition(raw):
    nutrition = empty_nutrition()
    if not isinstance(raw, dict):
        return nutrition

    for schema_key, key in NUTRITION_KEYS.items():
        nutrition[key] = parse_numeric_value(raw.get(schema_key))

    return nutrition


def _video_object_url(video):
    if isinstance(video, list):
        video = video[0] if video else None
    if not isinstance(video, dict):
        return ''
    for key in ('embedUrl', 'contentUrl', 'url'):
        if isinstance(video.get(key), str) and video[key].strip():
            return video[key].strip()
    return ''


def extract_video_url(soup, recipe_data):
    """
    Find a recipe video: the Recipe's own VideoObject first, then an
    embedded YouTube/Vimeo player, then a plain YouTube link
    """
    if recipe_data:
        video_url = _video_object_url(recipe_data.get('video'))
        if video_url:
            return video_url

    iframe = soup.select_one(VIDEO_IFRAME_SELECTOR)
    if iframe and iframe.get('src'):
        return iframe['src']

    link = soup.select_one(VIDEO_LINK_SELECTOR)
    if link and link.get('href'):
        return link['href']

    return ''


def _meta_content(soup, selector):
    tag = soup.select_one(selector)
    if tag and tag.get('content'):
        return tag['content'].strip()
    return ''


def extract_page_metadata(soup):
    """Title, description and image from Open Graph / standard meta tags"""
    title = _meta_content(soup, 'meta[property="og:title"]')
    if not title and soup.title:
        title = soup.title.get_text().strip()

    description = (_meta_content(soup, 'meta[property="og:description"]')
                   or _meta_content(soup, 'meta[name="description"]'))

    return {
        'title': title,
        'description': description,
        'photo_url': _meta_content(soup, 'meta[property="og:image"]')
    }

# recipe_import.py
"""
Entry points for turning user input into a recipe draft.

Input is validated here, before any extractor runs. The returned draft is
never saved by these functions; callers decide whether to store it.
"""
import logging
from urllib.parse import urlparse

from scrapers.structured_data_scraper import StructuredDataScraper
from processors.ocr_parser import parse_ocr_text

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    """Raised for missing or malformed user input"""
    pass


def import_from_url(url, scraper=None):
    """
    Scrape a recipe draft from a web page

    Args:
        url (str): Absolute http(s) URL of the recipe page
        scraper (BaseScraper, optional): Scraper to use instead of the JSON-LD scraper

    Returns:
        dict: Normalized recipe

    Raises:
        InputValidationError: If the URL is missing or malformed
        ScrapeError: If the page can't be fetched
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise InputValidationError('URL is required')

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InputValidationError('Invalid URL format')

    scraper = scraper or StructuredDataScraper()
    return scraper.scrape(url)


def import_from_ocr_text(ocr_text):
    """
    Parse a recipe draft from the text an OCR engine read off a recipe image

    Raises:
        InputValidationError: If there is no text to parse
    """
    if not ocr_text or not isinstance(ocr_text, str) or not ocr_text.strip():
        raise InputValidationError('ocr_text is required')

    logger.info(f"Parsing {len(ocr_text)} characters of OCR text")
    return parse_ocr_text(ocr_text)

# scrapers/__init__.py
from abc import ABC, abstractmethod

DEFAULT_ERROR_MESSAGE = 'Failed to scrape recipe'


class ScrapeError(Exception):
    """Raised when a recipe page can't be fetched or read"""

    def __init__(self, message=None, status_code=None):
        super().__init__(message or DEFAULT_ERROR_MESSAGE)
        self.status_code = status_code


class BaseScraper(ABC):
    """Abstract base class for all scrapers"""

    @abstractmethod
    def scrape(self, url):
        """
        Fetch a recipe page and extract the recipe from it

        Args:
            url (str): Absolute URL of the recipe page

        Returns:
            dict: Normalized recipe

        Raises:
            ScrapeError: If the page can't be fetched
        """
        pass

    @abstractmethod
    def _extract_recipe_info(self, content, url):
        """
        Extract structured recipe information from content

        Args:
            content: Source-specific content (HTML, JSON, etc.)
            url (str): Where the content came from

        Returns:
            dict: Normalized recipe
        """
        pass

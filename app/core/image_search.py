"""Image lookup through the Google Custom Search JSON API."""

import logging

import httpx

from app.core.errors import NoResultsError, ParseError, UpstreamError
from app.models.schemas import ImageResult
from config.settings import Settings

logger = logging.getLogger(__name__)


class GoogleImageSearch:
    """Finds the first image result for a free-text query."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        engine_id: str,
        search_url: str = "https://www.googleapis.com/customsearch/v1"
    ):
        self._http = http_client
        self._api_key = api_key
        self._engine_id = engine_id
        self._search_url = search_url

    async def search(self, query: str) -> ImageResult:
        """Return the link and thumbnail of the first image result."""
        params = {
            "key": self._api_key,
            "cx": self._engine_id,
            "q": query,
            "searchType": "image",
        }
        logger.info(f"Searching images for {query!r}")

        try:
            response = await self._http.get(self._search_url, params=params)
        except httpx.RequestError as e:
            raise UpstreamError(f"Google API request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            raise UpstreamError(
                f"Google API error: {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("Google API returned invalid JSON") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            raise NoResultsError("No results found on Google")
        if not isinstance(items, list):
            raise ParseError("Google API returned an unexpected result list")

        try:
            first = items[0]
            return ImageResult(url=first["link"], thumb=first["image"]["thumbnailLink"])
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError("Google result is missing its link or thumbnail") from e


def build_image_search(settings: Settings, http_client: httpx.AsyncClient) -> GoogleImageSearch:
    """Create the image search client configured by ``settings``."""
    if not settings.google_api_key or not settings.google_cse_id:
        logger.warning("Google API key or search engine id missing; image requests will fail upstream")
    return GoogleImageSearch(
        http_client,
        api_key=settings.google_api_key,
        engine_id=settings.google_cse_id,
        search_url=settings.search_url,
    )

"""Request handlers for recipe generation and image lookup.

Each handler validates its input, makes exactly one outbound call and turns
the outcome into a ``HandlerResult``. Handlers never raise: every failure is
normalized into an ``{"error": ...}`` body.
"""

from dataclasses import dataclass
from typing import Optional

from app.core.errors import InvalidRequestError, normalize_error
from app.core.image_search import GoogleImageSearch
from app.core.recipe_source import RecipeSource

RECIPE_PARAM = "foodName"
IMAGE_PARAM = "foodOrIngName"


@dataclass
class HandlerResult:
    """Response body plus how to send it."""
    body: dict
    status_code: int = 200
    pretty: bool = True

    @property
    def is_error(self) -> bool:
        return "error" in self.body


def _failure(exc: BaseException, strict: bool) -> HandlerResult:
    error, status = normalize_error(exc, strict=strict)
    # Missing-parameter bodies go out compact, downstream failures pretty-printed.
    return HandlerResult(error.to_body(), status, pretty=not isinstance(exc, InvalidRequestError))


async def generate_recipe(
    source: RecipeSource,
    food_name: Optional[str],
    strict: bool = False
) -> HandlerResult:
    """Generate a structured recipe for ``food_name``."""
    try:
        if not food_name:
            raise InvalidRequestError(RECIPE_PARAM)
        recipe = await source.generate(food_name)
    except Exception as e:
        return _failure(e, strict)
    return HandlerResult(recipe)


async def lookup_image(
    search: GoogleImageSearch,
    query: Optional[str],
    strict: bool = False
) -> HandlerResult:
    """Find an image and thumbnail for ``query``."""
    try:
        if not query:
            raise InvalidRequestError(IMAGE_PARAM)
        result = await search.search(query)
    except Exception as e:
        return _failure(e, strict)
    return HandlerResult(result.model_dump())

"""Core application modules."""

from .handlers import HandlerResult, generate_recipe, lookup_image
from .image_search import GoogleImageSearch
from .recipe_source import RecipeSource, OpenAIRecipeSource, MockRecipeSource

__all__ = [
    "HandlerResult",
    "generate_recipe",
    "lookup_image",
    "GoogleImageSearch",
    "RecipeSource",
    "OpenAIRecipeSource",
    "MockRecipeSource"
]

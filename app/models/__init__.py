"""API models for the Recipe Proxy application."""

from .schemas import (
    Ingredient,
    Recipe,
    IllustratedIngredient,
    IllustratedRecipe,
    ImageResult,
    ErrorResponse
)

__all__ = [
    "Ingredient",
    "Recipe",
    "IllustratedIngredient",
    "IllustratedRecipe",
    "ImageResult",
    "ErrorResponse"
]

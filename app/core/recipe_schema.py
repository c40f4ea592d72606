"""JSON-schema descriptors for structured recipe generation."""

import copy
from dataclasses import dataclass
from typing import Dict, Type

from pydantic import BaseModel

from app.models.schemas import Recipe, IllustratedRecipe


def _string(description: str) -> dict:
    return {"type": "string", "description": description}


def _object(properties: dict) -> dict:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


_INGREDIENT_PROPERTIES = {
    "name": _string("The name of the ingredient."),
    "amount": _string("The amount of the ingredient required."),
    "description": _string("A description of the ingredient."),
}

CLASSIC_RECIPE_SCHEMA = {
    "name": "recipe",
    "schema": _object({
        "name": _string("The name of the recipe."),
        "description": _string("A brief description of the recipe."),
        "ingredients": {
            "type": "array",
            "description": "A list of ingredients for the recipe.",
            "items": _object(dict(_INGREDIENT_PROPERTIES)),
        },
        "instructions": {
            "type": "array",
            "description": "Step-by-step instructions to prepare the recipe.",
            "items": _string("A single step in the recipe's preparation."),
        },
    }),
    "strict": True,
}

ILLUSTRATED_RECIPE_SCHEMA = {
    "name": "recipe",
    "schema": _object({
        "name": _string("The name of the recipe."),
        "description": _string("A brief description of the recipe."),
        "ingredients": {
            "type": "array",
            "description": "A list of ingredients for the recipe.",
            "items": _object({
                **_INGREDIENT_PROPERTIES,
                "imageUrl": _string("A link to a picture of the ingredient."),
            }),
        },
        "instructions": _string("Instructions to prepare the recipe, with all tips and tricks."),
    }),
    "strict": True,
}


@dataclass(frozen=True)
class RecipeSchemaVariant:
    """A named recipe schema paired with the model that validates it."""
    name: str
    json_schema: dict
    model: Type[BaseModel]

    def response_format(self) -> dict:
        """Build the ``response_format`` argument for a chat completion."""
        # Callers get their own copy; the module-level schema is never handed out.
        return {"type": "json_schema", "json_schema": copy.deepcopy(self.json_schema)}


SCHEMA_VARIANTS: Dict[str, RecipeSchemaVariant] = {
    "classic": RecipeSchemaVariant("classic", CLASSIC_RECIPE_SCHEMA, Recipe),
    "illustrated": RecipeSchemaVariant("illustrated", ILLUSTRATED_RECIPE_SCHEMA, IllustratedRecipe),
}


def get_schema_variant(name: str) -> RecipeSchemaVariant:
    """Look up a schema variant by name."""
    try:
        return SCHEMA_VARIANTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown recipe variant: {name!r} (expected one of {', '.join(SCHEMA_VARIANTS)})"
        ) from None

"""Pydantic models for API request/response schemas."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """A single ingredient line of a generated recipe."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="The name of the ingredient.")
    amount: str = Field(description="The amount of the ingredient required.")
    description: str = Field(description="A description of the ingredient.")


class Recipe(BaseModel):
    """Structured recipe returned by the completion service."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="The name of the recipe.")
    description: str = Field(description="A brief description of the recipe.")
    ingredients: List[Ingredient] = Field(description="A list of ingredients for the recipe.")
    instructions: List[str] = Field(description="Step-by-step instructions to prepare the recipe.")


class IllustratedIngredient(BaseModel):
    """Ingredient line carrying a picture of the ingredient."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="The name of the ingredient.")
    amount: str = Field(description="The amount of the ingredient required.")
    description: str = Field(description="A description of the ingredient.")
    imageUrl: str = Field(description="A link to a picture of the ingredient.")


class IllustratedRecipe(BaseModel):
    """Recipe variant with per-ingredient images and prose instructions."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="The name of the recipe.")
    description: str = Field(description="A brief description of the recipe.")
    ingredients: List[IllustratedIngredient] = Field(description="A list of ingredients for the recipe.")
    instructions: str = Field(description="Instructions to prepare the recipe.")


class ImageResult(BaseModel):
    """Response body for the /getImage endpoint."""
    url: str = Field(description="Link to the full-size image")
    thumb: str = Field(description="Link to the image thumbnail")


class ErrorResponse(BaseModel):
    """The only failure shape returned to callers."""
    error: str = Field(description="Human-readable failure description")
    kind: Optional[str] = Field(default=None, description="Machine-readable failure kind (strict mode only)")

    def to_body(self) -> dict:
        """Serialize, leaving out ``kind`` when it is not set."""
        return self.model_dump(exclude_none=True)

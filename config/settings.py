"""
Configuration settings for the Recipe Proxy application.
Credentials are read from the environment; everything else has a working default.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    app_name: str = "Recipe Proxy"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 5000

    # Completion service (OpenAI-compatible endpoint)
    completion_base_url: str = "https://models.inference.ai.azure.com"
    completion_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("RECIPE_COMPLETION_API_KEY", "GITHUB_TOKEN", "completion_api_key"),
    )
    completion_model: str = "gpt-4o"
    completion_timeout: float = 60.0
    store_completions: bool = True

    # Sampling settings
    temperature: float = 1.0
    top_p: float = 1.0
    max_tokens: int = 4096

    # Image search (Google Custom Search)
    search_url: str = "https://www.googleapis.com/customsearch/v1"
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("RECIPE_GOOGLE_API_KEY", "GOOGLE_API_KEY", "google_api_key"),
    )
    google_cse_id: str = Field(
        default="",
        validation_alias=AliasChoices("RECIPE_GOOGLE_CSE_ID", "GOOGLE_CSE_ID", "google_cse_id"),
    )
    search_timeout: float = 10.0

    # Recipe schema variant: "classic" or "illustrated"
    recipe_variant: Literal["classic", "illustrated"] = "classic"

    # Map each failure kind to its own status code and expose "kind"
    strict_errors: bool = False

    # Serve canned recipes without calling the completion service
    use_mock: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "RECIPE_"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Prompt templates for recipe generation
PROMPT_TEMPLATES = {
    "chef_system": (
        "please give me a promising recipe, it can be from famous chefs. "
        "it should be detailed with all tips and tricks."
    ),
    "recipe_request": "recipe of {food_name}",
}

"""Recipe sources backed by a structured chat-completion service."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from app.core.errors import (
    EmptyResponseError,
    IncompleteGenerationError,
    ParseError,
    RefusedError,
    UpstreamError,
)
from app.core.recipe_schema import RecipeSchemaVariant, get_schema_variant
from config.settings import PROMPT_TEMPLATES, Settings

logger = logging.getLogger(__name__)


class RecipeSource(ABC):
    """Abstract base class for recipe sources."""

    @abstractmethod
    async def generate(self, food_name: str) -> dict:
        """Generate a recipe for ``food_name`` matching the source's schema variant."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get model name."""
        pass

    async def aclose(self) -> None:
        """Release network resources held by the source."""


class OpenAIRecipeSource(RecipeSource):
    """Generates recipes through an OpenAI-compatible chat completion endpoint."""

    def __init__(self, client: AsyncOpenAI, variant: RecipeSchemaVariant, settings: Settings):
        self._client = client
        self._variant = variant
        self._model = settings.completion_model
        self._temperature = settings.temperature
        self._top_p = settings.top_p
        self._max_tokens = settings.max_tokens
        self._store = settings.store_completions

    @property
    def variant(self) -> RecipeSchemaVariant:
        return self._variant

    def build_request(self, food_name: str) -> dict:
        """Assemble the keyword arguments of the completion call."""
        return {
            "model": self._model,
            "response_format": self._variant.response_format(),
            "store": self._store,
            "messages": [
                {"role": "system", "content": PROMPT_TEMPLATES["chef_system"]},
                {"role": "user", "content": PROMPT_TEMPLATES["recipe_request"].format(food_name=food_name)},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "top_p": self._top_p,
        }

    async def generate(self, food_name: str) -> dict:
        logger.info(f"Requesting {self._variant.name} recipe for {food_name!r} from {self._model}")
        try:
            completion = await self._client.chat.completions.create(**self.build_request(food_name))
        except openai.APIStatusError as e:
            raise UpstreamError(e.message, upstream_status=e.status_code) from e
        except openai.APIError as e:
            raise UpstreamError(e.message or "Completion service unavailable") from e

        if not completion.choices:
            raise EmptyResponseError()

        choice = completion.choices[0]
        if choice.finish_reason == "length":
            raise IncompleteGenerationError()

        message = choice.message
        if getattr(message, "refusal", None):
            logger.info(f"Model refused recipe for {food_name!r}: {message.refusal}")
            raise RefusedError()
        if not message.content:
            raise EmptyResponseError()

        return self.parse_content(message.content)

    def parse_content(self, content: str) -> dict:
        """Parse and validate structured content, returning it unmodified."""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(f"Response content is not valid JSON: {e.msg}") from e

        try:
            self._variant.model.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                f"Response content does not match the {self._variant.name} recipe schema "
                f"({e.error_count()} errors)"
            ) from e
        return data

    def get_model_name(self) -> str:
        return self._model

    async def aclose(self) -> None:
        await self._client.close()


class MockRecipeSource(RecipeSource):
    """Canned recipes for offline development and demos."""

    def __init__(self, variant: Optional[RecipeSchemaVariant] = None):
        self._variant = variant or get_schema_variant("classic")
        self._name = "mock-recipe-model"

    async def generate(self, food_name: str) -> dict:
        steps = [
            f"Gather and prepare everything you need for the {food_name}.",
            "Season generously and taste as you go.",
            "Cook until done, then rest briefly before serving.",
        ]
        ingredients = [
            {"name": food_name, "amount": "1 portion", "description": f"The star of this {food_name} recipe."},
            {"name": "salt", "amount": "to taste", "description": "Fine sea salt."},
        ]
        if self._variant.name == "illustrated":
            for ingredient in ingredients:
                ingredient["imageUrl"] = ""
            instructions = " ".join(steps)
        else:
            instructions = steps

        return {
            "name": f"Simple {food_name}",
            "description": f"A straightforward take on {food_name}.",
            "ingredients": ingredients,
            "instructions": instructions,
        }

    def get_model_name(self) -> str:
        return self._name


def build_recipe_source(settings: Settings) -> RecipeSource:
    """Create the recipe source selected by ``settings``."""
    variant = get_schema_variant(settings.recipe_variant)

    if settings.use_mock:
        logger.info("Using mock recipe source")
        return MockRecipeSource(variant)

    if not settings.completion_api_key:
        logger.warning("No completion API key configured; recipe requests will fail upstream")

    client = AsyncOpenAI(
        base_url=settings.completion_base_url,
        api_key=settings.completion_api_key or "missing",
        timeout=settings.completion_timeout,
        max_retries=0,
    )
    return OpenAIRecipeSource(client, variant, settings)

"""Unit tests for the recipe sources."""

import asyncio
import json
import sys
from pathlib import Path

import httpx
import openai
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.errors import (
    EmptyResponseError,
    IncompleteGenerationError,
    ParseError,
    RefusedError,
    UpstreamError,
)
from app.core.recipe_schema import get_schema_variant
from app.core.recipe_source import MockRecipeSource, OpenAIRecipeSource, build_recipe_source
from app.models.schemas import IllustratedRecipe, Recipe
from config.settings import Settings
from tests.mock_openai import LASAGNA, MockOpenAI, make_completion, recipe_completion


def make_source(client, variant="classic", **overrides):
    settings = Settings(**overrides)
    return OpenAIRecipeSource(client, get_schema_variant(variant), settings)


class TestRequestShape:
    """Tests for the outbound completion request."""

    def test_single_call_with_fixed_parameters(self):
        """Test that one request carries the schema, prompts and sampling settings."""
        client = MockOpenAI(recipe_completion())
        source = make_source(client)

        asyncio.run(source.generate("lasagna"))

        assert len(client.completions.calls) == 1
        request = client.completions.calls[0]
        assert request["model"] == "gpt-4o"
        assert request["temperature"] == 1.0
        assert request["top_p"] == 1.0
        assert request["max_tokens"] == 4096
        assert request["response_format"]["type"] == "json_schema"
        assert request["response_format"]["json_schema"]["strict"] is True

    def test_messages(self):
        """Test the chef preamble and the user query format."""
        client = MockOpenAI(recipe_completion())
        source = make_source(client)

        asyncio.run(source.generate("pad thai"))

        messages = client.completions.calls[0]["messages"]
        assert [m["role"] for m in messages] == ["system", "user"]
        assert "recipe" in messages[0]["content"]
        assert "chefs" in messages[0]["content"]
        assert messages[1]["content"] == "recipe of pad thai"

    def test_schema_forbids_extra_properties(self):
        """Test that the schema sent is strict at every object level."""
        source = make_source(MockOpenAI(recipe_completion()))

        schema = source.build_request("soup")["response_format"]["json_schema"]["schema"]

        assert schema["additionalProperties"] is False
        assert schema["required"] == ["name", "description", "ingredients", "instructions"]
        item = schema["properties"]["ingredients"]["items"]
        assert item["additionalProperties"] is False
        assert item["required"] == ["name", "amount", "description"]

    def test_request_schema_is_a_copy(self):
        """Test that mutating one request leaves the next untouched."""
        source = make_source(MockOpenAI(recipe_completion()))

        first = source.build_request("soup")
        first["response_format"]["json_schema"]["schema"]["required"].clear()
        second = source.build_request("soup")

        assert second["response_format"]["json_schema"]["schema"]["required"]


class TestResponseInterpretation:
    """Tests for turning completions into recipes or errors."""

    def test_valid_content_returned_unmodified(self):
        """Test that schema-conformant content comes back as-is, order kept."""
        source = make_source(MockOpenAI(recipe_completion()))

        recipe = asyncio.run(source.generate("lasagna"))

        assert recipe == LASAGNA
        assert list(recipe) == ["name", "description", "ingredients", "instructions"]
        assert [i["name"] for i in recipe["ingredients"]] == [i["name"] for i in LASAGNA["ingredients"]]

    def test_length_truncation_wins(self):
        """Test that truncation is reported even when content is present."""
        completion = make_completion(content='{"name": "Lasa', finish_reason="length")
        source = make_source(MockOpenAI(completion))

        with pytest.raises(IncompleteGenerationError, match="Incomplete response"):
            asyncio.run(source.generate("lasagna"))

    def test_refusal_skips_content(self):
        """Test that a refusal is reported without parsing content."""
        completion = make_completion(content="not json at all", refusal="I can't help with that.")
        source = make_source(MockOpenAI(completion))

        with pytest.raises(RefusedError, match="refused"):
            asyncio.run(source.generate("lasagna"))

    def test_no_content(self):
        """Test that an empty message is reported as empty."""
        source = make_source(MockOpenAI(make_completion(content=None)))

        with pytest.raises(EmptyResponseError, match="No response content"):
            asyncio.run(source.generate("lasagna"))

    def test_no_choices(self):
        """Test a completion without choices."""
        completion = make_completion()
        completion.choices = []
        source = make_source(MockOpenAI(completion))

        with pytest.raises(EmptyResponseError):
            asyncio.run(source.generate("lasagna"))

    def test_invalid_json(self):
        """Test that unparsable content becomes a parse error."""
        source = make_source(MockOpenAI(make_completion(content="{not json")))

        with pytest.raises(ParseError, match="not valid JSON"):
            asyncio.run(source.generate("lasagna"))

    def test_extra_field_rejected(self):
        """Test that content with unexpected fields is rejected."""
        bad = dict(LASAGNA, servings=4)
        source = make_source(MockOpenAI(recipe_completion(bad)))

        with pytest.raises(ParseError, match="classic recipe schema"):
            asyncio.run(source.generate("lasagna"))

    def test_missing_ingredient_field_rejected(self):
        """Test that ingredients missing an amount are rejected."""
        bad = dict(LASAGNA, ingredients=[{"name": "egg", "description": "Large."}])
        source = make_source(MockOpenAI(recipe_completion(bad)))

        with pytest.raises(ParseError):
            asyncio.run(source.generate("lasagna"))

    def test_status_error_becomes_upstream_error(self):
        """Test that an HTTP error from the service keeps its status code."""
        request = httpx.Request("POST", "https://models.example/chat/completions")
        response = httpx.Response(429, request=request)
        error = openai.APIStatusError("Rate limit reached", response=response, body=None)
        source = make_source(MockOpenAI(error=error))

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(source.generate("lasagna"))

        assert exc_info.value.upstream_status == 429
        assert "Rate limit reached" in exc_info.value.message

    def test_timeout_becomes_upstream_error(self):
        """Test that a timed-out call is reported as an upstream failure."""
        request = httpx.Request("POST", "https://models.example/chat/completions")
        source = make_source(MockOpenAI(error=openai.APITimeoutError(request=request)))

        with pytest.raises(UpstreamError, match="timed out"):
            asyncio.run(source.generate("lasagna"))


class TestIllustratedVariant:
    """Tests for the schema variant with images and prose instructions."""

    def test_illustrated_content_accepted(self):
        """Test that the illustrated variant validates its own shape."""
        recipe = {
            "name": "Tomato Salad",
            "description": "Summer on a plate.",
            "ingredients": [
                {"name": "tomato", "amount": "4", "description": "Ripe.", "imageUrl": "http://img/tomato"},
            ],
            "instructions": "Slice, salt, drizzle with olive oil.",
        }
        client = MockOpenAI(recipe_completion(recipe))
        source = make_source(client, variant="illustrated")

        assert asyncio.run(source.generate("tomato salad")) == recipe
        schema = client.completions.calls[0]["response_format"]["json_schema"]["schema"]
        assert schema["properties"]["instructions"]["type"] == "string"
        assert "imageUrl" in schema["properties"]["ingredients"]["items"]["required"]

    def test_classic_content_rejected_by_illustrated(self):
        """Test that list instructions do not pass the illustrated schema."""
        source = make_source(MockOpenAI(recipe_completion()), variant="illustrated")

        with pytest.raises(ParseError, match="illustrated"):
            asyncio.run(source.generate("lasagna"))

    def test_unknown_variant(self):
        """Test that unknown variant names are refused."""
        with pytest.raises(ValueError, match="Unknown recipe variant"):
            get_schema_variant("deluxe")


class TestMockRecipeSource:
    """Tests for the offline recipe source."""

    def test_classic_mock_matches_schema(self):
        recipe = asyncio.run(MockRecipeSource().generate("risotto"))

        assert Recipe.model_validate(recipe).name == "Simple risotto"

    def test_illustrated_mock_matches_schema(self):
        source = MockRecipeSource(get_schema_variant("illustrated"))

        recipe = asyncio.run(source.generate("risotto"))

        assert isinstance(IllustratedRecipe.model_validate(recipe).instructions, str)

    def test_factory_honours_use_mock(self):
        source = build_recipe_source(Settings(use_mock=True))

        assert isinstance(source, MockRecipeSource)

    def test_factory_builds_openai_source(self):
        settings = Settings(completion_api_key="token", completion_model="gpt-4o-mini", use_mock=False)

        source = build_recipe_source(settings)

        assert isinstance(source, OpenAIRecipeSource)
        assert source.get_model_name() == "gpt-4o-mini"
        asyncio.run(source.aclose())

    def test_factory_ignores_environment_when_mock_disabled(self, monkeypatch):
        """Test that an explicit use_mock=False wins over RECIPE_USE_MOCK."""
        monkeypatch.setenv("RECIPE_USE_MOCK", "true")

        source = build_recipe_source(Settings(completion_api_key="token", use_mock=False))

        assert isinstance(source, OpenAIRecipeSource)
        asyncio.run(source.aclose())

    def test_factory_reads_use_mock_from_environment(self, monkeypatch):
        monkeypatch.setenv("RECIPE_USE_MOCK", "true")

        assert isinstance(build_recipe_source(Settings()), MockRecipeSource)


class TestRecipeRoundTrip:
    """Tests for Recipe serialization."""

    def test_json_round_trip_preserves_order(self):
        recipe = Recipe.model_validate(LASAGNA)

        restored = Recipe.model_validate(json.loads(recipe.model_dump_json()))

        assert restored == recipe
        assert [i.name for i in restored.ingredients] == ["lasagna sheets", "ground beef", "parmesan"]
